"""Session management models."""

from datetime import datetime
from enum import StrEnum
from typing import NewType

from pydantic import AwareDatetime, BaseModel, Field

from zerah.core.db import MongoModel
from zerah.utils import now

AuthToken = NewType("AuthToken", str)

SESSION_COOKIE_NAME = "session"


class Session(MongoModel):
    """Server-side record of a login.

    Indexed on user_id and expires_at (TTL, dropped once expired).
    """

    user_id: str
    created_at: datetime = Field(default_factory=now)
    expires_at: datetime


class SessionPayload(BaseModel):
    """Claims carried inside a session token."""

    user_id: str
    email: str | None = None
    expires_at: AwareDatetime


class TokenStatus(StrEnum):
    """Outcome of decoding a session token."""

    VALID = "valid"
    EXPIRED = "expired"
    INVALID = "invalid"
    MISSING = "missing"


class DecodedToken(BaseModel):
    status: TokenStatus
    payload: SessionPayload | None = None

    @property
    def is_valid(self) -> bool:
        return self.status == TokenStatus.VALID
