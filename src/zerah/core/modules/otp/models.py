"""One-time login codes."""

from datetime import datetime

from pydantic import Field

from zerah.core.db import MongoModel
from zerah.utils import now

OTP_LENGTH = 6


class OtpCode(MongoModel):
    """Code emailed to a user to prove ownership of the address.

    Indexed on (email, used). Never deleted here; superseded and consumed
    codes are only flagged as used.
    """

    email: str
    code: str
    created_at: datetime = Field(default_factory=now)
    expires_at: datetime
    used: bool = False
