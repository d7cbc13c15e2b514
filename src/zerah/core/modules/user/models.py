from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from zerah.core.db import MongoModel
from zerah.utils import now


class User(MongoModel):
    """User identified by a verified email address."""

    email: str
    name: str | None = None
    created_at: datetime = Field(default_factory=now)


class UserView(BaseModel):
    """User account information (API representation)."""

    id: UUID = Field(..., description="User ID")
    email: str = Field(..., description="Email address")
    name: str | None = Field(None, description="Display name")

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls(id=user.id, email=user.email, name=user.name)
