from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from zerah.core.core import Service
from zerah.core.modules.user.models import User
from zerah.core.modules.user.validators import validate_email
from zerah.errors import NotFoundError, ValidationError
from zerah.utils import normalize_email

logger = structlog.get_logger(__name__)


class UserService(Service):
    """Looks up, registers and updates users by email."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("email", 1)], unique=True)

    async def get_user(self, user_id: UUID) -> User:
        user = User.from_mongo(await self._collection.find_one({"_id": user_id}))
        if user is None:
            raise NotFoundError(f"User '{user_id}' not found")
        return user

    async def find_user_by_email(self, email: str) -> User | None:
        return User.from_mongo(await self._collection.find_one({"email": normalize_email(email)}))

    async def get_or_create_user(self, email: str) -> User:
        """Return the user owning the email, registering it on first login."""
        email = normalize_email(email)
        validate_email(email)

        user = await self.find_user_by_email(email)
        if user is not None:
            return user

        user = User(email=email)
        try:
            await self._collection.insert_one(user.to_mongo())
        except DuplicateKeyError:
            # Registered concurrently by another request
            existing = await self.find_user_by_email(email)
            if existing is None:
                raise
            return existing
        logger.info("user_created", user_id=str(user.id), email=email)
        return user

    async def update_user(self, user_id: UUID, name: str | None, email: str) -> User:
        """Replace the user's display name and email.

        A blank name clears it. The email must not belong to another user.
        """
        email = normalize_email(email)
        validate_email(email)
        name = name.strip() if name else None

        try:
            result = await self._collection.update_one(
                {"_id": user_id}, {"$set": {"name": name or None, "email": email}}
            )
        except DuplicateKeyError as e:
            raise ValidationError("Email is already in use") from e
        if result.matched_count == 0:
            raise NotFoundError(f"User '{user_id}' not found")

        logger.info("user_updated", user_id=str(user_id), email=email)
        return await self.get_user(user_id)
