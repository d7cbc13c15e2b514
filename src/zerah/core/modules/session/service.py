from datetime import timedelta
from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from zerah.core.core import Service
from zerah.core.modules.session.codec import SessionCodec
from zerah.core.modules.session.models import AuthToken, Session, SessionPayload
from zerah.utils import now

logger = structlog.get_logger(__name__)


class SessionService(Service):
    """Service for managing user sessions.

    Tokens are self-contained: ``resolve`` trusts the signed claims and never
    reads the store. A session revoked by ``revoke_all_sessions`` therefore
    stays usable through an already-issued token until that token expires.
    The window is bounded by ``session_ttl_days``.
    """

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("sessions")
        self._codec: SessionCodec | None = None

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("user_id", 1)])
        # TTL index drops records once expires_at has passed
        await self._collection.create_index([("expires_at", 1)], expireAfterSeconds=0)

    @property
    def codec(self) -> SessionCodec:
        if self._codec is None:
            self._codec = SessionCodec(self.core.config.session_secret_key)
        return self._codec

    async def create_session(self, user_id: str, email: str | None = None) -> AuthToken:
        """Persist a new session and return its signed token."""
        expires_at = now() + timedelta(days=self.core.config.session_ttl_days)
        session = Session(user_id=user_id, expires_at=expires_at)
        await self._collection.insert_one(session.to_mongo())
        logger.info("session_created", user_id=user_id, expires_at=expires_at.isoformat())
        return self.codec.encrypt(SessionPayload(user_id=user_id, email=email, expires_at=expires_at))

    async def revoke_all_sessions(self, user_id: str) -> int:
        """Delete every session of a user and return how many were removed."""
        result = await self._collection.delete_many({"user_id": user_id})
        logger.info("sessions_revoked", user_id=user_id, count=result.deleted_count)
        return result.deleted_count

    def resolve(self, auth_token: str | None) -> SessionPayload | None:
        return self.codec.decrypt(auth_token)
