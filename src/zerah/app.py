from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any
from uuid import UUID

from pymongo.asynchronous.database import AsyncDatabase

from zerah.config import Config
from zerah.core.core import Core
from zerah.core.modules.access.gate import GateDecision
from zerah.core.modules.session.models import AuthToken, SessionPayload
from zerah.core.modules.user.models import UserView
from zerah.errors import AuthenticationError, NotFoundError


class App:
    """Facade for all application operations, checks authentication before delegating to Core."""

    def __init__(self, config: Config, database: AsyncDatabase[dict[str, Any]] | None = None) -> None:
        self._core = Core(config, database)

    @property
    def config(self) -> Config:
        return self._core.config

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def request_otp(self, email: str) -> None:
        """Issue a login code and email it. The code is never returned to the caller."""
        await self._core.services.otp.issue_code(email)

    async def verify_otp(self, email: str, code: str) -> tuple[AuthToken, UserView]:
        """Consume a login code, registering the user on first login, and open a session."""
        await self._core.services.otp.consume_code(email, code)
        user = await self._core.services.user.get_or_create_user(email)
        token = await self._core.services.session.create_session(str(user.id), user.email)
        return token, UserView.from_domain(user)

    async def logout(self, auth_token: str | None) -> None:
        """Revoke every session of the token's user. No-op without a valid session."""
        session = self._core.services.session.resolve(auth_token)
        if session is not None:
            await self._core.services.session.revoke_all_sessions(session.user_id)

    def resolve_session(self, auth_token: str | None) -> SessionPayload | None:
        return self._core.services.session.resolve(auth_token)

    def check_access(self, path: str, auth_token: str | None) -> GateDecision:
        return self._core.services.access.check_request(path, auth_token)

    async def get_current_user(self, auth_token: str | None) -> UserView:
        """Get the user behind the session token."""
        session = self._core.services.access.ensure_authenticated(auth_token)
        try:
            user = await self._core.services.user.get_user(UUID(session.user_id))
        except (ValueError, NotFoundError) as e:
            raise AuthenticationError("Invalid or expired session") from e
        return UserView.from_domain(user)

    async def update_current_user(self, auth_token: str | None, name: str | None, email: str) -> UserView:
        """Update the display name and email of the user behind the session token."""
        session = self._core.services.access.ensure_authenticated(auth_token)
        try:
            user = await self._core.services.user.update_user(UUID(session.user_id), name, email)
        except (ValueError, NotFoundError) as e:
            raise AuthenticationError("Invalid or expired session") from e
        return UserView.from_domain(user)
