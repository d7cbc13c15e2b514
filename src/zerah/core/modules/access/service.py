import structlog

from zerah.core.core import Service
from zerah.core.modules.access.gate import GateDecision, decide
from zerah.core.modules.session.models import SessionPayload
from zerah.errors import AuthenticationError

logger = structlog.get_logger(__name__)


class AccessService(Service):
    def ensure_authenticated(self, auth_token: str | None) -> SessionPayload:
        """Return the session behind a token, raise AuthenticationError if there is none."""
        session = self.core.services.session.resolve(auth_token)
        if session is None:
            raise AuthenticationError("Not authenticated")
        return session

    def check_request(self, path: str, auth_token: str | None) -> GateDecision:
        """Run the access gate for a page request."""
        session = self.core.services.session.resolve(auth_token)
        decision = decide(path, session, has_cookie=bool(auth_token))
        if decision.is_redirect:
            logger.debug("access_gate_redirect", path=path, location=decision.location)
        return decision
