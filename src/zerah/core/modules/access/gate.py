"""Route-level access decisions.

Every page request is classified against static route tables and the
caller's session; the outcome is a ``GateDecision`` the web layer applies.
API routes and static assets are never gated: API endpoints authorize
themselves.
"""

import re
from enum import StrEnum

from pydantic import BaseModel

from zerah.core.modules.session.models import SessionPayload

PROTECTED_PREFIXES = ("/dashboard", "/habits")
PUBLIC_PATHS = frozenset({"/login", "/"})
LOGIN_PATH = "/login"
LANDING_PATH = "/dashboard"

EXCLUDED_PATH_RE = re.compile(
    r"^/(?:api|static|_next/static|_next/image)(?:/|$)|\.(?:png|jpe?g|svg|gif|webp|ico)$",
    re.IGNORECASE,
)


class RouteKind(StrEnum):
    PROTECTED = "protected"
    PUBLIC = "public"
    OTHER = "other"


class GateAction(StrEnum):
    ALLOW = "allow"
    REDIRECT = "redirect"


class GateDecision(BaseModel):
    """What to do with a request, plus whether to drop its session cookie."""

    action: GateAction
    location: str | None = None
    clear_cookie: bool = False

    @property
    def is_redirect(self) -> bool:
        return self.action == GateAction.REDIRECT


def is_excluded(path: str) -> bool:
    """Whether the path bypasses the gate (API, static assets, images)."""
    return bool(EXCLUDED_PATH_RE.search(path))


def classify_path(path: str) -> RouteKind:
    if any(path.startswith(prefix) for prefix in PROTECTED_PREFIXES):
        return RouteKind.PROTECTED
    if path in PUBLIC_PATHS:
        return RouteKind.PUBLIC
    return RouteKind.OTHER


def decide(path: str, session: SessionPayload | None, has_cookie: bool = False) -> GateDecision:
    """Decide the fate of a request.

    ``has_cookie`` tells whether a session cookie was sent at all; a cookie
    that did not resolve to a session is cleared whatever the outcome.
    """
    clear_cookie = has_cookie and session is None
    kind = classify_path(path)

    if kind == RouteKind.PROTECTED and session is None:
        return GateDecision(action=GateAction.REDIRECT, location=LOGIN_PATH, clear_cookie=clear_cookie)

    if kind == RouteKind.PUBLIC and session is not None and path != LANDING_PATH:
        return GateDecision(action=GateAction.REDIRECT, location=LANDING_PATH)

    return GateDecision(action=GateAction.ALLOW, clear_cookie=clear_cookie)
