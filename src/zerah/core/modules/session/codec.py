"""Signed session token encoding.

Tokens are HS256 JWTs. Decoding never raises: every failure is reported
as a non-valid ``TokenStatus`` and callers see "no session".
"""

import structlog
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError
from pydantic import ValidationError as PydanticValidationError

from zerah.core.modules.session.models import AuthToken, DecodedToken, SessionPayload, TokenStatus
from zerah.utils import now

logger = structlog.get_logger(__name__)

ALGORITHM = "HS256"


class SessionCodec:
    def __init__(self, secret_key: str) -> None:
        if not secret_key:
            raise ValueError("Session secret key must not be empty")
        self._secret_key = secret_key

    def encrypt(self, payload: SessionPayload) -> AuthToken:
        """Serialize and sign a session payload."""
        claims = {
            "sub": payload.user_id,
            "expires_at": payload.expires_at.isoformat(),
            "exp": int(payload.expires_at.timestamp()),
        }
        if payload.email is not None:
            claims["email"] = payload.email
        return AuthToken(jwt.encode(claims, self._secret_key, algorithm=ALGORITHM))

    def decode(self, token: str | None) -> DecodedToken:
        """Verify a token and report why it was rejected, if it was."""
        if not token:
            return DecodedToken(status=TokenStatus.MISSING)

        try:
            claims = jwt.decode(token, self._secret_key, algorithms=[ALGORITHM])
        except ExpiredSignatureError:
            return DecodedToken(status=TokenStatus.EXPIRED)
        except JWTError:
            return DecodedToken(status=TokenStatus.INVALID)

        try:
            payload = SessionPayload(
                user_id=claims["sub"],
                email=claims.get("email"),
                expires_at=claims["expires_at"],
            )
        except (KeyError, PydanticValidationError):
            return DecodedToken(status=TokenStatus.INVALID)

        # exp is whole seconds; expires_at is authoritative
        if payload.expires_at <= now():
            return DecodedToken(status=TokenStatus.EXPIRED)

        return DecodedToken(status=TokenStatus.VALID, payload=payload)

    def decrypt(self, token: str | None) -> SessionPayload | None:
        """Return the payload of a valid token, or None for anything else."""
        decoded = self.decode(token)
        if not decoded.is_valid:
            if decoded.status != TokenStatus.MISSING:
                logger.debug("session_token_rejected", status=decoded.status)
            return None
        return decoded.payload
