import secrets
from datetime import timedelta
from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from zerah.core.core import Service
from zerah.core.modules.otp.models import OTP_LENGTH, OtpCode
from zerah.core.modules.otp.validators import validate_code
from zerah.core.modules.user.validators import validate_email
from zerah.errors import NotFoundOrExpiredError
from zerah.utils import normalize_email, now

logger = structlog.get_logger(__name__)


def generate_code() -> str:
    """Random numeric code without a leading zero."""
    low = 10 ** (OTP_LENGTH - 1)
    return str(low + secrets.randbelow(9 * low))


class OtpService(Service):
    """Issues and consumes one-time login codes.

    Reissue is two separate writes (invalidate, then insert). A consume that
    lands between them can still succeed with the previous code; that
    window is accepted rather than locked.
    """

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("otp_codes")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("email", 1), ("used", 1)])

    async def issue_code(self, email: str) -> str:
        """Invalidate outstanding codes for the email, store a new one and send it.

        Raises:
            ValidationError: If the email is malformed (nothing is written)
            DeliveryError: If the email could not be sent (the code stays stored)
        """
        email = normalize_email(email)
        validate_email(email)

        result = await self._collection.update_many({"email": email, "used": False}, {"$set": {"used": True}})

        otp = OtpCode(
            email=email,
            code=generate_code(),
            expires_at=now() + timedelta(minutes=self.core.config.otp_ttl_minutes),
        )
        await self._collection.insert_one(otp.to_mongo())
        logger.info("otp_issued", email=email, superseded=result.modified_count)

        await self.core.services.mailer.send_otp_email(email, otp.code)
        return otp.code

    async def consume_code(self, email: str, code: str) -> bool:
        """Mark a matching, unexpired, unused code as used.

        Raises:
            ValidationError: If the email or code is malformed
            NotFoundOrExpiredError: If no usable code matches
        """
        email = normalize_email(email)
        validate_email(email)
        code = code.strip()
        validate_code(code)

        document = await self._collection.find_one(
            {"email": email, "code": code, "used": False},
            sort=[("created_at", -1)],
        )
        otp = OtpCode.from_mongo(document)
        if otp is None or otp.expires_at <= now():
            logger.info("otp_rejected", email=email)
            raise NotFoundOrExpiredError

        # Conditional on used=False so two concurrent consumes cannot both win
        result = await self._collection.update_one({"_id": otp.id, "used": False}, {"$set": {"used": True}})
        if result.modified_count == 0:
            logger.info("otp_rejected", email=email)
            raise NotFoundOrExpiredError

        logger.info("otp_consumed", email=email)
        return True
