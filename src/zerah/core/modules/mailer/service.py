import asyncio
import smtplib
from email.message import EmailMessage
from typing import Any

import structlog
from liquid import Environment

from zerah.core.core import Service
from zerah.core.modules.mailer.templates import OTP_HTML_TEMPLATE, OTP_SUBJECT, OTP_TEXT_TEMPLATE
from zerah.errors import DeliveryError
from zerah.utils import now

logger = structlog.get_logger(__name__)

_env = Environment()


def render_template(template: str, **context: Any) -> str:
    """Render a Liquid template string.

    Raises:
        ValueError: If template rendering fails
    """
    try:
        return _env.from_string(template).render(**context)
    except Exception as e:
        logger.exception("template_render_failed", error=str(e), template=template[:100])
        raise ValueError(f"Failed to render template: {e}") from e


def build_otp_message(sender: str, recipient: str, code: str, ttl_minutes: int) -> EmailMessage:
    context = {"code": code, "ttl_minutes": ttl_minutes, "year": now().year}
    msg = EmailMessage()
    msg["From"] = sender
    msg["To"] = recipient
    msg["Subject"] = OTP_SUBJECT
    msg.set_content(render_template(OTP_TEXT_TEMPLATE, **context))
    msg.add_alternative(render_template(OTP_HTML_TEMPLATE, **context), subtype="html")
    return msg


class MailerService(Service):
    """Delivers login codes over SMTP."""

    async def send_otp_email(self, email: str, code: str) -> None:
        """Send a login code.

        Raises:
            DeliveryError: If SMTP is not configured or the send fails
        """
        config = self.core.config
        if not config.smtp_host:
            if config.debug:
                logger.warning("smtp_not_configured", email=email)
                return
            raise DeliveryError("Email delivery is not configured")

        sender = config.smtp_from or config.smtp_username or ""
        message = build_otp_message(sender, email, code, config.otp_ttl_minutes)
        try:
            await asyncio.to_thread(self._send, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.exception("otp_email_failed", email=email, error=str(e))
            raise DeliveryError("Failed to send OTP email") from e
        logger.info("otp_email_sent", email=email)

    def _send(self, message: EmailMessage) -> None:
        config = self.core.config
        with smtplib.SMTP(config.smtp_host, config.smtp_port, timeout=10) as server:
            if config.smtp_use_tls:
                server.starttls()
            if config.smtp_username and config.smtp_password:
                server.login(config.smtp_username, config.smtp_password)
            server.send_message(message)
