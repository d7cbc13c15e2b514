import re

from zerah.core.modules.otp.models import OTP_LENGTH
from zerah.errors import ValidationError

CODE_RE = re.compile(rf"^[0-9]{{{OTP_LENGTH}}}$")


def validate_code(code: str) -> None:
    """Validate that a submitted code has the issued shape (six digits)."""
    if not code or not CODE_RE.fullmatch(code):
        raise ValidationError(f"Code must be {OTP_LENGTH} digits")
