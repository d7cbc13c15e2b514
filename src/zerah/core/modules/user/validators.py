from zerah.errors import ValidationError
from zerah.utils import is_email


def validate_email(email: str) -> None:
    """Validate email address shape.

    Requirements:
    - Exactly one ``@`` separating a non-empty local part and domain
    - At least one dot in the domain
    - No whitespace characters

    Raises:
        ValidationError: If the address is malformed
    """
    if not email or not is_email(email):
        raise ValidationError("Invalid email address")
