import re
from datetime import UTC, datetime

# local@domain with at least one dot in the domain, no whitespace
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_email(value: str) -> bool:
    return bool(EMAIL_RE.fullmatch(value))


def normalize_email(value: str) -> str:
    return value.strip().lower()


def now() -> datetime:
    return datetime.now(UTC)
