from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str
    port: int
    debug: bool
    session_secret_key: str  # HMAC key for session tokens
    session_ttl_days: int = 7
    otp_ttl_minutes: int = 10
    cors_origins: list[str] = []
    # SMTP settings for OTP delivery; delivery fails when smtp_host is unset (outside debug)
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_from: str | None = None
    smtp_use_tls: bool = True

    model_config = {
        "env_file": [".env"],
        "env_prefix": "ZERAH_",
        "extra": "ignore",
    }
