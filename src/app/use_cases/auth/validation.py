from src.app.services.password_hasher import PASSWORD_MAX_BYTES, password_too_long
from src.libs.result import Error, Result, Return

DEFAULT_PASSWORD_MIN_LENGTH = 6


def normalize_email(email: str) -> str:
    """Emails are stored and compared trimmed and lowercased"""
    return (email or "").strip().lower()


def validate_new_password(
    password: str, min_length: int = DEFAULT_PASSWORD_MIN_LENGTH
) -> Result[None]:
    if not password or not password.strip() or len(password) < min_length:
        return Return.err(
            Error(
                "WEAK_PASSWORD",
                f"Password must be at least {min_length} characters.",
            )
        )
    if password_too_long(password):
        return Return.err(
            Error(
                "PASSWORD_TOO_LONG",
                f"Password must be at most {PASSWORD_MAX_BYTES} bytes.",
            )
        )
    return Return.ok(None)
