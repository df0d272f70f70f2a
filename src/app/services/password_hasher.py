from typing import Optional

import bcrypt

# Bcrypt cost factor 12 (security requirement)
BCRYPT_ROUNDS = 12

# bcrypt only reads the first 72 bytes and refuses longer input
PASSWORD_MAX_BYTES = 72

# Checked against when the account is unknown, so a miss costs as much as a hit
_DUMMY_HASH = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(BCRYPT_ROUNDS))


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > PASSWORD_MAX_BYTES


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(BCRYPT_ROUNDS)).decode(
        "utf-8"
    )


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    if password_too_long(password):
        # No stored password can be this long
        burn_password_check(password)
        return False
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


def burn_password_check(password: str) -> None:
    """Spend one bcrypt check without an account to compare against"""
    bcrypt.checkpw(password.encode("utf-8")[:PASSWORD_MAX_BYTES], _DUMMY_HASH)
