import base64
import hashlib
import hmac


class CodeHasher:
    """
    HMAC-SHA256 over "<binding key>:<code>" with a server-held secret.

    The binding key scopes a code to what it was issued for (the account
    email, or the target address of an email change), so a code cannot be
    replayed against another address. Rotating the secret invalidates every
    code that is still outstanding.
    """

    def __init__(self, secret: str):
        if not secret or not secret.strip():
            raise ValueError("OTP_SECRET must be configured")
        self._key = secret.encode("utf-8")

    def hash(self, binding_key: str, code: str) -> str:
        payload = f"{binding_key}:{code}".encode("utf-8")
        digest = hmac.new(self._key, payload, hashlib.sha256).digest()
        return base64.b64encode(digest).decode("ascii")

    @staticmethod
    def equals(hash_a: str, hash_b: str) -> bool:
        # Constant-time over the encoded bytes
        return hmac.compare_digest(hash_a.encode("utf-8"), hash_b.encode("utf-8"))
