import secrets

from src.libs.result import Error, Result, Return

CODE_LENGTH = 6


class CodeGenerator:
    """Uniformly random six-digit codes from the OS CSPRNG"""

    def generate(self) -> str:
        return f"{secrets.randbelow(10**CODE_LENGTH):0{CODE_LENGTH}d}"


def parse_code(code: str) -> Result[str]:
    """
    Normalize a submitted code.

    Returns the trimmed code, or INVALID_CODE_FORMAT unless it is exactly
    six ASCII digits. Checked before any stored state is touched, so a
    malformed submission never costs an attempt.
    """
    code = (code or "").strip()
    if len(code) != CODE_LENGTH or not (code.isascii() and code.isdigit()):
        return Return.err(
            Error("INVALID_CODE_FORMAT", "Code must be exactly 6 digits.")
        )
    return Return.ok(code)
