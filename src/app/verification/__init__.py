"""
One-time code verification

Code generation, secret-keyed hashing, the resend policy and the generic
issue/confirm flow shared by registration, email change and password reset.
"""

from .code_generator import CODE_LENGTH, CodeGenerator, parse_code
from .code_hasher import CodeHasher
from .policy import VerificationPolicy
from .purposes import (
    EmailChangePurpose,
    PasswordResetPurpose,
    RegistrationPurpose,
    VerificationPurposeHooks,
)
from .flow import VerificationFlow

__all__ = [
    "CODE_LENGTH",
    "CodeGenerator",
    "parse_code",
    "CodeHasher",
    "VerificationPolicy",
    "VerificationPurposeHooks",
    "RegistrationPurpose",
    "EmailChangePurpose",
    "PasswordResetPurpose",
    "VerificationFlow",
]
