"""
Authentication Use Cases

Registration, email verification, login and password reset.
"""

from .register_use_case import RegisterUseCase
from .verify_email_use_case import VerifyEmailUseCase
from .resend_verification_use_case import ResendVerificationUseCase
from .login_use_case import LoginUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase
from .reset_password_use_case import ResetPasswordUseCase
from .dtos import (
    RegisterCommand,
    RegisterResponse,
    UserInfo,
    VerifyEmailResponse,
    ResendVerificationResponse,
    LoginResponse,
    RequestPasswordResetResponse,
    ResetPasswordResponse,
)

__all__ = [
    # Use Cases
    "RegisterUseCase",
    "VerifyEmailUseCase",
    "ResendVerificationUseCase",
    "LoginUseCase",
    "RequestPasswordResetUseCase",
    "ResetPasswordUseCase",
    # DTOs - Commands
    "RegisterCommand",
    # DTOs - Responses
    "RegisterResponse",
    "VerifyEmailResponse",
    "ResendVerificationResponse",
    "LoginResponse",
    "RequestPasswordResetResponse",
    "ResetPasswordResponse",
    # DTOs - Nested Models
    "UserInfo",
]
