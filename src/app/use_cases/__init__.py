"""
Use Cases

Organized by domain folder:
- auth/: Registration, verification, login and password reset
- account/: Email change, password change and notification settings for a
  signed-in account
"""

from .auth import (
    RegisterUseCase,
    VerifyEmailUseCase,
    ResendVerificationUseCase,
    LoginUseCase,
    RequestPasswordResetUseCase,
    ResetPasswordUseCase,
)
from .account import (
    RequestEmailChangeUseCase,
    VerifyEmailChangeUseCase,
    ChangePasswordUseCase,
    GetNotificationSettingsUseCase,
    UpdateNotificationSettingsUseCase,
)

__all__ = [
    # Auth
    "RegisterUseCase",
    "VerifyEmailUseCase",
    "ResendVerificationUseCase",
    "LoginUseCase",
    "RequestPasswordResetUseCase",
    "ResetPasswordUseCase",
    # Account
    "RequestEmailChangeUseCase",
    "VerifyEmailChangeUseCase",
    "ChangePasswordUseCase",
    "GetNotificationSettingsUseCase",
    "UpdateNotificationSettingsUseCase",
]
