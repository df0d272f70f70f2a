"""
Account Use Cases

Operations on the signed-in account: email change, password change and
notification settings.
"""

from .request_email_change_use_case import RequestEmailChangeUseCase
from .verify_email_change_use_case import VerifyEmailChangeUseCase
from .change_password_use_case import ChangePasswordUseCase
from .notification_settings_use_case import (
    GetNotificationSettingsUseCase,
    UpdateNotificationSettingsUseCase,
)
from .dtos import (
    RequestEmailChangeResponse,
    VerifyEmailChangeResponse,
    ChangePasswordResponse,
    NotificationSettingsResponse,
)

__all__ = [
    "RequestEmailChangeUseCase",
    "VerifyEmailChangeUseCase",
    "ChangePasswordUseCase",
    "GetNotificationSettingsUseCase",
    "UpdateNotificationSettingsUseCase",
    "RequestEmailChangeResponse",
    "VerifyEmailChangeResponse",
    "ChangePasswordResponse",
    "NotificationSettingsResponse",
]
