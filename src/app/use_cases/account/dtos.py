"""
Account Use Case DTOs

Responses for the authenticated account operations.
"""

from pydantic import BaseModel


class RequestEmailChangeResponse(BaseModel):
    """Response for request email change use case"""

    status: str
    message: str
    new_email: str


class VerifyEmailChangeResponse(BaseModel):
    """Response for verify email change use case"""

    status: str
    message: str
    email: str


class ChangePasswordResponse(BaseModel):
    status: str
    message: str


class NotificationSettingsResponse(BaseModel):
    notifications_enabled: bool
