"""
Domain Enums

Enumeration types used across domain entities.
"""

from enum import Enum


class UserStatus(str, Enum):
    """User account status"""

    active = "active"
    disabled = "disabled"


class VerificationPurpose(str, Enum):
    """What a one-time code was issued for"""

    registration = "registration"
    email_change = "email_change"
    password_reset = "password_reset"
