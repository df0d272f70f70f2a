"""
Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

from .enums import UserStatus, VerificationPurpose
from .user import User
from .verification_record import VerificationRecord
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "UserStatus",
    "VerificationPurpose",
    # Entities
    "User",
    "VerificationRecord",
    "AuditEvent",
]
