"""
Purpose hooks for the verification flow.

Each purpose tells the generic flow what to bind into the code hash, who
receives the code, what happens when the right code is confirmed, and how
the record is disposed of.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from src.app.services.password_hasher import hash_password
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import User, VerificationPurpose, VerificationRecord
from src.libs.result import Error, Result, Return


class VerificationPurposeHooks(ABC):
    purpose: VerificationPurpose
    template: str
    audit_action: str
    code_label: str = "verification code"

    # Success keeps a used tombstone (replays get CODE_ALREADY_USED) or deletes
    mark_used_on_success: bool = True
    # Expired records are removed when a confirmation finds them
    delete_when_expired: bool = False

    def should_skip(self, user: User) -> bool:
        """True when the account is already where this purpose would take it"""
        return False

    def binding_identity(self, user: User, payload: Optional[str]) -> str:
        return user.email

    def recipient(self, user: User, payload: Optional[str]) -> str:
        return self.binding_identity(user, payload)

    def notification_context(self, user: User, payload: Optional[str]) -> Dict[str, Any]:
        return {}

    def conflict_error(self) -> Error:
        return Error(
            "CONCURRENT_UPDATE",
            "The request conflicted with another change. Please try again.",
        )

    @abstractmethod
    async def apply_side_effect(
        self, uow: UnitOfWork, user: User, record: VerificationRecord, **kwargs
    ) -> Result[None]:
        pass


class RegistrationPurpose(VerificationPurposeHooks):
    """Confirms the address an account registered with"""

    purpose = VerificationPurpose.registration
    template = "verification_code"
    audit_action = "email_verified"

    def should_skip(self, user: User) -> bool:
        return user.email_verified

    async def apply_side_effect(
        self, uow: UnitOfWork, user: User, record: VerificationRecord, **kwargs
    ) -> Result[None]:
        user.email_verified = True
        user.updated_at = utc_now()
        await uow.users.update(user)
        return Return.ok(None)


class EmailChangePurpose(VerificationPurposeHooks):
    """
    Moves an account to a new address once the new address proves ownership.

    The code is bound to the target address (record payload), not the
    current one. Uniqueness of the target is checked again at confirmation
    because another account may have claimed it since the code was issued.
    """

    purpose = VerificationPurpose.email_change
    template = "email_change_code"
    audit_action = "email_changed"
    mark_used_on_success = False
    delete_when_expired = True

    def binding_identity(self, user: User, payload: Optional[str]) -> str:
        return payload

    def notification_context(self, user: User, payload: Optional[str]) -> Dict[str, Any]:
        return {"new_email": payload}

    def conflict_error(self) -> Error:
        return Error("EMAIL_IN_USE", "Email already in use.")

    async def apply_side_effect(
        self, uow: UnitOfWork, user: User, record: VerificationRecord, **kwargs
    ) -> Result[None]:
        new_email = record.payload
        owner = await uow.users.get_by_email(new_email)
        if owner is not None and owner.id != user.id:
            return Return.err(self.conflict_error())

        user.email = new_email
        user.email_verified = True
        user.updated_at = utc_now()
        await uow.users.update(user)
        return Return.ok(None)


class PasswordResetPurpose(VerificationPurposeHooks):
    """Sets a new password for an account that proved control of its email"""

    purpose = VerificationPurpose.password_reset
    template = "password_reset_code"
    audit_action = "password_reset"
    code_label = "reset code"
    delete_when_expired = True

    def notification_context(self, user: User, payload: Optional[str]) -> Dict[str, Any]:
        # Accounts from an external identity provider have no password yet
        return {"sets_first_password": user.password_hash is None}

    async def apply_side_effect(
        self, uow: UnitOfWork, user: User, record: VerificationRecord, **kwargs
    ) -> Result[None]:
        user.password_hash = hash_password(kwargs["new_password"])
        user.updated_at = utc_now()
        await uow.users.update(user)
        return Return.ok(None)
