"""
Change Password Use Case

Password change for a signed-in account.
"""

import logging
from uuid import UUID

from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.password_hasher import hash_password, verify_password
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.validation import (
    DEFAULT_PASSWORD_MIN_LENGTH,
    validate_new_password,
)
from src.domain.base import utc_now
from src.domain.entities import AuditEvent
from src.libs.result import Error, Result, Return
from .dtos import ChangePasswordResponse

logger = logging.getLogger(__name__)


class ChangePasswordUseCase:
    """
    Use case for changing a known password.

    Business Rules:
    - Current password must be correct
    - New password must meet the minimum length and differ from the current one
    - A "password changed" email is sent when the account has notifications enabled
    """

    def __init__(
        self,
        uow: UnitOfWork,
        dispatcher: INotificationDispatcher,
        password_min_length: int = DEFAULT_PASSWORD_MIN_LENGTH,
    ):
        self.uow = uow
        self.dispatcher = dispatcher
        self.password_min_length = password_min_length

    async def execute(
        self, user_id: UUID, current_password: str, new_password: str
    ) -> Result[ChangePasswordResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found."))

            if not verify_password(current_password, user.password_hash):
                return Return.err(
                    Error("INVALID_PASSWORD", "Current password is incorrect.")
                )

            password_validation = validate_new_password(
                new_password, self.password_min_length
            )
            if password_validation.is_err():
                return Return.err(password_validation.error)

            if new_password == current_password:
                return Return.err(
                    Error(
                        "SAME_PASSWORD",
                        "New password must be different from the current one.",
                    )
                )

            user.password_hash = hash_password(new_password)
            user.updated_at = utc_now()
            await self.uow.users.update(user)

            await self.uow.audit_events.create(
                AuditEvent(user_id=user.id, action="password_changed", event_metadata={})
            )
            await self.uow.commit()

            if user.notifications_enabled:
                self.dispatcher.notify(user.email, "password_changed", {})
            else:
                logger.info("Password change email skipped for user %s", user.id)

            return Return.ok(
                ChangePasswordResponse(
                    status="changed", message="Your password has been changed."
                )
            )
