"""
Notification Settings Use Cases

Read and change whether the account receives security notifications.
"""

import logging
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import AuditEvent
from src.libs.result import Error, Result, Return
from .dtos import NotificationSettingsResponse

logger = logging.getLogger(__name__)


class GetNotificationSettingsUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[NotificationSettingsResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found."))

            return Return.ok(
                NotificationSettingsResponse(
                    notifications_enabled=user.notifications_enabled
                )
            )


class UpdateNotificationSettingsUseCase:
    """
    Use case for turning security notifications on or off.

    Business Rules:
    - Only "password changed" and "email changed" emails follow this
      setting; codes and email change warnings are always sent
    - Setting the current value again is a no-op without an audit event
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, user_id: UUID, notifications_enabled: bool
    ) -> Result[NotificationSettingsResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found."))

            if user.notifications_enabled != notifications_enabled:
                user.notifications_enabled = notifications_enabled
                user.updated_at = utc_now()
                await self.uow.users.update(user)

                await self.uow.audit_events.create(
                    AuditEvent(
                        user_id=user.id,
                        action="notifications_updated",
                        event_metadata={"enabled": notifications_enabled},
                    )
                )
                await self.uow.commit()
                logger.info(
                    "Notifications %s for user %s",
                    "enabled" if notifications_enabled else "disabled",
                    user.id,
                )

            return Return.ok(
                NotificationSettingsResponse(
                    notifications_enabled=notifications_enabled
                )
            )
