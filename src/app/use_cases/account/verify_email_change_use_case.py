"""
Verify Email Change Use Case

Confirms the code sent to the new address and swaps the account email.
"""

import logging
from typing import Optional
from uuid import UUID

from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.validation import normalize_email
from src.app.verification import (
    CodeHasher,
    EmailChangePurpose,
    VerificationFlow,
    VerificationPolicy,
    parse_code,
)
from src.libs.result import Error, Result, Return
from .dtos import VerifyEmailChangeResponse

logger = logging.getLogger(__name__)


class VerifyEmailChangeUseCase:
    """
    Use case for confirming an email change.

    Business Rules:
    - The submitted new email must match the pending request
    - New email is re-checked for availability at confirmation time
    - Success replaces the email, marks it verified and deletes the request
    - A confirmation is sent to the new address when notifications are enabled
    """

    def __init__(
        self,
        uow: UnitOfWork,
        hasher: CodeHasher,
        dispatcher: INotificationDispatcher,
        policy: Optional[VerificationPolicy] = None,
    ):
        self.uow = uow
        self.dispatcher = dispatcher
        self.flow = VerificationFlow(
            uow, EmailChangePurpose(), hasher, dispatcher, policy=policy
        )

    async def execute(
        self, user_id: UUID, new_email: str, code: str
    ) -> Result[VerifyEmailChangeResponse]:
        """
        Execute verify email change use case.

        Args:
            user_id: Authenticated account
            new_email: Address the code was sent to
            code: Six-digit code

        Returns:
            Result with the updated email, or Error
        """
        parsed = parse_code(code)
        if parsed.is_err():
            return Return.err(parsed.error)

        new_email = normalize_email(new_email)

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found."))

            result = await self.flow.complete(user, parsed.value, payload=new_email)
            if result.is_err():
                return Return.err(result.error)

            if user.notifications_enabled:
                self.dispatcher.notify(
                    new_email, "email_changed", {"new_email": new_email}
                )
            else:
                logger.info("Email changed notice skipped for user %s", user_id)

            return Return.ok(
                VerifyEmailChangeResponse(
                    status="changed",
                    message="Your email has been updated.",
                    email=new_email,
                )
            )
