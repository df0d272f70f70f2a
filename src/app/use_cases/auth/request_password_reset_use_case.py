"""
Request Password Reset Use Case

Sends a six-digit reset code to the account email.
"""

import logging
from typing import Optional

from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.unit_of_work import UnitOfWork
from src.app.verification import (
    CodeHasher,
    PasswordResetPurpose,
    VerificationFlow,
    VerificationPolicy,
)
from src.libs.result import Result, Return
from .dtos import RequestPasswordResetResponse
from .validation import normalize_email

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "If an account exists for this email, a password reset code has been sent."


class RequestPasswordResetUseCase:
    """
    Use case for requesting password reset.

    Business Rules:
    - No email enumeration (same response for valid/invalid emails)
    - Rate limit rejections are logged, not surfaced, for the same reason
    - Works for accounts without a password; the email says a password
      will be set rather than reset
    """

    def __init__(
        self,
        uow: UnitOfWork,
        hasher: CodeHasher,
        dispatcher: INotificationDispatcher,
        policy: Optional[VerificationPolicy] = None,
    ):
        self.uow = uow
        self.flow = VerificationFlow(
            uow, PasswordResetPurpose(), hasher, dispatcher, policy=policy
        )

    async def execute(self, email: str) -> Result[RequestPasswordResetResponse]:
        """
        Execute request password reset use case.

        Args:
            email: User's email address

        Returns:
            Result with the generic status. Never an Error.
        """
        response = RequestPasswordResetResponse(status="sent", message=GENERIC_MESSAGE)

        async with self.uow:
            user = await self.uow.users.get_by_email(normalize_email(email))

            if user is None:
                logger.info("Password reset requested for unknown email")
                return Return.ok(response)

            user_id = user.id
            result = await self.flow.initiate(user)
            if result.is_err():
                logger.info(
                    "Password reset code not sent to user %s: %s",
                    user_id,
                    result.error.code,
                )

            return Return.ok(response)
