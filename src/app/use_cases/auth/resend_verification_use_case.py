"""
Resend Verification Code Use Case

Issues a fresh registration code, subject to the resend limits.
"""

import logging
from typing import Optional

from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.unit_of_work import UnitOfWork
from src.app.verification import (
    CodeHasher,
    RegistrationPurpose,
    VerificationFlow,
    VerificationPolicy,
)
from src.libs.result import Result, Return
from .dtos import ResendVerificationResponse
from .validation import normalize_email

logger = logging.getLogger(__name__)

SENT_MESSAGE = "If the account exists and is unverified, a new verification code has been sent."


class ResendVerificationUseCase:
    """
    Use case for resending the registration code.

    Business Rules:
    - New code replaces the old one (the previous code stops working)
    - 60 second cooldown between codes, at most 5 codes per rolling hour
    - Unknown and already verified accounts get the same success response
      and no code
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
            uow, RegistrationPurpose(), hasher, dispatcher, policy=policy
        )

    async def execute(self, email: str) -> Result[ResendVerificationResponse]:
        """
        Execute resend verification use case.

        Args:
            email: Account email

        Returns:
            Result with resend status, or RATE_LIMITED / RESEND_LIMIT_REACHED
        """
        async with self.uow:
            user = await self.uow.users.get_by_email(normalize_email(email))

            if user is None:
                logger.info("Verification resend requested for unknown email")
                return Return.ok(
                    ResendVerificationResponse(status="sent", message=SENT_MESSAGE)
                )

            result = await self.flow.initiate(user)
            if result.is_err():
                return Return.err(result.error)

            return Return.ok(
                ResendVerificationResponse(status="sent", message=SENT_MESSAGE)
            )
