"""
Verify Email Use Case

Confirms the registration code sent to a new account.
"""

from typing import Optional

from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.unit_of_work import UnitOfWork
from src.app.verification import (
    CodeHasher,
    RegistrationPurpose,
    VerificationFlow,
    VerificationPolicy,
    parse_code,
)
from src.libs.result import Error, Result, Return
from .dtos import VerifyEmailResponse
from .validation import normalize_email


class VerifyEmailUseCase:
    """
    Use case for email verification.

    Business Rules:
    - Code must be exactly 6 digits (checked before anything else)
    - Code must match the latest code issued for the account
    - Code must not be expired (15 minutes) or exhausted (5 wrong attempts)
    - Sets email_verified = True
    - The code is single-use: replaying it returns CODE_ALREADY_USED
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

    async def execute(self, email: str, code: str) -> Result[VerifyEmailResponse]:
        """
        Execute email verification use case.

        Args:
            email: Account email
            code: Six-digit code from the verification email

        Returns:
            Result with verification status, or Error
        """
        parsed = parse_code(code)
        if parsed.is_err():
            return Return.err(parsed.error)

        async with self.uow:
            user = await self.uow.users.get_by_email(normalize_email(email))
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found."))

            result = await self.flow.complete(user, parsed.value)
            if result.is_err():
                return Return.err(result.error)

            return Return.ok(
                VerifyEmailResponse(status="verified", message="Email verified.")
            )
