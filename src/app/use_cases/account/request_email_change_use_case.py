"""
Request Email Change Use Case

Sends a code to the new address and a heads-up to the current one.
"""

from typing import Optional
from uuid import UUID

from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.password_hasher import verify_password
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth.validation import normalize_email
from src.app.verification import (
    CodeHasher,
    EmailChangePurpose,
    VerificationFlow,
    VerificationPolicy,
)
from src.libs.result import Error, Result, Return
from .dtos import RequestEmailChangeResponse


class RequestEmailChangeUseCase:
    """
    Use case for starting an email change.

    Business Rules:
    - Current password must be supplied and correct
    - New email must differ from the current one
    - New email must not belong to another account
    - Code is bound to (and sent to) the new email
    - The current email gets a warning that a change was requested
    - Subject to the same cooldown and hourly cap as other codes
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
        self, user_id: UUID, new_email: str, current_password: str
    ) -> Result[RequestEmailChangeResponse]:
        """
        Execute request email change use case.

        Args:
            user_id: Authenticated account
            new_email: Address to move the account to
            current_password: Password confirmation

        Returns:
            Result with RequestEmailChangeResponse, or Error
            (USER_NOT_FOUND / INVALID_PASSWORD / SAME_EMAIL / EMAIL_IN_USE /
            RATE_LIMITED / RESEND_LIMIT_REACHED)
        """
        new_email = normalize_email(new_email)

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found."))

            if not verify_password(current_password, user.password_hash):
                return Return.err(
                    Error("INVALID_PASSWORD", "Current password is incorrect.")
                )

            current_email = user.email
            if new_email == current_email:
                return Return.err(
                    Error("SAME_EMAIL", "New email must be different from the current one.")
                )

            owner = await self.uow.users.get_by_email(new_email)
            if owner is not None:
                return Return.err(Error("EMAIL_IN_USE", "Email already in use."))

            result = await self.flow.initiate(user, payload=new_email)
            if result.is_err():
                return Return.err(result.error)

            self.dispatcher.notify(
                current_email, "email_change_warning", {"new_email": new_email}
            )

            return Return.ok(
                RequestEmailChangeResponse(
                    status="sent",
                    message="A verification code has been sent to your new email.",
                    new_email=new_email,
                )
            )
