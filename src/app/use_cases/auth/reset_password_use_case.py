"""
Reset Password Use Case

Confirms a reset code and sets the new password.
"""

from typing import Optional

from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.unit_of_work import UnitOfWork
from src.app.verification import (
    CodeHasher,
    PasswordResetPurpose,
    VerificationFlow,
    VerificationPolicy,
    parse_code,
)
from src.libs.result import Error, Result, Return
from .dtos import ResetPasswordResponse
from .validation import (
    DEFAULT_PASSWORD_MIN_LENGTH,
    normalize_email,
    validate_new_password,
)


class ResetPasswordUseCase:
    """
    Use case for completing a password reset.

    Business Rules:
    - Code format and password length are checked before any lookup
    - Code is single-use; a replay returns CODE_ALREADY_USED
    - A confirmation email goes to the account after success
    """

    def __init__(
        self,
        uow: UnitOfWork,
        hasher: CodeHasher,
        dispatcher: INotificationDispatcher,
        policy: Optional[VerificationPolicy] = None,
        password_min_length: int = DEFAULT_PASSWORD_MIN_LENGTH,
    ):
        self.uow = uow
        self.dispatcher = dispatcher
        self.password_min_length = password_min_length
        self.flow = VerificationFlow(
            uow, PasswordResetPurpose(), hasher, dispatcher, policy=policy
        )

    async def execute(
        self, email: str, code: str, new_password: str
    ) -> Result[ResetPasswordResponse]:
        """
        Execute reset password use case.

        Args:
            email: Account email
            code: Six-digit reset code
            new_password: Password to set

        Returns:
            Result with reset status, or Error
        """
        parsed = parse_code(code)
        if parsed.is_err():
            return Return.err(parsed.error)

        password_validation = validate_new_password(
            new_password, self.password_min_length
        )
        if password_validation.is_err():
            return Return.err(password_validation.error)

        async with self.uow:
            user = await self.uow.users.get_by_email(normalize_email(email))
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found."))

            recipient = user.email
            result = await self.flow.complete(
                user, parsed.value, new_password=new_password
            )
            if result.is_err():
                return Return.err(result.error)

            self.dispatcher.notify(recipient, "password_reset_success", {})

            return Return.ok(
                ResetPasswordResponse(
                    status="reset",
                    message="Your password has been reset. You can now log in.",
                )
            )
