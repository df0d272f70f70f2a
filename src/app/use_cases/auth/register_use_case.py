"""
Register Use Case

Creates an unverified account and sends its first verification code.
"""

from typing import Optional

from sqlalchemy.exc import IntegrityError

from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.password_hasher import hash_password
from src.app.services.unit_of_work import UnitOfWork
from src.app.verification import (
    CodeHasher,
    RegistrationPurpose,
    VerificationFlow,
    VerificationPolicy,
)
from src.domain.entities import AuditEvent, User
from src.libs.result import Error, Result, Return
from .dtos import RegisterCommand, RegisterResponse, UserInfo
from .validation import (
    DEFAULT_PASSWORD_MIN_LENGTH,
    normalize_email,
    validate_new_password,
)


class RegisterUseCase:
    """
    Register Use Case

    Command/Response Pattern:
    - Input: RegisterCommand (validated business intent)
    - Output: Result[RegisterResponse] (structured response)

    Business Logic:
    1. Normalize email (trim + lowercase)
    2. Check password length
    3. Reject if the email is already registered
    4. Hash password with bcrypt cost factor 12
    5. Create User with email_verified=False
    6. Issue a registration code in the same transaction and send it
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
        self.password_min_length = password_min_length
        self.flow = VerificationFlow(
            uow, RegistrationPurpose(), hasher, dispatcher, policy=policy
        )

    async def execute(self, command: RegisterCommand) -> Result[RegisterResponse]:
        """
        Execute register use case

        Args:
            command: RegisterCommand with email and password

        Returns:
            Result[RegisterResponse] with the new account,
            or Error(EMAIL_ALREADY_EXISTS / WEAK_PASSWORD)
        """
        email = normalize_email(command.email)

        password_validation = validate_new_password(
            command.password, self.password_min_length
        )
        if password_validation.is_err():
            return Return.err(password_validation.error)

        async with self.uow:
            existing_user = await self.uow.users.get_by_email(email)
            if existing_user:
                if existing_user.password_hash is None:
                    return Return.err(
                        Error(
                            "EMAIL_ALREADY_EXISTS",
                            "This email is already registered through an external "
                            "sign-in provider. Sign in there or use 'Forgot Password' "
                            "to set a password.",
                        )
                    )
                return Return.err(
                    Error("EMAIL_ALREADY_EXISTS", "Email already registered")
                )

            user = User(
                email=email,
                password_hash=hash_password(command.password),
                email_verified=False,
            )
            try:
                user = await self.uow.users.create(user)
            except IntegrityError:
                # Lost a race against a concurrent registration
                await self.uow.rollback()
                return Return.err(
                    Error("EMAIL_ALREADY_EXISTS", "Email already registered")
                )

            await self.uow.audit_events.create(
                AuditEvent(user_id=user.id, action="signup", event_metadata={"email": email})
            )

            # Commits the account together with its first code
            issued = await self.flow.initiate(user)
            if issued.is_err():
                return Return.err(issued.error)

            return Return.ok(
                RegisterResponse(
                    user=UserInfo(
                        id=str(user.id),
                        email=user.email,
                        email_verified=user.email_verified,
                    ),
                    message="Account created. A verification code has been sent to your email.",
                )
            )
