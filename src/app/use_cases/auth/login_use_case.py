"""
Login Use Case

Checks credentials and returns an access token.
"""

from src.api.utils.jwt import generate_jwt
from src.app.services.password_hasher import burn_password_check, verify_password
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, UserStatus
from src.libs.result import Error, Result, Return
from .dtos import LoginResponse, UserInfo
from .validation import normalize_email


class LoginUseCase:
    """
    Use case for user login and JWT issuance.

    Business Rules:
    - Constant-time password comparison to prevent timing attacks
    - Accounts without a password (external sign-in) cannot log in here
    - User must have status=active
    - Email must be verified
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, email: str, password: str) -> Result[LoginResponse]:
        """
        Execute login use case.

        Args:
            email: User email
            password: Plain text password

        Returns:
            Result with LoginResponse containing the access token, or Error
        """
        async with self.uow:
            user = await self.uow.users.get_by_email(normalize_email(email))

            if user is None:
                # Always perform a hash check even if the user is not found
                burn_password_check(password)
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Invalid email or password")
                )

            if user.password_hash is None:
                return Return.err(
                    Error(
                        "INVALID_CREDENTIALS",
                        "This account uses an external sign-in provider. "
                        "Use 'Forgot Password' to set a password.",
                    )
                )

            if not verify_password(password, user.password_hash):
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Invalid email or password")
                )

            if user.status == UserStatus.disabled:
                return Return.err(Error("USER_DISABLED", "User account is disabled"))

            if not user.email_verified:
                return Return.err(
                    Error(
                        "EMAIL_NOT_VERIFIED",
                        "Please verify your email before logging in.",
                    )
                )

            await self.uow.audit_events.create(
                AuditEvent(user_id=user.id, action="login", event_metadata={})
            )
            await self.uow.commit()

            access_token = generate_jwt(user.id, user.email, user.email_verified)

            return Return.ok(
                LoginResponse(
                    access_token=access_token,
                    user=UserInfo(
                        id=str(user.id),
                        email=user.email,
                        email_verified=user.email_verified,
                    ),
                )
            )
