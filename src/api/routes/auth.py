from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from src.api.error import raise_for_error
from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    RegisterCommand,
    RegisterResponse,
    RegisterUseCase,
    LoginUseCase,
    VerifyEmailUseCase,
    ResendVerificationUseCase,
    RequestPasswordResetUseCase,
    ResetPasswordUseCase,
    LoginResponse,
    VerifyEmailResponse,
    ResendVerificationResponse,
    RequestPasswordResetResponse,
    ResetPasswordResponse,
)
from src.app.verification import CodeHasher, VerificationPolicy
from src.depends import (
    get_code_hasher,
    get_notification_dispatcher,
    get_settings,
    get_unit_of_work,
    get_verification_policy,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


class RegisterRequest(BaseModel):
    """
    Register HTTP request payload

    Password length is a business rule checked by the use case
    (WEAK_PASSWORD), not here.
    """

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")


@router.post(
    "/register", status_code=status.HTTP_201_CREATED, response_model=RegisterResponse
)
async def register(
    request: RegisterRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: CodeHasher = Depends(get_code_hasher),
    dispatcher: INotificationDispatcher = Depends(get_notification_dispatcher),
    policy: VerificationPolicy = Depends(get_verification_policy),
    settings=Depends(get_settings),
):
    """
    Register a new account

    Creates an unverified account and emails a six-digit verification code.

    Raises:
        - 400 Bad Request: Password too short
        - 409 Conflict: Email already exists
        - 422 Unprocessable Entity: Invalid email (handled by FastAPI)
    """
    command = RegisterCommand(email=request.email, password=request.password)

    use_case = RegisterUseCase(
        uow,
        hasher,
        dispatcher,
        policy=policy,
        password_min_length=settings.PASSWORD_MIN_LENGTH,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class VerifyEmailRequest(BaseModel):
    email: EmailStr = Field(..., description="Account email")
    code: str = Field(..., description="Six-digit verification code")


@router.post(
    "/verify-email", status_code=status.HTTP_200_OK, response_model=VerifyEmailResponse
)
async def verify_email(
    request: VerifyEmailRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: CodeHasher = Depends(get_code_hasher),
    dispatcher: INotificationDispatcher = Depends(get_notification_dispatcher),
    policy: VerificationPolicy = Depends(get_verification_policy),
):
    """
    Verify Email

    Raises:
        - 400 Bad Request: Malformed, wrong or expired code
        - 404 Not Found: Unknown account or no pending code
        - 409 Conflict: Code already used
        - 429 Too Many Requests: Attempt limit reached
    """
    use_case = VerifyEmailUseCase(uow, hasher, dispatcher, policy=policy)
    result = await use_case.execute(request.email, request.code)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ResendVerificationRequest(BaseModel):
    email: EmailStr = Field(..., description="Account email")


@router.post(
    "/resend-verification",
    status_code=status.HTTP_200_OK,
    response_model=ResendVerificationResponse,
)
async def resend_verification(
    request: ResendVerificationRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: CodeHasher = Depends(get_code_hasher),
    dispatcher: INotificationDispatcher = Depends(get_notification_dispatcher),
    policy: VerificationPolicy = Depends(get_verification_policy),
):
    """
    Resend Verification Code

    Same response for unknown and already verified accounts.

    Raises:
        - 429 Too Many Requests: Cooldown or hourly cap
    """
    use_case = ResendVerificationUseCase(uow, hasher, dispatcher, policy=policy)
    result = await use_case.execute(request.email)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class LoginRequest(BaseModel):
    """
    Login HTTP request payload

    Validates incoming login request.
    """

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=LoginResponse)
async def login(request: LoginRequest, uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    User Login

    Raises:
        - 401 Unauthorized: Invalid credentials
        - 403 Forbidden: User disabled or email not verified
    """
    use_case = LoginUseCase(uow)
    result = await use_case.execute(request.email, request.password)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ForgotPasswordRequest(BaseModel):
    email: EmailStr = Field(..., description="Account email")


@router.post(
    "/forgot-password",
    status_code=status.HTTP_200_OK,
    response_model=RequestPasswordResetResponse,
)
async def forgot_password(
    request: ForgotPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: CodeHasher = Depends(get_code_hasher),
    dispatcher: INotificationDispatcher = Depends(get_notification_dispatcher),
    policy: VerificationPolicy = Depends(get_verification_policy),
):
    """
    Request Password Reset

    Always returns the same response whether or not the account exists.
    """
    use_case = RequestPasswordResetUseCase(uow, hasher, dispatcher, policy=policy)
    result = await use_case.execute(request.email)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ResetPasswordRequest(BaseModel):
    email: EmailStr = Field(..., description="Account email")
    code: str = Field(..., description="Six-digit reset code")
    new_password: str = Field(..., description="New password")


@router.post(
    "/reset-password",
    status_code=status.HTTP_200_OK,
    response_model=ResetPasswordResponse,
)
async def reset_password(
    request: ResetPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: CodeHasher = Depends(get_code_hasher),
    dispatcher: INotificationDispatcher = Depends(get_notification_dispatcher),
    policy: VerificationPolicy = Depends(get_verification_policy),
    settings=Depends(get_settings),
):
    """
    Reset Password

    Raises:
        - 400 Bad Request: Malformed, wrong or expired code, or weak password
        - 404 Not Found: Unknown account or no pending code
        - 409 Conflict: Code already used
        - 429 Too Many Requests: Attempt limit reached
    """
    use_case = ResetPasswordUseCase(
        uow,
        hasher,
        dispatcher,
        policy=policy,
        password_min_length=settings.PASSWORD_MIN_LENGTH,
    )
    result = await use_case.execute(request.email, request.code, request.new_password)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
