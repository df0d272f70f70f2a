from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from src.api.error import raise_for_error
from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.account import (
    ChangePasswordResponse,
    ChangePasswordUseCase,
    GetNotificationSettingsUseCase,
    NotificationSettingsResponse,
    RequestEmailChangeResponse,
    RequestEmailChangeUseCase,
    UpdateNotificationSettingsUseCase,
    VerifyEmailChangeResponse,
    VerifyEmailChangeUseCase,
)
from src.app.verification import CodeHasher, VerificationPolicy
from src.depends import (
    get_code_hasher,
    get_current_user,
    get_notification_dispatcher,
    get_settings,
    get_unit_of_work,
    get_verification_policy,
)

router = APIRouter(prefix="/account", tags=["Account"])


class RequestEmailChangeRequest(BaseModel):
    new_email: EmailStr = Field(..., description="Address to move the account to")
    current_password: str = Field(..., description="Current password")


@router.post(
    "/request-email-change",
    status_code=status.HTTP_200_OK,
    response_model=RequestEmailChangeResponse,
)
async def request_email_change(
    request: RequestEmailChangeRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: CodeHasher = Depends(get_code_hasher),
    dispatcher: INotificationDispatcher = Depends(get_notification_dispatcher),
    policy: VerificationPolicy = Depends(get_verification_policy),
):
    """
    Request Email Change

    Sends a code to the new address and a warning to the current one.

    Raises:
        - 400 Bad Request: New email equals the current one
        - 401 Unauthorized: Wrong current password
        - 409 Conflict: New email belongs to another account
        - 429 Too Many Requests: Cooldown or hourly cap
    """
    use_case = RequestEmailChangeUseCase(uow, hasher, dispatcher, policy=policy)
    result = await use_case.execute(
        UUID(current_user["user_id"]), request.new_email, request.current_password
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class VerifyEmailChangeRequest(BaseModel):
    new_email: EmailStr = Field(..., description="Address the code was sent to")
    code: str = Field(..., description="Six-digit code")


@router.post(
    "/verify-email-change",
    status_code=status.HTTP_200_OK,
    response_model=VerifyEmailChangeResponse,
)
async def verify_email_change(
    request: VerifyEmailChangeRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: CodeHasher = Depends(get_code_hasher),
    dispatcher: INotificationDispatcher = Depends(get_notification_dispatcher),
    policy: VerificationPolicy = Depends(get_verification_policy),
):
    """
    Verify Email Change

    Raises:
        - 400 Bad Request: Malformed, wrong or expired code
        - 404 Not Found: No pending change for this address
        - 409 Conflict: Address taken in the meantime
        - 429 Too Many Requests: Attempt limit reached
    """
    use_case = VerifyEmailChangeUseCase(uow, hasher, dispatcher, policy=policy)
    result = await use_case.execute(
        UUID(current_user["user_id"]), request.new_email, request.code
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., description="Current password")
    new_password: str = Field(..., description="New password")


@router.post(
    "/change-password",
    status_code=status.HTTP_200_OK,
    response_model=ChangePasswordResponse,
)
async def change_password(
    request: ChangePasswordRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    dispatcher: INotificationDispatcher = Depends(get_notification_dispatcher),
    settings=Depends(get_settings),
):
    """
    Change Password

    Raises:
        - 400 Bad Request: New password too short or unchanged
        - 401 Unauthorized: Wrong current password
    """
    use_case = ChangePasswordUseCase(
        uow, dispatcher, password_min_length=settings.PASSWORD_MIN_LENGTH
    )
    result = await use_case.execute(
        UUID(current_user["user_id"]), request.current_password, request.new_password
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get(
    "/notifications",
    status_code=status.HTTP_200_OK,
    response_model=NotificationSettingsResponse,
)
async def get_notification_settings(
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Whether the account receives "password changed" and "email changed" emails"""
    use_case = GetNotificationSettingsUseCase(uow)
    result = await use_case.execute(UUID(current_user["user_id"]))

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class UpdateNotificationSettingsRequest(BaseModel):
    notifications_enabled: bool = Field(
        ..., description="Send optional security notifications"
    )


@router.put(
    "/notifications",
    status_code=status.HTTP_200_OK,
    response_model=NotificationSettingsResponse,
)
async def update_notification_settings(
    request: UpdateNotificationSettingsRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update Notification Settings

    Raises:
        - 401 Unauthorized: Missing or invalid token
        - 404 Not Found: Account no longer exists
    """
    use_case = UpdateNotificationSettingsUseCase(uow)
    result = await use_case.execute(
        UUID(current_user["user_id"]), request.notifications_enabled
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value
