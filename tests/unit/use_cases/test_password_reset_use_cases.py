from datetime import timedelta
from uuid import uuid4

import pytest

from src.app.services.password_hasher import verify_password
from src.app.use_cases.auth import RequestPasswordResetUseCase, ResetPasswordUseCase
from src.domain.base import utc_now
from src.domain.entities import User, VerificationPurpose, VerificationRecord


def reset_record(user, code_hasher, code="123456", **kwargs):
    now = utc_now()
    defaults = dict(
        id=uuid4(),
        user_id=user.id,
        purpose=VerificationPurpose.password_reset,
        code_hash=code_hasher.hash(user.email, code),
        expires_at=now + timedelta(minutes=15),
        last_sent_at=now,
    )
    defaults.update(kwargs)
    return VerificationRecord(**defaults)


# ============================================================================
# Request
# ============================================================================


@pytest.mark.asyncio
async def test_request_reset_unknown_email(mock_uow, code_hasher, mock_dispatcher):
    result = await RequestPasswordResetUseCase(mock_uow, code_hasher, mock_dispatcher).execute(
        "ghost@example.com"
    )

    assert result.is_ok()
    assert result.value.status == "sent"
    mock_dispatcher.notify.assert_not_called()


@pytest.mark.asyncio
async def test_request_reset_known_email_sends_code(mock_uow, code_hasher, mock_dispatcher):
    mock_uow.users.get_by_email.return_value = User(
        id=uuid4(), email="user@example.com", password_hash="x"
    )

    known = await RequestPasswordResetUseCase(mock_uow, code_hasher, mock_dispatcher).execute(
        "user@example.com"
    )

    assert known.is_ok()
    to, template, context = mock_dispatcher.notify.call_args.args
    assert (to, template) == ("user@example.com", "password_reset_code")
    assert context["sets_first_password"] is False


@pytest.mark.asyncio
async def test_request_reset_rate_limit_is_hidden(mock_uow, code_hasher, mock_dispatcher):
    user = User(id=uuid4(), email="user@example.com", password_hash="x")
    mock_uow.users.get_by_email.return_value = user
    mock_uow.verification_records.get_for_user.return_value = reset_record(user, code_hasher)

    result = await RequestPasswordResetUseCase(mock_uow, code_hasher, mock_dispatcher).execute(
        "user@example.com"
    )

    assert result.is_ok()
    assert result.value.status == "sent"
    mock_dispatcher.notify.assert_not_called()


# ============================================================================
# Reset
# ============================================================================


@pytest.mark.asyncio
async def test_reset_password_success(mock_uow, code_hasher, mock_dispatcher):
    user = User(id=uuid4(), email="user@example.com", password_hash=None)
    mock_uow.users.get_by_email.return_value = user
    mock_uow.verification_records.get_for_user.return_value = reset_record(user, code_hasher)

    result = await ResetPasswordUseCase(mock_uow, code_hasher, mock_dispatcher).execute(
        "user@example.com", "123456", "new-password"
    )

    assert result.is_ok()
    assert verify_password("new-password", user.password_hash)
    mock_dispatcher.notify.assert_called_once_with(
        "user@example.com", "password_reset_success", {}
    )


@pytest.mark.asyncio
async def test_reset_password_weak_password(mock_uow, code_hasher, mock_dispatcher):
    result = await ResetPasswordUseCase(mock_uow, code_hasher, mock_dispatcher).execute(
        "user@example.com", "123456", "123"
    )

    assert result.error.code == "WEAK_PASSWORD"
    mock_uow.users.get_by_email.assert_not_awaited()


@pytest.mark.asyncio
async def test_reset_password_wrong_code(mock_uow, code_hasher, mock_dispatcher):
    user = User(id=uuid4(), email="user@example.com", password_hash="old")
    mock_uow.users.get_by_email.return_value = user
    mock_uow.verification_records.get_for_user.return_value = reset_record(user, code_hasher)

    result = await ResetPasswordUseCase(mock_uow, code_hasher, mock_dispatcher).execute(
        "user@example.com", "999999", "new-password"
    )

    assert result.error.code == "INVALID_CODE"
    assert result.error.message == "Invalid reset code."
    assert user.password_hash == "old"
    mock_dispatcher.notify.assert_not_called()


@pytest.mark.asyncio
async def test_reset_password_replayed_code(mock_uow, code_hasher, mock_dispatcher):
    user = User(id=uuid4(), email="user@example.com", password_hash="old")
    mock_uow.users.get_by_email.return_value = user
    mock_uow.verification_records.get_for_user.return_value = reset_record(
        user, code_hasher, used=True
    )

    result = await ResetPasswordUseCase(mock_uow, code_hasher, mock_dispatcher).execute(
        "user@example.com", "123456", "new-password"
    )

    assert result.error.code == "CODE_ALREADY_USED"
