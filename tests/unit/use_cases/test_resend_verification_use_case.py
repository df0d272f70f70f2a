from datetime import timedelta
from uuid import uuid4

import pytest

from src.app.use_cases.auth import ResendVerificationUseCase
from src.domain.base import utc_now
from src.domain.entities import User, VerificationPurpose, VerificationRecord


@pytest.mark.asyncio
async def test_resend_unknown_email_looks_successful(mock_uow, code_hasher, mock_dispatcher):
    result = await ResendVerificationUseCase(mock_uow, code_hasher, mock_dispatcher).execute(
        "ghost@example.com"
    )

    assert result.is_ok()
    assert result.value.status == "sent"
    mock_dispatcher.notify.assert_not_called()


@pytest.mark.asyncio
async def test_resend_verified_account_sends_nothing(mock_uow, code_hasher, mock_dispatcher):
    mock_uow.users.get_by_email.return_value = User(
        id=uuid4(), email="done@example.com", email_verified=True
    )

    result = await ResendVerificationUseCase(mock_uow, code_hasher, mock_dispatcher).execute(
        "done@example.com"
    )

    assert result.is_ok()
    assert result.value.status == "sent"
    mock_uow.verification_records.create.assert_not_awaited()
    mock_dispatcher.notify.assert_not_called()


@pytest.mark.asyncio
async def test_resend_replaces_code(mock_uow, code_hasher, mock_dispatcher):
    user = User(id=uuid4(), email="user@example.com")
    mock_uow.users.get_by_email.return_value = user
    now = utc_now()
    mock_uow.verification_records.get_for_user.return_value = VerificationRecord(
        user_id=user.id,
        purpose=VerificationPurpose.registration,
        code_hash="old",
        send_count=1,
        expires_at=now + timedelta(minutes=13),
        last_sent_at=now - timedelta(minutes=2),
    )

    result = await ResendVerificationUseCase(mock_uow, code_hasher, mock_dispatcher).execute(
        "user@example.com"
    )

    assert result.is_ok()
    mock_uow.verification_records.delete_for_user.assert_awaited_once()
    new_record = mock_uow.verification_records.create.call_args.args[0]
    assert new_record.send_count == 2
    mock_dispatcher.notify.assert_called_once()


@pytest.mark.asyncio
async def test_resend_during_cooldown(mock_uow, code_hasher, mock_dispatcher):
    user = User(id=uuid4(), email="user@example.com")
    mock_uow.users.get_by_email.return_value = user
    now = utc_now()
    mock_uow.verification_records.get_for_user.return_value = VerificationRecord(
        user_id=user.id,
        purpose=VerificationPurpose.registration,
        code_hash="old",
        expires_at=now + timedelta(minutes=15),
        last_sent_at=now,
    )

    result = await ResendVerificationUseCase(mock_uow, code_hasher, mock_dispatcher).execute(
        "user@example.com"
    )

    assert result.error.code == "RATE_LIMITED"
    mock_dispatcher.notify.assert_not_called()
