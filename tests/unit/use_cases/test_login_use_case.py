from unittest.mock import patch
from uuid import uuid4

import pytest

from src.api.utils.jwt import verify_jwt
from src.app.services.password_hasher import hash_password
from src.app.use_cases.auth import LoginUseCase
from src.domain.entities import User, UserStatus

PASSWORD = "SecurePass123!"


@pytest.fixture(scope="module")
def password_hash():
    return hash_password(PASSWORD)


@pytest.mark.asyncio
async def test_successful_login(mock_uow, password_hash):
    user = User(
        id=uuid4(),
        email="user@example.com",
        password_hash=password_hash,
        email_verified=True,
    )
    mock_uow.users.get_by_email.return_value = user

    result = await LoginUseCase(mock_uow).execute("User@Example.com", PASSWORD)

    assert result.is_ok()
    payload = verify_jwt(result.value.access_token)
    assert payload["user_id"] == str(user.id)
    assert payload["email"] == "user@example.com"
    assert result.value.token_type == "bearer"
    mock_uow.audit_events.create.assert_awaited_once()
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_login_unknown_user_still_checks_a_hash(mock_uow):
    with patch("src.app.use_cases.auth.login_use_case.burn_password_check") as burn:
        result = await LoginUseCase(mock_uow).execute("ghost@example.com", PASSWORD)

    assert result.error.code == "INVALID_CREDENTIALS"
    burn.assert_called_once_with(PASSWORD)


@pytest.mark.asyncio
async def test_login_wrong_password(mock_uow, password_hash):
    mock_uow.users.get_by_email.return_value = User(
        id=uuid4(), email="user@example.com", password_hash=password_hash, email_verified=True
    )

    result = await LoginUseCase(mock_uow).execute("user@example.com", "wrong-password")

    assert result.error.code == "INVALID_CREDENTIALS"
    mock_uow.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_login_account_without_password(mock_uow):
    mock_uow.users.get_by_email.return_value = User(
        id=uuid4(), email="g@example.com", password_hash=None, email_verified=True
    )

    result = await LoginUseCase(mock_uow).execute("g@example.com", PASSWORD)

    assert result.error.code == "INVALID_CREDENTIALS"
    assert "Forgot Password" in result.error.message


@pytest.mark.asyncio
async def test_login_unverified_email(mock_uow, password_hash):
    mock_uow.users.get_by_email.return_value = User(
        id=uuid4(), email="user@example.com", password_hash=password_hash, email_verified=False
    )

    result = await LoginUseCase(mock_uow).execute("user@example.com", PASSWORD)

    assert result.error.code == "EMAIL_NOT_VERIFIED"


@pytest.mark.asyncio
async def test_login_disabled_user(mock_uow, password_hash):
    mock_uow.users.get_by_email.return_value = User(
        id=uuid4(),
        email="user@example.com",
        password_hash=password_hash,
        email_verified=True,
        status=UserStatus.disabled,
    )

    result = await LoginUseCase(mock_uow).execute("user@example.com", PASSWORD)

    assert result.error.code == "USER_DISABLED"
