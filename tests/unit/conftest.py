import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.verification import CodeHasher

TEST_OTP_SECRET = "unit-test-otp-secret"


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.create = AsyncMock(side_effect=lambda user: user)
    uow.users.update = AsyncMock(side_effect=lambda user: user)

    uow.verification_records = MagicMock()
    uow.verification_records.get_for_user = AsyncMock(return_value=None)
    uow.verification_records.create = AsyncMock(side_effect=lambda record: record)
    uow.verification_records.delete_for_user = AsyncMock(return_value=0)
    uow.verification_records.delete = AsyncMock()
    uow.verification_records.reserve_attempt = AsyncMock(return_value=True)
    uow.verification_records.consume = AsyncMock(return_value=True)

    uow.audit_events = MagicMock()
    uow.audit_events.create = AsyncMock()
    return uow


@pytest.fixture
def code_hasher():
    return CodeHasher(TEST_OTP_SECRET)


@pytest.fixture
def mock_dispatcher():
    dispatcher = MagicMock()
    dispatcher.notify = MagicMock()
    dispatcher.drain = AsyncMock()
    return dispatcher
