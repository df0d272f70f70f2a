import re
from typing import List, Optional, Tuple

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.notification_dispatcher import IEmailSender
from src.depends import get_unit_of_work

CODE_PATTERN = re.compile(r">(\d{6})<")


class IntegrationConfig(ApplicationConfig):
    OTP_SECRET = "integration-test-otp-secret"
    AUTO_CREATE_TABLES = False


class RecordingEmailSender(IEmailSender):
    """Keeps every message instead of talking to a relay"""

    def __init__(self):
        self.sent: List[Tuple[str, str, str]] = []

    async def send(self, to: str, subject: str, html_body: str) -> None:
        self.sent.append((to, subject, html_body))

    def messages_to(self, to: str) -> List[Tuple[str, str, str]]:
        return [m for m in self.sent if m[0] == to]

    def latest_code(self, to: str) -> Optional[str]:
        for _, _, html_body in reversed(self.messages_to(to)):
            match = CODE_PATTERN.search(html_body)
            if match:
                return match.group(1)
        return None


class Mailbox:
    def __init__(self, app, sender: RecordingEmailSender):
        self._dispatcher = app.state.notification_dispatcher
        self._sender = sender

    async def messages_to(self, to: str):
        await self._dispatcher.drain()
        return self._sender.messages_to(to)

    async def latest_code(self, to: str) -> Optional[str]:
        await self._dispatcher.drain()
        return self._sender.latest_code(to)

    async def codes_to(self, to: str) -> List[str]:
        """Every code sent to an address, oldest first"""
        await self._dispatcher.drain()
        codes = []
        for _, _, html_body in self._sender.messages_to(to):
            match = CODE_PATTERN.search(html_body)
            if match:
                codes.append(match.group(1))
        return codes


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def app(session_factory):
    from src.api.app import create_app

    app = create_app(IntegrationConfig)
    app.state.notification_dispatcher.sender = RecordingEmailSender()

    async def override_get_unit_of_work():
        # A fresh session per request, like production
        async with session_factory() as session:
            yield SqlAlchemyUnitOfWork(session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    yield app
    await app.state.notification_dispatcher.drain()


@pytest_asyncio.fixture
async def mailbox(app):
    return Mailbox(app, app.state.notification_dispatcher.sender)


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def verified_user(client, mailbox):
    """Registers and verifies an account, returns (email, password, access token)"""

    async def _create(email: str = "user@example.com", password: str = "secret123"):
        response = await client.post(
            "/auth/register", json={"email": email, "password": password}
        )
        assert response.status_code == 201
        code = await mailbox.latest_code(email)
        response = await client.post(
            "/auth/verify-email", json={"email": email, "code": code}
        )
        assert response.status_code == 200
        response = await client.post(
            "/auth/login", json={"email": email, "password": password}
        )
        assert response.status_code == 200
        return email, password, response.json()["access_token"]

    return _create
