import re

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from authcore.adapter.services.rate_window_store import InMemoryRateWindowStore
from authcore.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from authcore.app.services.notifier import Notifier
from authcore.app.services.passwords import PasswordHasher
from authcore.app.services.rate_limiter import RateLimiter
from authcore.depends import (
    get_notifier,
    get_password_hasher,
    get_rate_limiter,
    get_unit_of_work,
)


class CapturingNotifier(Notifier):
    """Keeps every outbound message so tests can read the mailed code"""

    def __init__(self):
        self.sent = []

    async def send(self, address: str, subject: str, body: str) -> None:
        self.sent.append((address, subject, body))

    def last_code_for(self, address: str) -> str:
        for to, _, body in reversed(self.sent):
            if to == address:
                return re.search(r"<h4>(\d+)</h4>", body).group(1)
        raise AssertionError(f"No message sent to {address}")


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
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest.fixture
def notifier():
    return CapturingNotifier()


@pytest.fixture
def rate_limiter():
    return RateLimiter(InMemoryRateWindowStore(), permit_limit=5, window_seconds=60)


@pytest.fixture
def app(engine, notifier, rate_limiter):
    from authcore.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    hasher = PasswordHasher(rounds=4)

    async def override_get_unit_of_work():
        async with Session() as session:
            yield SqlAlchemyUnitOfWork(session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_password_hasher] = lambda: hasher
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def register_account(client):
    async def _register(
        email="alice@example.com", password="S3cure!", display_name="Alice", phone=None
    ):
        payload = {"email": email, "password": password, "displayName": display_name}
        if phone is not None:
            payload["phone"] = phone
        return await client.post("/register", json=payload)

    return _register
