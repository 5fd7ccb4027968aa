"""Service test fixtures — async DB, recording reporter, fake notifier, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db, get_settings and get_notifier overridden for route-level injection
    - report_dispatcher singleton patched so error handlers and routes share one recorder

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - Recording reporter returns predictable ids ("recording-1", "recording-2", ...)
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from onboarding.api.dependencies import get_notifier
from onboarding.config import Settings, get_settings
from onboarding.db.base import Base
from onboarding.infrastructure.database import get_db
from onboarding.infrastructure.report_dispatch import ReportDispatcher
import onboarding.infrastructure.report_dispatch as dispatch_module
import onboarding.models  # noqa: F401
from onboarding.main import app

from tests.services.fakes import (
    ADMIN_KEY, VIEWER_KEY, FakeNotifier, RecordingReporter,
)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def recording_reporter():
    return RecordingReporter()


@pytest.fixture
def dispatcher(recording_reporter):
    return ReportDispatcher(
        [recording_reporter], timeout_seconds=1.0, ceiling_seconds=2.0,
    )


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def test_settings():
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        api_keys={
            ADMIN_KEY: {
                "id": "admin", "permissions": ["create-user", "view-users"],
            },
            VIEWER_KEY: {"id": "viewer", "permissions": ["view-users"]},
        },
    )


@pytest.fixture
async def client(test_session_factory, test_settings, notifier, dispatcher, monkeypatch):
    """FastAPI test client with DB, settings and collaborators overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_notifier] = lambda: notifier
    monkeypatch.setattr(dispatch_module, "report_dispatcher", dispatcher)

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
