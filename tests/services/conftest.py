"""Service test fixtures — wired controller, async DB, ledger runtime + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database and a fresh runtime
    - get_db, get_runtime and get_clock overridden on the app; cleared afterwards
    - db_manager patched so the readiness probe sees the test engine

Design Decisions:
    - Reference deployment values: fee 1/100, fee recipient "owner",
      bob and john hold 1000 tokens each
    - FakeClock instead of sleeping: tests move time with clock.now = ...
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from crowdfund.api.deps import get_clock
from crowdfund.core.contribution_ledger import ContributionLedger
from crowdfund.core.events import EventLog
from crowdfund.core.fee_engine import FeeConfig
from crowdfund.core.project_store import ProjectStore
from crowdfund.db.base import Base
from crowdfund.infrastructure.database import get_db, DatabaseSessionManager
from crowdfund.infrastructure.token_ledger import InMemoryTokenLedger
import crowdfund.infrastructure.database as db_module
import crowdfund.services.ledger_runtime as runtime_module
from crowdfund.services.ledger_runtime import LedgerRuntime, get_runtime
from crowdfund.services.lifecycle_controller import LifecycleController
from crowdfund.main import app

NOW = 1_700_000_000
DEADLINE = NOW + 24 * 60 * 60
CUSTODY = "custody"
PLATFORM = "owner"


class FakeClock:
    def __init__(self, now: int = NOW):
        self.now = now

    def __call__(self) -> int:
        return self.now


# ─── Pure controller ─────────────────────────────────────────────

@pytest.fixture
def tokens():
    return InMemoryTokenLedger({"bob": 1000, "john": 1000})


@pytest.fixture
def controller(tokens):
    return LifecycleController(
        ProjectStore(), ContributionLedger(), EventLog(), tokens,
        FeeConfig(1, 100),
        custody_account=CUSTODY, fee_recipient=PLATFORM,
    )


@pytest.fixture
def project(controller):
    """Project 1, owned by alice, goal 1500, deadline one day out."""
    return controller.create_project("alice", 1500, DEADLINE, NOW)


# ─── Database ────────────────────────────────────────────────────

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


# ─── Runtime + HTTP client ───────────────────────────────────────

@pytest.fixture
def runtime():
    return LedgerRuntime(
        FeeConfig(1, 100),
        custody_account=CUSTODY,
        fee_recipient=PLATFORM,
        token_ledger=InMemoryTokenLedger({"bob": 1000, "john": 1000}),
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
async def client(test_engine, test_session_factory, runtime, clock):
    """FastAPI test client with DB, runtime and clock overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_runtime] = lambda: runtime
    app.dependency_overrides[get_clock] = lambda: clock

    original_manager = db_module.db_manager
    original_runtime = runtime_module.ledger_runtime
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager
    runtime_module.ledger_runtime = runtime

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
    runtime_module.ledger_runtime = original_runtime
