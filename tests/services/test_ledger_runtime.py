"""Ledger Runtime — tests for serialized, persisted, all-or-nothing execution.

Tests cover:
    - Committed operations survive a restart (hydrate from the same database)
    - Rule violations persist nothing
    - A persistence failure rolls store, ledger, events and balances back
    - Observers hear only committed events, so seq numbers are never reused
    - First start seeds initial token balances
"""

import pytest

from crowdfund.core.errors import DatabaseError, InvalidAmountError
from crowdfund.core.events import ProjectCreated, ProjectFunded
from crowdfund.core.fee_engine import FeeConfig
from crowdfund.services.ledger_persistence import load_ledger_state
from crowdfund.services.ledger_runtime import LedgerRuntime

NOW = 1_700_000_000
DEADLINE = NOW + 24 * 60 * 60


class FailingSession:
    """Stands in for AsyncSession; every database call fails."""

    async def get(self, *args, **kwargs):
        raise DatabaseError("Connection or operational error", "execute")


def _fresh_runtime():
    return LedgerRuntime(FeeConfig(1, 100), custody_account="custody", fee_recipient="owner")


async def test_state_survives_restart(runtime, test_session_factory):
    async with test_session_factory() as db:
        await runtime.execute(db, lambda c: c.create_project("alice", 1500, DEADLINE, NOW))
        await runtime.execute(db, lambda c: c.fund_project("bob", 1, 700, NOW))

    restarted = _fresh_runtime()
    async with test_session_factory() as db:
        await restarted.hydrate(db)

    assert restarted.store.get_project(1) == runtime.store.get_project(1)
    assert restarted.ledger.get(1, "bob") == 700
    assert restarted.tokens.balance_of("custody") == 700
    assert restarted.tokens.balance_of("bob") == 300
    assert restarted.events.last_seq == 2
    assert restarted.events.since(1)[0].event == ProjectFunded(1, "bob", 700)


async def test_rule_violation_persists_nothing(runtime, test_session_factory):
    async with test_session_factory() as db:
        await runtime.execute(db, lambda c: c.create_project("alice", 1500, DEADLINE, NOW))
        with pytest.raises(InvalidAmountError):
            await runtime.execute(db, lambda c: c.fund_project("bob", 1, -1, NOW))

    async with test_session_factory() as db:
        snapshot, events = await load_ledger_state(db)
    assert len(events) == 1
    assert snapshot["contributions"] == []


async def test_persistence_failure_rolls_back(runtime, test_session_factory):
    async with test_session_factory() as db:
        await runtime.execute(db, lambda c: c.create_project("alice", 1500, DEADLINE, NOW))
    before = runtime.snapshot()

    with pytest.raises(DatabaseError):
        await runtime.execute(FailingSession(), lambda c: c.fund_project("bob", 1, 500, NOW))

    assert runtime.snapshot() == before
    assert runtime.tokens.balance_of("bob") == 1000
    assert runtime.store.get_project(1).amount_raised == 0
    assert runtime.events.last_seq == 1


async def test_observers_see_only_committed_events(runtime, test_session_factory):
    seen = []
    runtime.events.subscribe(lambda seq, event: seen.append((seq, event)))

    async with test_session_factory() as db:
        await runtime.execute(db, lambda c: c.create_project("alice", 1500, DEADLINE, NOW))
    with pytest.raises(DatabaseError):
        await runtime.execute(FailingSession(), lambda c: c.fund_project("bob", 1, 500, NOW))
    assert seen == [(1, ProjectCreated(1, "alice", 1500, DEADLINE))]

    async with test_session_factory() as db:
        await runtime.execute(db, lambda c: c.fund_project("john", 1, 200, NOW))
    assert seen[-1] == (2, ProjectFunded(1, "john", 200))
    assert [seq for seq, _ in seen] == [1, 2]


async def test_hydrate_seeds_initial_balances(test_session_factory):
    runtime = LedgerRuntime(
        FeeConfig(1, 100), custody_account="custody", fee_recipient="owner",
        initial_balances={"bob": 250},
    )
    async with test_session_factory() as db:
        await runtime.hydrate(db)
    assert runtime.tokens.balance_of("bob") == 250
    assert runtime.store.count() == 0


async def test_hydrate_prefers_snapshot_over_seed(runtime, test_session_factory):
    async with test_session_factory() as db:
        await runtime.execute(db, lambda c: c.create_project("alice", 1500, DEADLINE, NOW))

    restarted = LedgerRuntime(
        FeeConfig(1, 100), custody_account="custody", fee_recipient="owner",
        initial_balances={"mallory": 10**6},
    )
    async with test_session_factory() as db:
        await restarted.hydrate(db)
    assert restarted.tokens.balance_of("mallory") == 0
    assert restarted.tokens.balance_of("bob") == 1000
