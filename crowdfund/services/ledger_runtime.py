"""Ledger Runtime — process-wide owner of the ledger state, serializing every operation.

Invariants:
    - At most one operation (plus its persistence) runs at a time (asyncio.Lock)
    - An operation is reported successful only after its snapshot and events commit
    - If the operation or its persistence fails, store, ledger, event log and token
      balances are restored to the state captured before it started
    - Observers are notified only after the snapshot and events commit
    - Queries read the in-memory state directly and never take the lock

Design Decisions:
    - In-memory working set + durable snapshot: core stays pure and synchronous,
      the database only sees whole committed states
    - Module-level singleton set by the FastAPI lifespan (same pattern as db_manager)
    - The runtime owns the InMemoryTokenLedger so balances are part of the rollback
"""

import asyncio
import logging
from typing import Callable, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from crowdfund.config import Settings
from crowdfund.core.contribution_ledger import ContributionLedger
from crowdfund.core.errors import CrowdfundError
from crowdfund.core.events import EventLog
from crowdfund.core.fee_engine import FeeConfig
from crowdfund.core.ledger_snapshot import ledger_to_snapshot, restore_from_snapshot
from crowdfund.core.project_store import ProjectStore
from crowdfund.infrastructure.token_ledger import InMemoryTokenLedger
from crowdfund.services.ledger_persistence import load_ledger_state, save_ledger_state
from crowdfund.services.lifecycle_controller import LifecycleController

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LedgerRuntime:
    """Store + ledger + events + token adapter behind one lock."""

    def __init__(
        self,
        fees: FeeConfig,
        custody_account: str,
        fee_recipient: str,
        token_ledger: InMemoryTokenLedger | None = None,
        withdrawal_event_compat: bool = False,
        initial_balances: dict[str, int] | None = None,
    ):
        self.store = ProjectStore()
        self.ledger = ContributionLedger()
        self.events = EventLog()
        self.tokens = token_ledger or InMemoryTokenLedger()
        self.initial_balances = dict(initial_balances or {})
        self.controller = LifecycleController(
            self.store, self.ledger, self.events, self.tokens, fees,
            custody_account=custody_account,
            fee_recipient=fee_recipient,
            withdrawal_event_compat=withdrawal_event_compat,
        )
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "LedgerRuntime":
        return cls(
            settings.fee_config,
            custody_account=settings.custody_account,
            fee_recipient=settings.fee_recipient,
            withdrawal_event_compat=settings.withdrawal_event_compat,
            initial_balances=settings.initial_balances,
        )

    def snapshot(self) -> dict:
        return ledger_to_snapshot(self.store, self.ledger, self.tokens.to_snapshot())

    def _restore(self, snapshot: dict, last_seq: int) -> None:
        balances = restore_from_snapshot(self.store, self.ledger, snapshot)
        self.tokens.restore(balances)
        self.events.truncate(last_seq)

    async def hydrate(self, db: AsyncSession) -> None:
        """Load persisted state, or seed token balances on first start."""
        async with self._lock:
            snapshot, events = await load_ledger_state(db)
            if snapshot is None:
                self.tokens.restore(self.initial_balances)
                logger.info(
                    f"No ledger snapshot found; seeded {len(self.initial_balances)} account(s)",
                )
                return
            balances = restore_from_snapshot(self.store, self.ledger, snapshot)
            self.tokens.restore(balances)
            self.events.restore(events)
            logger.info(
                f"Ledger restored: {self.store.count()} project(s), {len(events)} event(s)",
            )

    async def execute(
        self, db: AsyncSession, operation: Callable[[LifecycleController], T],
    ) -> T:
        """Run one controller operation and persist it, atomically."""
        async with self._lock:
            before = self.snapshot()
            last_seq = self.events.last_seq
            try:
                result = operation(self.controller)
                await save_ledger_state(db, self.snapshot(), self.events.since(last_seq))
            except CrowdfundError:
                self._restore(before, last_seq)
                raise
            except Exception:
                self._restore(before, last_seq)
                logger.error("Ledger operation rolled back", exc_info=True)
                raise
            self.events.publish(self.events.since(last_seq))
            return result


# Singleton (initialized on startup)
ledger_runtime: LedgerRuntime | None = None


def init_runtime(settings: Settings) -> LedgerRuntime:
    global ledger_runtime
    ledger_runtime = LedgerRuntime.from_settings(settings)
    return ledger_runtime


def get_runtime() -> LedgerRuntime:
    """FastAPI dependency for the ledger runtime."""
    if not ledger_runtime:
        raise RuntimeError("Ledger runtime not initialized")
    return ledger_runtime
