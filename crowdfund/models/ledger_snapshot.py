"""LedgerSnapshot ORM — durable copy of projects, contributions, and token balances.

Invariants:
    - Exactly one row (id = 1) holds the current state; it is upserted after
      every committed operation
    - last_event_seq equals the seq of the newest event committed with it

Design Decisions:
    - JSON column for the snapshot: layout owned by core/ledger_snapshot.py
    - last_event_seq lets hydration detect a snapshot/event-log mismatch
"""

from datetime import datetime, timezone

from sqlalchemy import Integer, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from crowdfund.db.base import Base

CURRENT_SNAPSHOT_ID = 1


class LedgerSnapshot(Base):
    """Current serialized ledger state."""
    __tablename__ = "ledger_snapshots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    snapshot: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    last_event_seq: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
