"""LedgerEventRecord ORM — append-only notification log.

Invariants:
    - seq is the primary key and matches EventLog.seq (1, 2, 3, ...)
    - Rows are inserted, never updated or deleted
    - project_id denormalized from payload for per-project queries
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column

from crowdfund.db.base import Base


class LedgerEventRecord(Base):
    """One emitted notification (ProjectCreated, ProjectFunded, ...)."""
    __tablename__ = "ledger_events"

    seq: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=False,
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    project_id: Mapped[int] = mapped_column(Integer, nullable=False)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("ix_ledger_events_project", "project_id"),
    )
