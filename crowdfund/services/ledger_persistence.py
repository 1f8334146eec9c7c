"""Ledger Persistence — durable snapshot and event rows via SQLAlchemy async.

Invariants:
    - save_ledger_state writes the snapshot and the new events in ONE commit
    - Event rows are inserted in seq order and never updated
    - load_ledger_state returns (None, []) on an empty database

Design Decisions:
    - Snapshot upsert by fixed primary key: the ledger has a single current state
    - Events stored as {"name", "args"} payload from core/events.event_to_dict
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from crowdfund.core.events import RecordedEvent, event_from_dict, event_to_dict
from crowdfund.models.ledger_event import LedgerEventRecord
from crowdfund.models.ledger_snapshot import CURRENT_SNAPSHOT_ID, LedgerSnapshot

logger = logging.getLogger(__name__)


async def save_ledger_state(
    db: AsyncSession, snapshot: dict, new_events: list[RecordedEvent],
) -> None:
    """Upsert the snapshot row and append event rows, then commit."""
    row = await db.get(LedgerSnapshot, CURRENT_SNAPSHOT_ID)
    last_seq = new_events[-1].seq if new_events else None
    if row is None:
        row = LedgerSnapshot(
            id=CURRENT_SNAPSHOT_ID, snapshot=snapshot, last_event_seq=last_seq or 0,
        )
        db.add(row)
    else:
        row.snapshot = snapshot
        if last_seq is not None:
            row.last_event_seq = last_seq

    for record in new_events:
        payload = event_to_dict(record.event)
        db.add(LedgerEventRecord(
            seq=record.seq,
            name=payload["name"],
            project_id=record.event.project_id,
            payload=payload,
        ))
    await db.commit()


async def load_ledger_state(
    db: AsyncSession,
) -> tuple[dict | None, list[RecordedEvent]]:
    """Return the stored snapshot (or None) and all events in seq order."""
    row = await db.get(LedgerSnapshot, CURRENT_SNAPSHOT_ID)
    result = await db.execute(
        select(LedgerEventRecord).order_by(LedgerEventRecord.seq.asc()),
    )
    events = [
        RecordedEvent(seq=r.seq, event=event_from_dict(r.payload))
        for r in result.scalars().all()
    ]
    if row is not None and events and events[-1].seq != row.last_event_seq:
        logger.warning(
            f"Snapshot at seq {row.last_event_seq} but event log ends at {events[-1].seq}",
        )
    return (row.snapshot if row else None), events
