"""Ledger Notifications — append-only, commit-ordered events for observers and indexers.

Invariants:
    - seq starts at 1 and increases by exactly 1 per appended event
    - append() only records; observers are reached through publish(), which the
      runtime calls once the operation and its persistence have committed
    - Observers receive events synchronously, in seq order; a failing observer
      never undoes or aborts the committed operation
    - A truncated (rolled back) event is never published
    - event_to_dict / event_from_dict are JSON-safe and inverse of each other

Design Decisions:
    - Frozen dataclasses: an emitted notification is immutable
    - Explicit name -> class registry over getattr lookup
    - No acknowledgment: delivery is the observer's responsibility
"""

import logging
from dataclasses import asdict, dataclass
from typing import Callable, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectCreated:
    project_id: int
    owner: str
    goal: int
    deadline: int


@dataclass(frozen=True)
class ProjectFunded:
    project_id: int
    contributor: str
    amount: int


@dataclass(frozen=True)
class ProjectEnded:
    project_id: int
    succeeded: bool


@dataclass(frozen=True)
class FundsWithdrawn:
    project_id: int
    contributor: str
    amount: int


LedgerEvent = Union[ProjectCreated, ProjectFunded, ProjectEnded, FundsWithdrawn]

_EVENT_TYPES: dict[str, type] = {
    "ProjectCreated": ProjectCreated,
    "ProjectFunded": ProjectFunded,
    "ProjectEnded": ProjectEnded,
    "FundsWithdrawn": FundsWithdrawn,
}


def event_name(event: LedgerEvent) -> str:
    return type(event).__name__


def event_to_dict(event: LedgerEvent) -> dict:
    return {"name": event_name(event), "args": asdict(event)}


def event_from_dict(data: dict) -> LedgerEvent:
    try:
        cls = _EVENT_TYPES[data["name"]]
    except KeyError:
        raise ValueError(f"Unknown ledger event: {data.get('name')!r}")
    return cls(**data["args"])


@dataclass(frozen=True)
class RecordedEvent:
    """Event plus its position in the log."""
    seq: int
    event: LedgerEvent


class EventLog:
    """Append-only notification log with synchronous observers."""

    def __init__(self) -> None:
        self._records: list[RecordedEvent] = []
        self._observers: list[Callable[[int, LedgerEvent], None]] = []

    @property
    def last_seq(self) -> int:
        return self._records[-1].seq if self._records else 0

    def __len__(self) -> int:
        return len(self._records)

    def subscribe(self, observer: Callable[[int, LedgerEvent], None]) -> None:
        self._observers.append(observer)

    def append(self, event: LedgerEvent) -> RecordedEvent:
        record = RecordedEvent(seq=self.last_seq + 1, event=event)
        self._records.append(record)
        return record

    def publish(self, records: list[RecordedEvent]) -> None:
        """Deliver committed records to every observer, in seq order."""
        for record in records:
            for observer in self._observers:
                try:
                    observer(record.seq, record.event)
                except Exception:
                    logger.exception(
                        "Event observer failed",
                        extra={"event": event_name(record.event), "seq": record.seq},
                    )

    def since(self, seq: int, limit: int | None = None) -> list[RecordedEvent]:
        """Events with seq strictly greater than `seq`, oldest first."""
        # seq == index + 1, so the tail starts at index `seq`
        tail = self._records[max(seq, 0):]
        return tail if limit is None else tail[:limit]

    def truncate(self, seq: int) -> None:
        """Drop events after `seq` — used only to undo an unpersisted operation."""
        del self._records[max(seq, 0):]

    def restore(self, records: list[RecordedEvent]) -> None:
        ordered = sorted(records, key=lambda r: r.seq)
        if [r.seq for r in ordered] != list(range(1, len(ordered) + 1)):
            raise ValueError("Event log sequence has gaps")
        self._records = ordered
