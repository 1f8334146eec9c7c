"""Event Routes — ordered notification feed for observers and indexers.

Invariants:
    - Events returned in commit (seq) order
    - `after` is exclusive: after=0 starts from the first event
"""

from fastapi import APIRouter, Depends, Query

from crowdfund.schemas.project import EventListResponse, EventResponse
from crowdfund.services.ledger_runtime import LedgerRuntime, get_runtime

router = APIRouter(prefix="/api/v1/events", tags=["events"])


@router.get("", response_model=EventListResponse)
async def list_events(
    after: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    runtime: LedgerRuntime = Depends(get_runtime),
):
    """Notifications with seq > after."""
    records = runtime.events.since(after, limit=limit)
    return EventListResponse(
        events=[EventResponse.from_record(r) for r in records],
        last_seq=runtime.events.last_seq,
    )
