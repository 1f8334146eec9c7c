"""Project Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - Amounts are integers (token base units); floats and strings rejected
    - Sign checks (goal > 0, amount > 0, deadline > now) are NOT done here:
      the ledger core owns them so HTTP and in-process callers fail identically
    - ProjectResponse mirrors core Project plus the derived status

Design Decisions:
    - StrictInt: "10.5" or 10.5 must not be silently truncated into a pledge
    - from_project helpers keep route handlers free of field mapping
"""

from pydantic import BaseModel, Field, StrictInt

from crowdfund.core.domain_types import ProjectStatus
from crowdfund.core.events import RecordedEvent, event_to_dict
from crowdfund.core.project_store import Project


class ProjectCreate(BaseModel):
    """Project creation — goal in token units, deadline in Unix seconds."""
    goal: StrictInt
    deadline: StrictInt


class FundRequest(BaseModel):
    """Pledge from the calling account."""
    amount: StrictInt


class ProjectResponse(BaseModel):
    id: int
    owner: str
    goal: int
    deadline: int
    amount_raised: int
    ended: bool
    succeeded: bool
    status: ProjectStatus

    @classmethod
    def from_project(cls, project: Project) -> "ProjectResponse":
        return cls(
            id=project.id,
            owner=project.owner,
            goal=project.goal,
            deadline=project.deadline,
            amount_raised=project.amount_raised,
            ended=project.ended,
            succeeded=project.succeeded,
            status=project.status,
        )


class ProjectListResponse(BaseModel):
    count: int
    projects: list[ProjectResponse]


class EndProjectResponse(BaseModel):
    """Close outcome — fee and payout are 0 when the goal was missed."""
    project: ProjectResponse
    succeeded: bool
    fee: int
    payout: int


class WithdrawResponse(BaseModel):
    project_id: int
    account: str
    amount: int


class ContributionResponse(BaseModel):
    project_id: int
    account: str
    amount: int


class BalanceResponse(BaseModel):
    account: str
    balance: int


class PlatformResponse(BaseModel):
    fee_rate: int
    fee_scale_factor: int
    fee_recipient: str
    custody_account: str
    project_count: int


class EventResponse(BaseModel):
    seq: int
    name: str
    args: dict

    @classmethod
    def from_record(cls, record: RecordedEvent) -> "EventResponse":
        payload = event_to_dict(record.event)
        return cls(seq=record.seq, name=payload["name"], args=payload["args"])


class EventListResponse(BaseModel):
    events: list[EventResponse]
    last_seq: int = Field(ge=0)
