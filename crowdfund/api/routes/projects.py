"""Project Routes — create, fund, end, withdraw, and project/contribution queries.

Invariants:
    - Mutations go through LedgerRuntime.execute (serialized, persisted, atomic)
    - Queries read the runtime directly; absent projects are 404, absent
      contributions read as 0
    - Caller and current time resolved by dependencies, passed explicitly

Design Decisions:
    - Ledger errors propagate to the global CrowdfundError handler
      (status code chosen by the error class, not the route)
"""

import logging
from typing import Callable

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from crowdfund.api.deps import get_caller, get_clock
from crowdfund.core.errors import ErrorContext, InvalidProjectIdError
from crowdfund.infrastructure.database import get_db
from crowdfund.schemas.project import (
    ContributionResponse,
    EndProjectResponse,
    FundRequest,
    ProjectCreate,
    ProjectListResponse,
    ProjectResponse,
    WithdrawResponse,
)
from crowdfund.services.ledger_runtime import LedgerRuntime, get_runtime

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


@router.post(
    "", response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_project(
    body: ProjectCreate,
    caller: str = Depends(get_caller),
    clock: Callable[[], int] = Depends(get_clock),
    runtime: LedgerRuntime = Depends(get_runtime),
    db: AsyncSession = Depends(get_db),
):
    """Open a project owned by the calling account."""
    now = clock()
    project = await runtime.execute(
        db, lambda c: c.create_project(caller, body.goal, body.deadline, now),
    )
    return ProjectResponse.from_project(project)


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    runtime: LedgerRuntime = Depends(get_runtime),
):
    """List projects in id order with pagination."""
    return ProjectListResponse(
        count=runtime.store.count(),
        projects=[
            ProjectResponse.from_project(p)
            for p in runtime.store.list_projects(limit=limit, offset=offset)
        ],
    )


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: int, runtime: LedgerRuntime = Depends(get_runtime),
):
    """Get one project."""
    project = runtime.controller.get_project(project_id)
    if project is None:
        raise InvalidProjectIdError(
            project_id, ErrorContext(project_id=project_id, operation="get_project"),
        )
    return ProjectResponse.from_project(project)


@router.post("/{project_id}/fund", response_model=ProjectResponse)
async def fund_project(
    project_id: int,
    body: FundRequest,
    caller: str = Depends(get_caller),
    clock: Callable[[], int] = Depends(get_clock),
    runtime: LedgerRuntime = Depends(get_runtime),
    db: AsyncSession = Depends(get_db),
):
    """Pledge tokens from the calling account into custody."""
    now = clock()
    project = await runtime.execute(
        db, lambda c: c.fund_project(caller, project_id, body.amount, now),
    )
    return ProjectResponse.from_project(project)


@router.post("/{project_id}/end", response_model=EndProjectResponse)
async def end_project(
    project_id: int,
    caller: str = Depends(get_caller),
    clock: Callable[[], int] = Depends(get_clock),
    runtime: LedgerRuntime = Depends(get_runtime),
    db: AsyncSession = Depends(get_db),
):
    """Close a project after its deadline (owner only)."""
    now = clock()
    result = await runtime.execute(
        db, lambda c: c.end_project(caller, project_id, now),
    )
    return EndProjectResponse(
        project=ProjectResponse.from_project(result.project),
        succeeded=result.succeeded,
        fee=result.fee,
        payout=result.payout,
    )


@router.post("/{project_id}/withdraw", response_model=WithdrawResponse)
async def withdraw_funds(
    project_id: int,
    caller: str = Depends(get_caller),
    runtime: LedgerRuntime = Depends(get_runtime),
    db: AsyncSession = Depends(get_db),
):
    """Reclaim the caller's pledge from a failed project."""
    result = await runtime.execute(
        db, lambda c: c.withdraw_funds(caller, project_id),
    )
    return WithdrawResponse(
        project_id=result.project_id, account=result.account, amount=result.amount,
    )


@router.get(
    "/{project_id}/contributions/{account}",
    response_model=ContributionResponse,
)
async def get_contribution(
    project_id: int, account: str,
    runtime: LedgerRuntime = Depends(get_runtime),
):
    """Outstanding reclaimable pledge (0 when none)."""
    return ContributionResponse(
        project_id=project_id,
        account=account,
        amount=runtime.controller.get_contribution(project_id, account),
    )
