"""Lifecycle Enforcement — validates every precondition of the four ledger operations.

Invariants:
    - All functions are PURE: no IO, no async, no side effects
    - Return the error variant on violation, None on success
    - Checks run in a fixed order per operation, so the first failing rule
      is deterministic for a given state and input
    - Controller runs these BEFORE any mutation or port call

Design Decisions:
    - Return errors (not raise): callers can test rules without try/except and
      the controller keeps one explicit raise point per operation
    - Project-id range check first: every later rule needs the project
    - Custody identity rejected before anything else: a self-transfer into
      custody would credit a pledge without moving tokens
"""

from crowdfund.core.errors import (
    CallerNotProjectOwnerError,
    CannotWithdrawFromSuccessfulProjectError,
    CrowdfundError,
    DeadlineAlreadyPassedError,
    DeadlineNotPassedYetError,
    ErrorContext,
    InvalidAmountError,
    InvalidDeadlineError,
    InvalidGoalError,
    InvalidProjectIdError,
    ProjectAlreadyEndedError,
    ProjectNotEndedYetError,
    ReservedAccountError,
)
from crowdfund.core.project_store import ProjectStore


def check_create(
    goal: int, deadline: int, now: int, owner: str | None = None,
) -> CrowdfundError | None:
    """createProject: goal > 0 and deadline strictly in the future."""
    ctx = ErrorContext(account=owner, operation="create_project")
    if goal <= 0:
        return InvalidGoalError(goal, ctx)
    if deadline <= now:
        return InvalidDeadlineError(deadline, now, ctx)
    return None


def check_caller(
    caller: str, custody: str, operation: str | None = None,
) -> CrowdfundError | None:
    """The custody account never calls a ledger operation."""
    if caller == custody:
        return ReservedAccountError(
            caller, ErrorContext(account=caller, operation=operation),
        )
    return None


def check_project_id(
    store: ProjectStore, project_id: int, operation: str | None = None,
) -> CrowdfundError | None:
    """Id must lie in [1, count()]."""
    if not store.exists(project_id):
        return InvalidProjectIdError(
            project_id, ErrorContext(project_id=project_id, operation=operation),
        )
    return None


def check_fund(
    store: ProjectStore, project_id: int, amount: int, now: int,
    contributor: str | None = None,
) -> CrowdfundError | None:
    """fundProject: valid id, amount > 0, now < deadline."""
    error = check_project_id(store, project_id, "fund_project")
    if error:
        return error

    ctx = ErrorContext(project_id=project_id, account=contributor, operation="fund_project")
    if amount <= 0:
        return InvalidAmountError(amount, ctx)

    project = store.get_project(project_id)
    if now >= project.deadline:
        return DeadlineAlreadyPassedError(project_id, ctx)
    return None


def check_end(
    store: ProjectStore, project_id: int, caller: str, now: int,
) -> CrowdfundError | None:
    """endProject: valid id, caller is owner, deadline reached, not yet ended."""
    error = check_project_id(store, project_id, "end_project")
    if error:
        return error

    ctx = ErrorContext(project_id=project_id, account=caller, operation="end_project")
    project = store.get_project(project_id)
    if caller != project.owner:
        return CallerNotProjectOwnerError(project_id, caller, ctx)
    if now < project.deadline:
        return DeadlineNotPassedYetError(project_id, ctx)
    if project.ended:
        return ProjectAlreadyEndedError(project_id, ctx)
    return None


def check_withdraw(
    store: ProjectStore, project_id: int, caller: str | None = None,
) -> CrowdfundError | None:
    """withdrawFunds: valid id, project ended, project failed."""
    error = check_project_id(store, project_id, "withdraw_funds")
    if error:
        return error

    ctx = ErrorContext(project_id=project_id, account=caller, operation="withdraw_funds")
    project = store.get_project(project_id)
    if not project.ended:
        return ProjectNotEndedYetError(project_id, ctx)
    if project.succeeded:
        return CannotWithdrawFromSuccessfulProjectError(project_id, ctx)
    return None
