"""Lifecycle Enforcement — tests for the pure precondition checks.

Tests cover:
    - check_create: goal <= 0, deadline <= now
    - check_fund: id range, amount <= 0, deadline reached
    - check_end: owner, deadline, already ended (in that order)
    - check_withdraw: not ended, succeeded
    - check_caller: custody account refused
    - Validators return errors and never mutate the store
"""

from crowdfund.core.enforce_lifecycle import (
    check_caller, check_create, check_end, check_fund, check_project_id,
    check_withdraw,
)
from crowdfund.core.errors import (
    CallerNotProjectOwnerError,
    CannotWithdrawFromSuccessfulProjectError,
    DeadlineAlreadyPassedError,
    DeadlineNotPassedYetError,
    ErrorCategory,
    InvalidAmountError,
    InvalidDeadlineError,
    InvalidGoalError,
    InvalidProjectIdError,
    ProjectAlreadyEndedError,
    ProjectNotEndedYetError,
    ReservedAccountError,
)
from crowdfund.core.project_store import ProjectStore

NOW = 1000
DEADLINE = 2000


def _store_with_project() -> ProjectStore:
    store = ProjectStore()
    store.create_project("alice", 1500, DEADLINE)
    return store


# ─── check_create ────────────────────────────────────────────────

def test_create_valid():
    assert check_create(1500, DEADLINE, NOW) is None


def test_create_zero_goal():
    error = check_create(0, DEADLINE, NOW)
    assert isinstance(error, InvalidGoalError)
    assert error.category == ErrorCategory.VALIDATION


def test_create_negative_goal():
    assert isinstance(check_create(-1, DEADLINE, NOW), InvalidGoalError)


def test_create_deadline_equal_to_now():
    assert isinstance(check_create(1500, NOW, NOW), InvalidDeadlineError)


def test_create_deadline_in_past():
    assert isinstance(check_create(1500, NOW - 1, NOW), InvalidDeadlineError)


def test_create_goal_checked_before_deadline():
    assert isinstance(check_create(0, NOW, NOW), InvalidGoalError)


# ─── check_fund ──────────────────────────────────────────────────

def test_fund_valid():
    assert check_fund(_store_with_project(), 1, 900, NOW) is None


def test_fund_id_zero_and_past_count():
    store = _store_with_project()
    assert isinstance(check_fund(store, 0, 900, NOW), InvalidProjectIdError)
    assert isinstance(check_fund(store, 2, 900, NOW), InvalidProjectIdError)


def test_fund_non_positive_amount():
    store = _store_with_project()
    assert isinstance(check_fund(store, 1, 0, NOW), InvalidAmountError)
    assert isinstance(check_fund(store, 1, -5, NOW), InvalidAmountError)


def test_fund_at_deadline():
    error = check_fund(_store_with_project(), 1, 900, DEADLINE)
    assert isinstance(error, DeadlineAlreadyPassedError)
    assert error.category == ErrorCategory.LIFECYCLE


def test_fund_id_checked_before_amount():
    assert isinstance(check_fund(_store_with_project(), 9, 0, NOW), InvalidProjectIdError)


# ─── check_end ───────────────────────────────────────────────────

def test_end_valid_at_deadline():
    assert check_end(_store_with_project(), 1, "alice", DEADLINE) is None


def test_end_invalid_id():
    assert isinstance(check_end(_store_with_project(), 3, "alice", DEADLINE), InvalidProjectIdError)


def test_end_non_owner():
    error = check_end(_store_with_project(), 1, "bob", DEADLINE)
    assert isinstance(error, CallerNotProjectOwnerError)
    assert error.http_status == 403


def test_end_before_deadline():
    assert isinstance(
        check_end(_store_with_project(), 1, "alice", DEADLINE - 1), DeadlineNotPassedYetError,
    )


def test_end_already_ended():
    store = _store_with_project()
    store.get_project(1).ended = True
    assert isinstance(check_end(store, 1, "alice", DEADLINE), ProjectAlreadyEndedError)


def test_end_owner_checked_before_deadline():
    assert isinstance(
        check_end(_store_with_project(), 1, "bob", NOW), CallerNotProjectOwnerError,
    )


# ─── check_withdraw ──────────────────────────────────────────────

def test_withdraw_not_ended():
    assert isinstance(check_withdraw(_store_with_project(), 1), ProjectNotEndedYetError)


def test_withdraw_succeeded():
    store = _store_with_project()
    project = store.get_project(1)
    project.ended = True
    project.succeeded = True
    error = check_withdraw(store, 1)
    assert isinstance(error, CannotWithdrawFromSuccessfulProjectError)
    assert error.category == ErrorCategory.ECONOMIC_STATE


def test_withdraw_failed_project_allowed():
    store = _store_with_project()
    store.get_project(1).ended = True
    assert check_withdraw(store, 1, "bob") is None


def test_validators_do_not_mutate():
    store = _store_with_project()
    check_fund(store, 1, 900, NOW)
    check_end(store, 1, "alice", DEADLINE)
    check_withdraw(store, 1)
    project = store.get_project(1)
    assert (project.amount_raised, project.ended, project.succeeded) == (0, False, False)
    assert store.count() == 1


def test_project_id_error_carries_context():
    error = check_project_id(ProjectStore(), 5, "fund_project")
    assert error.context.project_id == 5
    assert error.context.operation == "fund_project"
    assert error.to_response()["error"]["code"] == "INVALID_PROJECT_ID"


# ─── check_caller ────────────────────────────────────────────────

def test_caller_custody_rejected():
    error = check_caller("custody", "custody", "fund_project")
    assert isinstance(error, ReservedAccountError)
    assert error.category == ErrorCategory.AUTHORIZATION
    assert error.context.operation == "fund_project"


def test_caller_regular_account_allowed():
    assert check_caller("bob", "custody") is None
