"""Lifecycle Controller — the four atomic ledger operations: create, fund, end, withdraw.

Invariants:
    - Every precondition (core/enforce_lifecycle.py) checked before any mutation or port call
    - Each operation fully applies or raises with no state change
    - Custody-side state is committed BEFORE any transfer_out, and restored if the
      port rejects; funding pulls tokens in BEFORE crediting the ledger
    - One notification per committed operation, appended after the commit
    - The custody account is never accepted as caller
    - `caller` and `now` are explicit arguments — no ambient identity or clock

Design Decisions:
    - Sync, not async: operations are bounded call-and-check sequences; the shell
      (services/ledger_runtime.py) serializes them and handles persistence
    - Port rejections become TransferFailedError; already-completed payouts of the
      same operation are compensated back into custody before raising
    - Withdrawal notification configurable: FundsWithdrawn(actual amount) by default,
      legacy ProjectFunded(id, caller, 0) when withdrawal_event_compat is set
"""

import logging
from dataclasses import dataclass

from crowdfund.core.contribution_ledger import ContributionLedger
from crowdfund.core.domain_types import (
    AccountId, Amount, ProjectId, Timestamp, TransferDirection,
)
from crowdfund.core.enforce_lifecycle import (
    check_caller, check_create, check_end, check_fund, check_withdraw,
)
from crowdfund.core.errors import (
    CrowdfundError, ErrorContext, ErrorSeverity, TransferFailedError,
)
from crowdfund.core.events import (
    EventLog, FundsWithdrawn, ProjectCreated, ProjectEnded, ProjectFunded,
)
from crowdfund.core.fee_engine import FeeConfig
from crowdfund.core.project_store import Project, ProjectStore
from crowdfund.core.repository_protocols import ValueTransferPort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EndResult:
    """Outcome of a close: fee and payout are 0 for a failed project."""
    project: Project
    succeeded: bool
    fee: int
    payout: int


@dataclass(frozen=True)
class WithdrawResult:
    project_id: int
    account: str
    amount: int


def _raise_if(error: CrowdfundError | None) -> None:
    if error is not None:
        raise error


class LifecycleController:
    """Orchestrates the project state machine over store, ledger, and token port."""

    def __init__(
        self,
        store: ProjectStore,
        ledger: ContributionLedger,
        events: EventLog,
        port: ValueTransferPort,
        fees: FeeConfig,
        custody_account: str,
        fee_recipient: str,
        withdrawal_event_compat: bool = False,
    ):
        self.store = store
        self.ledger = ledger
        self.events = events
        self.port = port
        self.fees = fees
        self.custody = AccountId(custody_account)
        self.fee_recipient = AccountId(fee_recipient)
        self.withdrawal_event_compat = withdrawal_event_compat

    # ─── Operations ──────────────────────────────────────────────

    def create_project(self, caller: str, goal: int, deadline: int, now: int) -> Project:
        """Open a new project owned by `caller`."""
        _raise_if(check_caller(caller, self.custody, "create_project"))
        _raise_if(check_create(goal, deadline, now, caller))

        project = self.store.create_project(
            AccountId(caller), Amount(goal), Timestamp(deadline),
        )
        self.events.append(ProjectCreated(project.id, project.owner, goal, deadline))
        logger.info(
            f"Project {project.id} created (goal={goal}, deadline={deadline})",
            extra={"project_id": project.id, "account": caller, "operation": "create_project"},
        )
        return project

    def fund_project(self, caller: str, project_id: int, amount: int, now: int) -> Project:
        """Pledge `amount` from `caller` into custody for an open project."""
        _raise_if(check_caller(caller, self.custody, "fund_project"))
        _raise_if(check_fund(self.store, project_id, amount, now, caller))
        project = self.store.get_project(project_id)
        contributor = AccountId(caller)

        self._transfer_in(contributor, Amount(amount), project.id, "fund_project")

        self.ledger.record(project.id, contributor, Amount(amount))
        project.amount_raised = Amount(project.amount_raised + amount)
        self.events.append(ProjectFunded(project.id, contributor, amount))
        logger.info(
            f"Project {project.id} funded with {amount}",
            extra={
                "project_id": project.id, "account": caller,
                "operation": "fund_project", "amount": amount,
            },
        )
        return project

    def end_project(self, caller: str, project_id: int, now: int) -> EndResult:
        """Close a project; on success pay the platform fee and the owner."""
        _raise_if(check_caller(caller, self.custody, "end_project"))
        _raise_if(check_end(self.store, project_id, caller, now))
        project = self.store.get_project(project_id)

        succeeded = project.amount_raised >= project.goal
        fee, payout = self.fees.split(project.amount_raised) if succeeded else (0, 0)
        if succeeded:
            self._check_custody_covers(project, project.amount_raised)

        project.ended = True
        project.succeeded = succeeded
        if succeeded:
            try:
                self._pay_out(
                    [(self.fee_recipient, fee), (project.owner, payout)],
                    project.id, "end_project",
                )
            except TransferFailedError:
                project.ended = False
                project.succeeded = False
                raise

        self.events.append(ProjectEnded(project.id, succeeded))
        logger.info(
            f"Project {project.id} ended (succeeded={succeeded}, fee={fee}, payout={payout})",
            extra={"project_id": project.id, "account": caller, "operation": "end_project"},
        )
        return EndResult(project=project, succeeded=succeeded, fee=fee, payout=payout)

    def withdraw_funds(self, caller: str, project_id: int) -> WithdrawResult:
        """Return the caller's full pledge from a failed project.

        A caller with nothing recorded still succeeds and receives 0.
        """
        _raise_if(check_caller(caller, self.custody, "withdraw_funds"))
        _raise_if(check_withdraw(self.store, project_id, caller))
        project = self.store.get_project(project_id)
        contributor = AccountId(caller)

        amount = self.ledger.clear(project.id, contributor)
        project.amount_raised = Amount(project.amount_raised - amount)
        try:
            self._pay_out([(contributor, amount)], project.id, "withdraw_funds")
        except TransferFailedError:
            if amount:
                self.ledger.record(project.id, contributor, amount)
            project.amount_raised = Amount(project.amount_raised + amount)
            raise

        if self.withdrawal_event_compat:
            self.events.append(ProjectFunded(project.id, contributor, 0))
        else:
            self.events.append(FundsWithdrawn(project.id, contributor, amount))
        logger.info(
            f"Withdrew {amount} from project {project.id}",
            extra={
                "project_id": project.id, "account": caller,
                "operation": "withdraw_funds", "amount": amount,
            },
        )
        return WithdrawResult(project_id=project.id, account=contributor, amount=amount)

    # ─── Queries ─────────────────────────────────────────────────

    def get_project(self, project_id: int) -> Project | None:
        return self.store.get_project(project_id)

    def get_contribution(self, project_id: int, account: str) -> Amount:
        return self.ledger.get(project_id, account)

    def count(self) -> int:
        return self.store.count()

    # ─── Port helpers ────────────────────────────────────────────

    def _transfer_in(
        self, source: AccountId, amount: Amount, project_id: ProjectId, operation: str,
    ) -> None:
        if not self.port.transfer_in(source, self.custody, amount):
            raise self._transfer_failed(
                TransferDirection.IN, source, self.custody, amount, project_id, operation,
            )

    def _pay_out(
        self, payouts: list[tuple[AccountId, int]], project_id: ProjectId, operation: str,
    ) -> None:
        """Send every payout from custody, or none of them."""
        completed: list[tuple[AccountId, int]] = []
        for destination, amount in payouts:
            if self.port.transfer_out(self.custody, destination, Amount(amount)):
                completed.append((destination, amount))
                continue
            severity = self._compensate(completed, project_id)
            raise self._transfer_failed(
                TransferDirection.OUT, self.custody, destination, amount,
                project_id, operation, severity,
            )

    def _compensate(
        self, completed: list[tuple[AccountId, int]], project_id: ProjectId,
    ) -> ErrorSeverity:
        """Pull completed payouts back into custody; CRITICAL if any cannot be."""
        severity = ErrorSeverity.ERROR
        for destination, amount in reversed(completed):
            if not self.port.transfer_in(destination, self.custody, Amount(amount)):
                severity = ErrorSeverity.CRITICAL
                logger.critical(
                    f"Could not return {amount} from {destination} to custody",
                    extra={"project_id": project_id, "account": destination, "amount": amount},
                )
        return severity

    def _check_custody_covers(self, project: Project, amount: int) -> None:
        held = self.port.balance_of(self.custody)
        if held < amount:
            raise self._transfer_failed(
                TransferDirection.OUT, self.custody, project.owner, amount,
                project.id, "end_project",
                debug_info={"custody_balance": held},
            )

    def _transfer_failed(
        self,
        direction: TransferDirection,
        source: str,
        destination: str,
        amount: int,
        project_id: int,
        operation: str,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        debug_info: dict | None = None,
    ) -> TransferFailedError:
        logger.warning(
            f"Transfer {direction.value} rejected: {source} -> {destination} ({amount})",
            extra={
                "project_id": project_id, "operation": operation,
                "amount": amount, "error_code": "TRANSFER_FAILED",
            },
        )
        return TransferFailedError(
            direction.value, source, destination, amount,
            ErrorContext(project_id=project_id, operation=operation, debug_info=debug_info),
            severity,
        )
