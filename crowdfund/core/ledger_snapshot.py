"""Ledger Snapshot — serialization / deserialization for ProjectStore + ContributionLedger.

Invariants:
    - ledger_to_snapshot produces a JSON-safe dict (no tuples, no Enums, no dataclasses)
    - restore_from_snapshot rebuilds a store and ledger equal to the originals
    - Missing keys fall back to empty state (forward-compatible)
    - token_balances is carried opaquely for the shell's token adapter

Design Decisions:
    - One snapshot for both structures: they only make sense together
      (amount_raised must agree with the ledger entries of an open project)
    - SNAPSHOT_VERSION stored so a future layout change can be detected
"""

from crowdfund.core.contribution_ledger import ContributionLedger
from crowdfund.core.domain_types import AccountId, Amount, ProjectId, Timestamp
from crowdfund.core.project_store import Project, ProjectStore

SNAPSHOT_VERSION: int = 1


def project_to_dict(project: Project) -> dict:
    return {
        "id": project.id,
        "owner": project.owner,
        "goal": project.goal,
        "deadline": project.deadline,
        "amount_raised": project.amount_raised,
        "ended": project.ended,
        "succeeded": project.succeeded,
    }


def project_from_dict(data: dict) -> Project:
    return Project(
        id=ProjectId(int(data["id"])),
        owner=AccountId(data["owner"]),
        goal=Amount(int(data["goal"])),
        deadline=Timestamp(int(data["deadline"])),
        amount_raised=Amount(int(data.get("amount_raised", 0))),
        ended=bool(data.get("ended", False)),
        succeeded=bool(data.get("succeeded", False)),
    )


def ledger_to_snapshot(
    store: ProjectStore,
    ledger: ContributionLedger,
    token_balances: dict[str, int] | None = None,
) -> dict:
    """Serialize ledger state to a JSON-safe dict. Pure, no IO."""
    return {
        "version": SNAPSHOT_VERSION,
        "projects": [project_to_dict(p) for p in store.list_projects()],
        "contributions": [
            {"project_id": pid, "account": account, "amount": amount}
            for pid, account, amount in ledger.entries()
        ],
        "token_balances": dict(token_balances or {}),
    }


def restore_from_snapshot(
    store: ProjectStore, ledger: ContributionLedger, snapshot: dict,
) -> dict[str, int]:
    """Load a snapshot into existing store/ledger instances; returns token balances."""
    version = snapshot.get("version", SNAPSHOT_VERSION)
    if version != SNAPSHOT_VERSION:
        raise ValueError(f"Unsupported ledger snapshot version {version}")

    store.restore([project_from_dict(p) for p in snapshot.get("projects", [])])
    ledger.restore([
        (int(c["project_id"]), c["account"], int(c["amount"]))
        for c in snapshot.get("contributions", [])
    ])
    return {
        account: int(amount)
        for account, amount in snapshot.get("token_balances", {}).items()
    }
