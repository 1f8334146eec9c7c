"""Contribution Ledger — (project, contributor) -> reclaimable pledge amount.

Invariants:
    - Entries are never negative
    - record() only ever increases an entry; caller guarantees amount > 0
    - clear() reads and zeroes in one step; a second clear returns 0
    - get() is a pure read and returns 0 for unknown keys
"""

from crowdfund.core.domain_types import AccountId, Amount, ProjectId


class ContributionLedger:
    """Source of truth for how much each contributor can reclaim."""

    def __init__(self) -> None:
        self._entries: dict[tuple[ProjectId, AccountId], Amount] = {}

    def record(self, project_id: ProjectId, contributor: AccountId, amount: Amount) -> Amount:
        key = (project_id, contributor)
        self._entries[key] = Amount(self._entries.get(key, 0) + amount)
        return self._entries[key]

    def clear(self, project_id: ProjectId, contributor: AccountId) -> Amount:
        return Amount(self._entries.pop((project_id, contributor), 0))

    def get(self, project_id: int, contributor: str) -> Amount:
        return Amount(self._entries.get((ProjectId(project_id), AccountId(contributor)), 0))

    def total_for(self, project_id: int) -> Amount:
        """Sum of outstanding entries for one project."""
        return Amount(sum(
            amount for (pid, _), amount in self._entries.items() if pid == project_id
        ))

    def entries(self) -> list[tuple[ProjectId, AccountId, Amount]]:
        return [(pid, account, amount) for (pid, account), amount in self._entries.items()]

    def restore(self, entries: list[tuple[int, str, int]]) -> None:
        restored: dict[tuple[ProjectId, AccountId], Amount] = {}
        for project_id, account, amount in entries:
            if amount < 0:
                raise ValueError(f"Negative contribution for {account} on {project_id}")
            if amount:
                restored[(ProjectId(project_id), AccountId(account))] = Amount(amount)
        self._entries = restored
