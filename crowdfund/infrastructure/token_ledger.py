"""In-Process Token Ledger — ValueTransferPort adapter holding fungible balances in memory.

Invariants:
    - Balances are never negative: a debit larger than the balance is rejected
    - Rejections return False and leave every balance untouched
    - Negative amounts are rejected; zero-amount transfers succeed
    - Total supply changes only through mint()

Design Decisions:
    - Plain dict of balances: the token itself is an external collaborator, this
      adapter gives the service and the tests a concrete debit/credit contract
    - to_snapshot/restore let the runtime persist balances next to the ledger
"""

import logging

from crowdfund.core.domain_types import AccountId, Amount

logger = logging.getLogger(__name__)


class InMemoryTokenLedger:
    """Fungible-token balances satisfying ValueTransferPort."""

    def __init__(self, balances: dict[str, int] | None = None):
        self._balances: dict[str, int] = {}
        self.restore(balances or {})

    def mint(self, account: str, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"Cannot mint negative amount {amount}")
        self._balances[account] = self._balances.get(account, 0) + amount

    def balance_of(self, account: AccountId) -> Amount:
        return Amount(self._balances.get(account, 0))

    def total_supply(self) -> int:
        return sum(self._balances.values())

    def transfer_in(
        self, source: AccountId, custody: AccountId, amount: Amount,
    ) -> bool:
        return self._move(source, custody, amount)

    def transfer_out(
        self, custody: AccountId, destination: AccountId, amount: Amount,
    ) -> bool:
        return self._move(custody, destination, amount)

    def _move(self, source: str, destination: str, amount: int) -> bool:
        if amount < 0:
            logger.warning("Rejected negative transfer", extra={"amount": amount})
            return False
        available = self._balances.get(source, 0)
        if available < amount:
            logger.warning(
                f"Rejected transfer: {source} holds {available}, needs {amount}",
                extra={"account": source, "amount": amount},
            )
            return False
        self._balances[source] = available - amount
        self._balances[destination] = self._balances.get(destination, 0) + amount
        return True

    def to_snapshot(self) -> dict[str, int]:
        return {account: amount for account, amount in self._balances.items() if amount}

    def restore(self, balances: dict[str, int]) -> None:
        if any(amount < 0 for amount in balances.values()):
            raise ValueError("Token balances cannot be negative")
        self._balances = dict(balances)
