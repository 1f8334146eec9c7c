"""Boundary Protocols — contracts between the ledger core and its collaborators.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Token movements happen only through ValueTransferPort
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Synchronous port: every call is a call-and-check that either completes or
      rejects; the controller never suspends mid-operation
    - Port reports rejection by returning False (debit/credit contract of a
      fungible token), the controller turns it into TransferFailedError
"""

from typing import Protocol

from crowdfund.core.domain_types import AccountId, Amount

class ValueTransferPort(Protocol):
    """Contract for the fungible-token service — never implemented by the core."""

    def transfer_in(
        self, source: AccountId, custody: AccountId, amount: Amount,
    ) -> bool: ...

    def transfer_out(
        self, custody: AccountId, destination: AccountId, amount: Amount,
    ) -> bool: ...

    def balance_of(self, account: AccountId) -> Amount: ...
