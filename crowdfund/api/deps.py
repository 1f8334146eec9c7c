"""Request Dependencies — caller identity and clock supplied explicitly to the ledger.

Invariants:
    - Caller identity comes only from the X-Account-Id header (opaque handle)
    - Current time comes only from get_clock(); tests override it

Design Decisions:
    - Clock as a dependency returning a callable: the ledger core never reads
      the system time itself
"""

import time
from typing import Callable

from fastapi import Header


def get_caller(
    x_account_id: str = Header(..., min_length=1, max_length=128),
) -> str:
    """Opaque account handle of the caller."""
    return x_account_id


def system_clock() -> int:
    return int(time.time())


def get_clock() -> Callable[[], int]:
    return system_clock
