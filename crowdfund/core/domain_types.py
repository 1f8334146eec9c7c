"""Domain Types — rich types that replace bare primitives across the ledger.

Invariants:
    - ProjectId is a positive int, assigned sequentially from 1
    - Amount is an integral token unit (never float)
    - Timestamp is Unix seconds (int)
    - Project lifecycle states encoded as an Enum — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enum: serializes to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

ProjectId = NewType("ProjectId", int)
AccountId = NewType("AccountId", str)   # opaque account handle


# ─── Value Types ─────────────────────────────────────────────────

Amount = NewType("Amount", int)
Timestamp = NewType("Timestamp", int)


# ─── Enums ───────────────────────────────────────────────────────

class ProjectStatus(str, Enum):
    """Project lifecycle — OPEN is the only non-terminal state."""
    OPEN = "open"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class TransferDirection(str, Enum):
    """Which side of custody a port call moves value across."""
    IN = "in"
    OUT = "out"


FIRST_PROJECT_ID: int = 1
