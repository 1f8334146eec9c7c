"""ORM Models — persistence for the ledger snapshot and the notification log.

Invariants:
    - All models inherit from Base (db/base.py)
    - The in-memory core is the working set; these tables are its durable copy

Design Decisions:
    - One file per table for locality
    - All models imported here so Base.metadata is complete before create_all
      or alembic autogenerate runs
"""

from crowdfund.models.ledger_snapshot import LedgerSnapshot  # noqa: F401
from crowdfund.models.ledger_event import LedgerEventRecord  # noqa: F401
