"""Core Layer — pure ledger logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Time and caller identity are always explicit parameters

Design Decisions:
    - Functional core separated from imperative shell: the lifecycle state machine
      is testable without a server, a database, or a token service
"""
