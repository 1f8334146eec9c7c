"""Services Layer — lifecycle controller, runtime, and persistence.

Invariants:
    - The controller is the only code that mutates the store, ledger, or event log
    - Every mutation goes through LedgerRuntime.execute (serialized + persisted)

Design Decisions:
    - Shell orchestrates IO around the pure core
"""
