"""Crowdfund Escrow Ledger — goal-based pledges held in custody until close.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
