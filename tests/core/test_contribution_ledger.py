"""Contribution Ledger — tests for accumulate, clear, and read semantics.

Tests cover:
    - record accumulates per (project, contributor)
    - clear returns the prior amount and zeroes the entry; second clear returns 0
    - get is 0 for unknown keys
    - totals and contributor listings are per project
"""

import pytest

from crowdfund.core.contribution_ledger import ContributionLedger


def test_record_accumulates():
    ledger = ContributionLedger()
    ledger.record(1, "bob", 400)
    ledger.record(1, "bob", 500)
    assert ledger.get(1, "bob") == 900


def test_entries_are_keyed_by_project_and_contributor():
    ledger = ContributionLedger()
    ledger.record(1, "bob", 100)
    ledger.record(2, "bob", 200)
    ledger.record(1, "john", 300)
    assert ledger.get(1, "bob") == 100
    assert ledger.get(2, "bob") == 200
    assert ledger.get(1, "john") == 300


def test_get_unknown_is_zero():
    assert ContributionLedger().get(7, "nobody") == 0


def test_clear_returns_previous_and_zeroes():
    ledger = ContributionLedger()
    ledger.record(1, "bob", 1000)
    assert ledger.clear(1, "bob") == 1000
    assert ledger.get(1, "bob") == 0


def test_second_clear_returns_zero():
    ledger = ContributionLedger()
    ledger.record(1, "bob", 1000)
    ledger.clear(1, "bob")
    assert ledger.clear(1, "bob") == 0


def test_total_is_per_project():
    ledger = ContributionLedger()
    ledger.record(1, "bob", 100)
    ledger.record(1, "john", 250)
    ledger.record(2, "bob", 999)
    assert ledger.total_for(1) == 350


def test_restore_rejects_negative_entries():
    with pytest.raises(ValueError):
        ContributionLedger().restore([(1, "bob", -5)])


def test_restore_drops_zero_entries():
    ledger = ContributionLedger()
    ledger.restore([(1, "bob", 0), (1, "john", 10)])
    assert ledger.entries() == [(1, "john", 10)]
