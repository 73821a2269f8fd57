"""Tests for xmargin/core/settlement/invariants.py."""

from xmargin.core.settlement.config import DEFAULT_CONFIG
from xmargin.core.settlement.invariants import (
    RECORD_INVARIANTS,
    TRANSITION_INVARIANTS,
    check_all,
    check_records,
    check_transition,
)
from xmargin.core.settlement.math import I128_MAX
from xmargin.core.settlement.types import Position, UserBalance


class TestRegistries:
    def test_counts(self):
        assert len(RECORD_INVARIANTS) == 4
        assert len(TRANSITION_INVARIANTS) == 3

    def test_default_records_pass(self):
        assert check_records(Position(), UserBalance(), DEFAULT_CONFIG) == []


class TestRecordInvariants:
    def test_open_without_entry(self):
        p = Position(size=1, entry_price=0)
        assert "inv_entry_positive_when_open" in check_records(p, UserBalance(), DEFAULT_CONFIG)

    def test_position_field_width(self):
        p = Position(size=2**63, entry_price=1)
        assert "inv_position_fields_fit" in check_records(p, UserBalance(), DEFAULT_CONFIG)

    def test_collateral_width(self):
        b = UserBalance(collateral=I128_MAX + 1)
        assert "inv_collateral_fits" in check_records(Position(), b, DEFAULT_CONFIG)

    def test_checkpoint_bound(self):
        p = Position(last_funding_rate=DEFAULT_CONFIG.max_rate_magnitude + 1)
        assert "inv_funding_checkpoint_bounded" in check_records(p, UserBalance(), DEFAULT_CONFIG)


class TestTransitionInvariants:
    def test_pass(self):
        pre = Position(size=5, entry_price=10, last_funding_rate=1)
        post = Position(size=5, entry_price=12, last_funding_rate=3)
        assert check_transition(pre, post, 12, 3) == []

    def test_size_changed(self):
        pre = Position(size=5, entry_price=10)
        post = Position(size=6, entry_price=12)
        assert "inv_size_unchanged" in check_transition(pre, post, 12, 0)

    def test_not_marked(self):
        pre = Position(size=5, entry_price=10)
        assert "inv_entry_marked" in check_transition(pre, pre, 12, 0)

    def test_not_checkpointed(self):
        pre = Position(size=5, entry_price=10, last_funding_rate=1)
        post = Position(size=5, entry_price=12, last_funding_rate=1)
        assert "inv_funding_checkpointed" in check_transition(pre, post, 12, 2)

    def test_check_all_combines(self):
        pre = Position(size=5, entry_price=10)
        post = Position(size=5, entry_price=0)
        violations = check_all(pre, post, UserBalance(), 12, 0, DEFAULT_CONFIG)
        assert "inv_entry_positive_when_open" in violations
        assert "inv_entry_marked" in violations
