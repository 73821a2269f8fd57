"""Tests for xmargin/core/settlement/guards.py."""

import pytest

from xmargin.core.settlement.config import DEFAULT_CONFIG, SettlementConfig
from xmargin.core.settlement.guards import (
    GUARDS,
    check_preconditions,
    guard_domain,
    guard_funding_bounds,
    guard_oracle_price,
    guard_position_state,
)
from xmargin.core.settlement.math import I64_MAX, I64_MIN, I128_MAX
from xmargin.core.settlement.types import Position, UserBalance

POS = Position(size=10, entry_price=100, last_funding_rate=0)
BAL = UserBalance(collateral=0)


class TestGuardOrder:
    def test_order(self):
        assert GUARDS == (guard_oracle_price, guard_position_state, guard_funding_bounds, guard_domain)

    def test_all_pass(self):
        assert check_preconditions(POS, BAL, 100, 0, DEFAULT_CONFIG) is None


class TestOraclePrice:
    def test_positive(self):
        assert guard_oracle_price(POS, BAL, 1, 0, DEFAULT_CONFIG) is None

    def test_zero(self):
        assert guard_oracle_price(POS, BAL, 0, 0, DEFAULT_CONFIG) == "InvalidOraclePrice"


class TestPositionState:
    def test_flat_zero_entry_ok(self):
        p = Position(size=0, entry_price=0)
        assert guard_position_state(p, BAL, 100, 0, DEFAULT_CONFIG) is None

    def test_open_zero_entry_rejected(self):
        p = Position(size=-1, entry_price=0)
        assert guard_position_state(p, BAL, 100, 0, DEFAULT_CONFIG) == "InvalidPositionState"


class TestFundingBounds:
    def test_custom_bound(self):
        cfg = SettlementConfig(max_rate_magnitude=100)
        assert guard_funding_bounds(POS, BAL, 1, 100, cfg) is None
        assert guard_funding_bounds(POS, BAL, 1, -100, cfg) is None
        assert guard_funding_bounds(POS, BAL, 1, 101, cfg) == "FundingRateOutOfBounds"

    def test_checkpoint_checked(self):
        cfg = SettlementConfig(max_rate_magnitude=100)
        p = Position(size=1, entry_price=1, last_funding_rate=-101)
        assert guard_funding_bounds(p, BAL, 1, 0, cfg) == "FundingRateOutOfBounds"


class TestDomain:
    def test_edges_fit(self):
        p = Position(size=I64_MIN, entry_price=I64_MAX, last_funding_rate=0)
        b = UserBalance(collateral=I128_MAX)
        assert guard_domain(p, b, I64_MAX, 0, DEFAULT_CONFIG) is None

    def test_size_too_large(self):
        p = Position(size=I64_MAX + 1, entry_price=1)
        assert guard_domain(p, BAL, 1, 0, DEFAULT_CONFIG) == "ArithmeticOverflow"

    def test_collateral_too_large(self):
        b = UserBalance(collateral=I128_MAX + 1)
        assert guard_domain(POS, b, 1, 0, DEFAULT_CONFIG) == "ArithmeticOverflow"


class TestTypes:
    def test_float_field_rejected(self):
        p = Position(size=1.5, entry_price=1)  # type: ignore[arg-type]
        with pytest.raises(TypeError, match="size"):
            check_preconditions(p, BAL, 1, 0, DEFAULT_CONFIG)

    def test_str_rate_rejected(self):
        with pytest.raises(TypeError, match="funding_rate"):
            check_preconditions(POS, BAL, 1, "0", DEFAULT_CONFIG)  # type: ignore[arg-type]
