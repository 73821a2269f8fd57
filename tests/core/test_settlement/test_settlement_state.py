"""Tests for xmargin/core/settlement/state.py — record serialization."""

import pytest

from xmargin.core.settlement import settle
from xmargin.core.settlement.state import (
    BALANCE_FIELDS,
    EVENT_FIELDS,
    POSITION_FIELDS,
    balance_from_dict,
    balance_to_dict,
    event_from_dict,
    event_to_dict,
    position_from_dict,
    position_to_dict,
)
from xmargin.core.settlement.types import Position, UserBalance


class TestFields:
    def test_position_fields(self):
        assert POSITION_FIELDS == ("size", "entry_price", "last_funding_rate", "key")

    def test_balance_fields(self):
        assert BALANCE_FIELDS == ("collateral",)

    def test_event_field_count(self):
        assert len(EVENT_FIELDS) == 12


class TestRoundTrip:
    def test_position(self):
        p = Position(size=-7, entry_price=123, last_funding_rate=-4, key="0x01")
        assert position_from_dict(position_to_dict(p)) == p

    def test_balance_wide_value(self):
        b = UserBalance(collateral=-(2**100))
        assert balance_from_dict(balance_to_dict(b)) == b


class TestFromDict:
    def test_key_optional(self):
        p = position_from_dict({"size": 1, "entry_price": 2, "last_funding_rate": 3})
        assert p.key == ""

    def test_missing_field(self):
        with pytest.raises(KeyError):
            position_from_dict({"size": 1, "entry_price": 2})

    def test_bool_rejected(self):
        with pytest.raises(TypeError):
            balance_from_dict({"collateral": True})

    def test_str_rejected(self):
        with pytest.raises(TypeError):
            position_from_dict({"size": "1", "entry_price": 2, "last_funding_rate": 3})

    def test_non_str_key_rejected(self):
        with pytest.raises(TypeError):
            position_from_dict({"size": 1, "entry_price": 2, "last_funding_rate": 3, "key": 5})


class TestEventToDict:
    def test_values(self):
        r = settle(Position(size=100, entry_price=1000, last_funding_rate=10), UserBalance(), 1100, 15)
        d = event_to_dict(r.event)
        assert d["unrealized_pnl"] == 10_000
        assert d["funding_payment"] == 500
        assert d["new_collateral"] == 9_500
        assert set(d) == set(EVENT_FIELDS)

    def test_event_from_dict_round_trip(self):
        r = settle(Position(size=-3, entry_price=50, last_funding_rate=0, key="k"), UserBalance(), 40, 2)
        assert event_from_dict(event_to_dict(r.event)) == r.event

    def test_event_from_dict_rejects_str_amount(self):
        r = settle(Position(size=100, entry_price=1000, last_funding_rate=10), UserBalance(), 1100, 15)
        d = event_to_dict(r.event)
        d["new_collateral"] = "9500"
        with pytest.raises(TypeError, match="new_collateral"):
            event_from_dict(d)
