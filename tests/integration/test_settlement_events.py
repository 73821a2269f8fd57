"""Tests for xmargin/integration/events.py — event payload encoding."""

from __future__ import annotations

import json

import pytest

from xmargin.core.settlement import Position, UserBalance, settle
from xmargin.integration.events import (
    EVENT_KIND,
    encode_event,
    event_digest,
    event_from_payload,
    event_payload,
)


def _event(collateral: int = 0):
    r = settle(
        Position(size=100, entry_price=1000, last_funding_rate=10, key="0x" + "0f" * 32),
        UserBalance(collateral=collateral),
        1100,
        15,
    )
    return r.event


def test_encoding_is_canonical():
    raw = encode_event(_event())
    assert b" " not in raw
    decoded = json.loads(raw)
    assert list(decoded) == sorted(decoded)
    assert decoded["kind"] == EVENT_KIND


def test_wide_integers_survive_encoding():
    e = _event(collateral=2**120)
    decoded = json.loads(encode_event(e))
    assert decoded["data"]["new_collateral"] == 2**120 + 9_500


def test_payload_round_trip():
    e = _event()
    assert event_from_payload(json.loads(encode_event(e))) == e


def test_digest_is_deterministic_and_sensitive():
    assert event_digest(_event()) == event_digest(_event())
    assert event_digest(_event()) != event_digest(_event(collateral=1))
    assert len(event_digest(_event())) == 66


def test_from_payload_rejects_wrong_kind():
    payload = event_payload(_event())
    payload["kind"] = "Other"
    with pytest.raises(ValueError):
        event_from_payload(payload)


def test_from_payload_rejects_missing_field():
    payload = event_payload(_event())
    del payload["data"]["net_settlement"]
    with pytest.raises(ValueError):
        event_from_payload(payload)


@pytest.mark.parametrize("value", ["9500", 9500.0, True, None])
def test_from_payload_rejects_non_int_amount(value):
    payload = event_payload(_event())
    payload["data"]["net_settlement"] = value
    with pytest.raises(TypeError, match="net_settlement"):
        event_from_payload(payload)


def test_from_payload_rejects_non_str_key():
    payload = event_payload(_event())
    payload["data"]["position_key"] = 15
    with pytest.raises(TypeError, match="position_key"):
        event_from_payload(payload)


def test_digest_covers_domain_separator():
    from xmargin.state.canonical import domain_sep_bytes, sha256_hex

    e = _event()
    assert event_digest(e) == sha256_hex(domain_sep_bytes("settlement_event") + encode_event(e))
    assert event_digest(e) != sha256_hex(encode_event(e))
