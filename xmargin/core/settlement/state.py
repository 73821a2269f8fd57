"""Record construction and serialization for the settlement engine.

Hosts hand the engine already-deserialized records; these helpers define the
plain-dict shape those records take at the storage boundary.

Round-trip property (tested): `position_from_dict(position_to_dict(p)) == p`.
"""

from __future__ import annotations

from typing import Any, Mapping

from .types import Position, SettlementEvent, UserBalance

# Auto-derived from the dataclass field definitions (single source of truth).
POSITION_FIELDS: tuple[str, ...] = tuple(Position.__dataclass_fields__)
BALANCE_FIELDS: tuple[str, ...] = tuple(UserBalance.__dataclass_fields__)
EVENT_FIELDS: tuple[str, ...] = tuple(SettlementEvent.__dataclass_fields__)


def _int_field(d: Mapping[str, Any], name: str) -> int:
    val = d[name]
    if isinstance(val, bool) or not isinstance(val, int):
        raise TypeError(f"field {name!r} must be int, got {type(val).__name__}")
    return int(val)  # normalize int subclasses (e.g. numpy)


def position_to_dict(position: Position) -> dict[str, int | str]:
    return {name: getattr(position, name) for name in POSITION_FIELDS}


def position_from_dict(d: Mapping[str, Any]) -> Position:
    """Deserialize a Position. Raises KeyError on missing numeric fields."""
    key = d.get("key", "")
    if not isinstance(key, str):
        raise TypeError(f"field 'key' must be str, got {type(key).__name__}")
    return Position(
        size=_int_field(d, "size"),
        entry_price=_int_field(d, "entry_price"),
        last_funding_rate=_int_field(d, "last_funding_rate"),
        key=key,
    )


def balance_to_dict(balance: UserBalance) -> dict[str, int]:
    return {name: getattr(balance, name) for name in BALANCE_FIELDS}


def balance_from_dict(d: Mapping[str, Any]) -> UserBalance:
    return UserBalance(collateral=_int_field(d, "collateral"))


def event_to_dict(event: SettlementEvent) -> dict[str, int | str]:
    return {name: getattr(event, name) for name in EVENT_FIELDS}


def event_from_dict(d: Mapping[str, Any]) -> SettlementEvent:
    """Deserialize a SettlementEvent. Every field except `position_key` is an int."""
    key = d["position_key"]
    if not isinstance(key, str):
        raise TypeError(f"field 'position_key' must be str, got {type(key).__name__}")
    amounts = {name: _int_field(d, name) for name in EVENT_FIELDS if name != "position_key"}
    return SettlementEvent(position_key=key, **amounts)
