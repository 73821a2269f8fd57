"""
Settlement event payload encoding.

The engine only constructs `SettlementEvent` values; hosts emit them as
canonical JSON bytes and may key them by a domain-separated SHA-256 digest.
"""

from __future__ import annotations

from typing import Any, Mapping

from ..core.settlement.state import EVENT_FIELDS, event_from_dict, event_to_dict
from ..core.settlement.types import SettlementEvent
from ..state.canonical import canonical_json_bytes, domain_sep_bytes, sha256_hex

EVENT_KIND = "SettlementEvent"
EVENT_DOMAIN = "settlement_event"
EVENT_VERSION = 1


def event_payload(event: SettlementEvent) -> dict[str, Any]:
    return {"kind": EVENT_KIND, "version": EVENT_VERSION, "data": event_to_dict(event)}


def encode_event(event: SettlementEvent) -> bytes:
    """Canonical JSON bytes of the event payload."""
    return canonical_json_bytes(event_payload(event))


def event_digest(event: SettlementEvent) -> str:
    """0x-prefixed SHA-256 over the domain separator and the encoded payload."""
    return sha256_hex(domain_sep_bytes(EVENT_DOMAIN, EVENT_VERSION) + encode_event(event))


def event_from_payload(payload: Mapping[str, Any]) -> SettlementEvent:
    """Inverse of `event_payload`; rejects unknown kinds, versions, fields and mistyped values."""
    if payload.get("kind") != EVENT_KIND:
        raise ValueError(f"unexpected event kind: {payload.get('kind')!r}")
    if payload.get("version") != EVENT_VERSION:
        raise ValueError(f"unsupported event version: {payload.get('version')!r}")
    data = payload.get("data")
    if not isinstance(data, Mapping):
        raise TypeError("event data must be a mapping")
    if set(data) != set(EVENT_FIELDS):
        raise ValueError("event data fields do not match SettlementEvent")
    return event_from_dict(data)
