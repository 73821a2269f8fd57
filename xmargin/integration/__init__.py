"""
Host integration layer: account context, authorization and event emission
"""

from .events import encode_event, event_digest, event_from_payload, event_payload
from .host import PositionRecord, SettlementHost, UnauthorizedSigner, UnknownPosition

__all__ = [
    "SettlementHost",
    "PositionRecord",
    "UnauthorizedSigner",
    "UnknownPosition",
    "encode_event",
    "event_digest",
    "event_from_payload",
    "event_payload",
]
