"""
Core settlement algorithms
"""

from .settlement import (
    Position,
    SettleResult,
    SettlementConfig,
    SettlementEvent,
    SettlementInput,
    UserBalance,
    settle,
    settle_or_raise,
    settle_sequence,
)

__all__ = [
    "Position",
    "SettleResult",
    "SettlementConfig",
    "SettlementEvent",
    "SettlementInput",
    "UserBalance",
    "settle",
    "settle_or_raise",
    "settle_sequence",
]
