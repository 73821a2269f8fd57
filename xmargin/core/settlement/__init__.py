"""`settlement`: cross-margin periodic settlement engine.

Converts (position, balance, oracle price, funding rate) into
(updated position, updated balance, settlement event):
- deterministic, integer-only transitions,
- immutable records (frozen dataclasses),
- checked arithmetic in a widened intermediate width,
- fail-closed guards and post-state invariant checks.

Public API:
- `settle(position, balance, oracle_price, funding_rate) -> SettleResult`
- `settle_or_raise(...) -> SettleResult` (raises on rejection)
- `settle_sequence(position, balance, inputs)` (ordered fold)
"""

from .config import DEFAULT_CONFIG, AppConfig, LoggingConfig, SettlementConfig, load_app_config, load_config
from .engine import settle, settle_or_raise, settle_sequence
from .errors import (
    ArithmeticOverflow,
    FundingRateOutOfBounds,
    InvalidOraclePrice,
    InvalidPositionState,
    SettlementError,
    SettlementInvariantError,
)
from .state import (
    balance_from_dict,
    balance_to_dict,
    event_from_dict,
    event_to_dict,
    position_from_dict,
    position_to_dict,
)
from .types import Position, SettlementEvent, SettlementInput, SettleResult, UserBalance

__all__ = [
    "settle",
    "settle_or_raise",
    "settle_sequence",
    "DEFAULT_CONFIG",
    "AppConfig",
    "LoggingConfig",
    "SettlementConfig",
    "load_config",
    "load_app_config",
    "Position",
    "UserBalance",
    "SettlementInput",
    "SettlementEvent",
    "SettleResult",
    "SettlementError",
    "InvalidOraclePrice",
    "InvalidPositionState",
    "FundingRateOutOfBounds",
    "ArithmeticOverflow",
    "SettlementInvariantError",
    "position_to_dict",
    "position_from_dict",
    "balance_to_dict",
    "balance_from_dict",
    "event_to_dict",
    "event_from_dict",
]
