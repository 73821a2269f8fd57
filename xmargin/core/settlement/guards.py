"""Precondition guards for the settlement engine.

Each guard inspects the PRE-state and inputs and returns ``None`` when
satisfied or the rejection code of the first failure. ``check_preconditions``
runs them in their fixed order and short-circuits.
"""

from __future__ import annotations

from typing import Callable

from .config import SettlementConfig
from .errors import (
    ArithmeticOverflow,
    FundingRateOutOfBounds,
    InvalidOraclePrice,
    InvalidPositionState,
)
from .math import abs_val, fits
from .types import Position, UserBalance


def _require_int(name: str, val: object) -> None:
    if not isinstance(val, int) or isinstance(val, bool):
        raise TypeError(f"{name} must be an int, got {type(val).__name__}")


def check_types(position: Position, balance: UserBalance, oracle_price: int, funding_rate: int) -> None:
    """Raise ``TypeError`` for non-int inputs (a caller bug, not a rejection)."""
    _require_int("oracle_price", oracle_price)
    _require_int("funding_rate", funding_rate)
    _require_int("size", position.size)
    _require_int("entry_price", position.entry_price)
    _require_int("last_funding_rate", position.last_funding_rate)
    _require_int("collateral", balance.collateral)


def guard_oracle_price(
    position: Position, balance: UserBalance, oracle_price: int, funding_rate: int, config: SettlementConfig,
) -> str | None:
    if oracle_price <= 0:
        return InvalidOraclePrice.code
    return None


def guard_position_state(
    position: Position, balance: UserBalance, oracle_price: int, funding_rate: int, config: SettlementConfig,
) -> str | None:
    if position.size != 0 and position.entry_price <= 0:
        return InvalidPositionState.code
    return None


def guard_funding_bounds(
    position: Position, balance: UserBalance, oracle_price: int, funding_rate: int, config: SettlementConfig,
) -> str | None:
    bound = config.max_rate_magnitude
    if abs_val(funding_rate) > bound or abs_val(position.last_funding_rate) > bound:
        return FundingRateOutOfBounds.code
    return None


def guard_domain(
    position: Position, balance: UserBalance, oracle_price: int, funding_rate: int, config: SettlementConfig,
) -> str | None:
    """Every value must fit the stored width it came from (or will be stored in)."""
    pb = config.position_bits
    for val in (oracle_price, funding_rate, position.size, position.entry_price, position.last_funding_rate):
        if not fits(val, pb):
            return ArithmeticOverflow.code
    if not fits(balance.collateral, config.collateral_bits):
        return ArithmeticOverflow.code
    return None


GuardFn = Callable[[Position, UserBalance, int, int, SettlementConfig], "str | None"]

GUARDS: tuple[GuardFn, ...] = (
    guard_oracle_price,
    guard_position_state,
    guard_funding_bounds,
    guard_domain,
)


def check_preconditions(
    position: Position,
    balance: UserBalance,
    oracle_price: int,
    funding_rate: int,
    config: SettlementConfig,
) -> str | None:
    """Return the first failing rejection code, or None."""
    check_types(position, balance, oracle_price, funding_rate)
    for guard in GUARDS:
        reason = guard(position, balance, oracle_price, funding_rate, config)
        if reason is not None:
            return reason
    return None
