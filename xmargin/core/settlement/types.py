"""Data types for the settlement engine.

All types are frozen dataclasses (immutable); the engine never mutates its
inputs and instead returns updated copies.

Units/conventions:
- `size` is signed units of the underlying (long > 0, short < 0, flat == 0).
- `entry_price` / `oracle_price` are integer quote-per-unit prices.
- `*_funding_rate` are cumulative signed funding indices; only the delta
  between two checkpoints is ever charged.
- `collateral` is the shared cross-margin balance and may be negative.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    """One open derivative position for one account."""

    size: int = 0
    entry_price: int = 0
    last_funding_rate: int = 0
    key: str = ""


@dataclass(frozen=True)
class UserBalance:
    """One account's shared collateral pool."""

    collateral: int = 0


@dataclass(frozen=True)
class SettlementInput:
    """The two external signals consumed by one settlement."""

    oracle_price: int
    funding_rate: int


@dataclass(frozen=True)
class SettlementEvent:
    """Record of one successful settlement, handed to the host for emission."""

    position_key: str
    oracle_price: int
    funding_rate: int
    unrealized_pnl: int
    funding_payment: int
    net_settlement: int
    old_collateral: int
    new_collateral: int
    old_entry_price: int
    new_entry_price: int
    old_last_funding_rate: int
    new_last_funding_rate: int


@dataclass(frozen=True)
class SettleResult:
    """Result of a single settlement call."""

    accepted: bool
    position: Position | None = None
    balance: UserBalance | None = None
    event: SettlementEvent | None = None
    rejection: str | None = None
