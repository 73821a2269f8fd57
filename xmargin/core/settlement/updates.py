"""Amount computation and state transition for one settlement.

Semantics:
- amounts evaluate against the PRE-state,
- updates are simultaneous and applied via `dataclasses.replace()`,
- nothing here is called until every guard has passed.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .config import SettlementConfig
from .math import apply_to_collateral, funding_payment, net_settlement, unrealized_pnl
from .types import Position, UserBalance


@dataclass(frozen=True)
class SettlementAmounts:
    unrealized_pnl: int
    funding_payment: int
    net_settlement: int
    new_collateral: int


def compute_amounts(
    position: Position,
    balance: UserBalance,
    oracle_price: int,
    funding_rate: int,
    config: SettlementConfig,
) -> SettlementAmounts:
    """Compute PnL, funding and the resulting collateral.

    Raises ``ArithmeticOverflow`` if any checked step fails. A flat position
    settles for zero without touching the deltas.
    """
    wide = config.wide_bits
    if position.size == 0:
        pnl = 0
        funding = 0
    else:
        pnl = unrealized_pnl(position.size, position.entry_price, oracle_price, wide)
        funding = funding_payment(position.size, position.last_funding_rate, funding_rate, wide)
    net = net_settlement(pnl, funding, wide)
    new_collateral = apply_to_collateral(balance.collateral, net, wide, config.collateral_bits)
    return SettlementAmounts(
        unrealized_pnl=pnl,
        funding_payment=funding,
        net_settlement=net,
        new_collateral=new_collateral,
    )


def apply_settlement(
    position: Position,
    balance: UserBalance,
    oracle_price: int,
    funding_rate: int,
    amounts: SettlementAmounts,
) -> tuple[Position, UserBalance]:
    # Mark-to-market and advance the funding checkpoint; size never changes.
    new_position = replace(
        position,
        entry_price=oracle_price,
        last_funding_rate=funding_rate,
    )
    new_balance = replace(balance, collateral=amounts.new_collateral)
    return new_position, new_balance
