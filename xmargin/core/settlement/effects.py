"""Event construction for the settlement engine.

The event is built from both PRE- and POST-state so that consumers can audit
the checkpoint transitions without re-reading storage.
"""

from __future__ import annotations

from .types import Position, SettlementEvent, UserBalance
from .updates import SettlementAmounts


def effect_settled(
    pre_position: Position,
    pre_balance: UserBalance,
    post_position: Position,
    post_balance: UserBalance,
    oracle_price: int,
    funding_rate: int,
    amounts: SettlementAmounts,
) -> SettlementEvent:
    return SettlementEvent(
        position_key=pre_position.key,
        oracle_price=oracle_price,
        funding_rate=funding_rate,
        unrealized_pnl=amounts.unrealized_pnl,
        funding_payment=amounts.funding_payment,
        net_settlement=amounts.net_settlement,
        old_collateral=pre_balance.collateral,
        new_collateral=post_balance.collateral,
        old_entry_price=pre_position.entry_price,
        new_entry_price=post_position.entry_price,
        old_last_funding_rate=pre_position.last_funding_rate,
        new_last_funding_rate=post_position.last_funding_rate,
    )
