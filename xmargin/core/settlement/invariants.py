"""Invariant checkers for the settlement engine.

Two families:
- record invariants hold for any valid stored (Position, UserBalance) pair,
- transition invariants relate a PRE-position to its POST-position for the
  inputs that were settled.

`check_all()` returns the violated invariant IDs (empty = all pass).
"""

from __future__ import annotations

from typing import Callable

from .config import SettlementConfig
from .math import fits
from .types import Position, UserBalance


def inv_entry_positive_when_open(p: Position, b: UserBalance, c: SettlementConfig) -> bool:
    if p.size == 0:
        return True
    return p.entry_price > 0


def inv_position_fields_fit(p: Position, b: UserBalance, c: SettlementConfig) -> bool:
    return all(
        fits(v, c.position_bits)
        for v in (p.size, p.entry_price, p.last_funding_rate)
    )


def inv_collateral_fits(p: Position, b: UserBalance, c: SettlementConfig) -> bool:
    return fits(b.collateral, c.collateral_bits)


def inv_funding_checkpoint_bounded(p: Position, b: UserBalance, c: SettlementConfig) -> bool:
    return -c.max_rate_magnitude <= p.last_funding_rate <= c.max_rate_magnitude


def inv_size_unchanged(pre: Position, post: Position, oracle_price: int, funding_rate: int) -> bool:
    return pre.size == post.size and pre.key == post.key


def inv_entry_marked(pre: Position, post: Position, oracle_price: int, funding_rate: int) -> bool:
    return post.entry_price == oracle_price


def inv_funding_checkpointed(pre: Position, post: Position, oracle_price: int, funding_rate: int) -> bool:
    return post.last_funding_rate == funding_rate


# ---------------------------------------------------------------------------
# Registries + check_all
# ---------------------------------------------------------------------------

RECORD_INVARIANTS: dict[str, Callable[[Position, UserBalance, SettlementConfig], bool]] = {
    "inv_entry_positive_when_open": inv_entry_positive_when_open,
    "inv_position_fields_fit": inv_position_fields_fit,
    "inv_collateral_fits": inv_collateral_fits,
    "inv_funding_checkpoint_bounded": inv_funding_checkpoint_bounded,
}

TRANSITION_INVARIANTS: dict[str, Callable[[Position, Position, int, int], bool]] = {
    "inv_size_unchanged": inv_size_unchanged,
    "inv_entry_marked": inv_entry_marked,
    "inv_funding_checkpointed": inv_funding_checkpointed,
}


def check_records(position: Position, balance: UserBalance, config: SettlementConfig) -> list[str]:
    return [
        inv_id
        for inv_id, check_fn in RECORD_INVARIANTS.items()
        if not check_fn(position, balance, config)
    ]


def check_transition(pre: Position, post: Position, oracle_price: int, funding_rate: int) -> list[str]:
    return [
        inv_id
        for inv_id, check_fn in TRANSITION_INVARIANTS.items()
        if not check_fn(pre, post, oracle_price, funding_rate)
    ]


def check_all(
    pre_position: Position,
    post_position: Position,
    post_balance: UserBalance,
    oracle_price: int,
    funding_rate: int,
    config: SettlementConfig,
) -> list[str]:
    """Return list of violated invariant IDs for a completed settlement."""
    return (
        check_records(post_position, post_balance, config)
        + check_transition(pre_position, post_position, oracle_price, funding_rate)
    )
