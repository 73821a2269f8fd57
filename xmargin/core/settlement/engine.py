"""Settlement engine entry points.

``settle(position, balance, oracle_price, funding_rate)`` is the single
state-transition function. It:

1. Validates preconditions in fixed order (first failure wins).
2. Computes PnL, funding and the new collateral with checked arithmetic.
3. Applies the mark-to-market / checkpoint update.
4. Checks all invariants on the post-state.
5. Returns a ``SettleResult`` (accepted, or rejected with a reason code).

A rejected call returns no records, so the caller's originals are the state.
"""

from __future__ import annotations

from typing import Iterable

from .config import DEFAULT_CONFIG, SettlementConfig
from .effects import effect_settled
from .errors import ERRORS_BY_CODE, ArithmeticOverflow, SettlementError, SettlementInvariantError
from .guards import check_preconditions
from .invariants import check_all
from .types import Position, SettlementEvent, SettlementInput, SettleResult, UserBalance
from .updates import apply_settlement, compute_amounts

_INVARIANT_PREFIX = "invariant:"


def settle(
    position: Position,
    balance: UserBalance,
    oracle_price: int,
    funding_rate: int,
    *,
    config: SettlementConfig | None = None,
) -> SettleResult:
    """Settle one position against a new mark price and funding rate.

    Returns ``SettleResult`` with ``accepted=True`` and the updated records
    plus event on success, or ``accepted=False`` with a ``rejection`` code.

    Raises:
        TypeError: an input or record field is not an int.
    """
    cfg = config or DEFAULT_CONFIG

    reason = check_preconditions(position, balance, oracle_price, funding_rate, cfg)
    if reason is not None:
        return SettleResult(accepted=False, rejection=reason)

    try:
        amounts = compute_amounts(position, balance, oracle_price, funding_rate, cfg)
    except ArithmeticOverflow:
        return SettleResult(accepted=False, rejection=ArithmeticOverflow.code)

    new_position, new_balance = apply_settlement(position, balance, oracle_price, funding_rate, amounts)

    violations = check_all(position, new_position, new_balance, oracle_price, funding_rate, cfg)
    if violations:
        return SettleResult(
            accepted=False,
            rejection=f"{_INVARIANT_PREFIX}{','.join(violations)}",
        )

    event = effect_settled(
        position, balance, new_position, new_balance, oracle_price, funding_rate, amounts,
    )
    return SettleResult(accepted=True, position=new_position, balance=new_balance, event=event)


def settle_or_raise(
    position: Position,
    balance: UserBalance,
    oracle_price: int,
    funding_rate: int,
    *,
    config: SettlementConfig | None = None,
) -> SettleResult:
    """Like ``settle()`` but raises on rejection instead of returning a result.

    Raises:
        InvalidOraclePrice: ``oracle_price <= 0``.
        InvalidPositionState: open position with ``entry_price <= 0``.
        FundingRateOutOfBounds: new or checkpointed rate exceeds the bound.
        ArithmeticOverflow: a value does not fit its configured width.
        SettlementInvariantError: post-state violates one or more invariants.
    """
    result = settle(position, balance, oracle_price, funding_rate, config=config)
    if result.accepted:
        return result
    raise error_for_rejection(result.rejection or "")


def error_for_rejection(reason: str) -> SettlementError:
    """Build the exception matching a ``SettleResult.rejection`` code."""
    if reason.startswith(_INVARIANT_PREFIX):
        return SettlementInvariantError(reason.removeprefix(_INVARIANT_PREFIX).split(","))
    cls = ERRORS_BY_CODE.get(reason)
    if cls is None:
        return SettlementError(reason)
    return cls()


def settle_sequence(
    position: Position,
    balance: UserBalance,
    inputs: Iterable[SettlementInput],
    *,
    config: SettlementConfig | None = None,
) -> tuple[Position, UserBalance, list[SettlementEvent]]:
    """Fold ``settle_or_raise`` over *inputs* in order.

    All-or-nothing: if any step is rejected its error propagates and no
    intermediate records are returned.
    """
    events: list[SettlementEvent] = []
    for inp in inputs:
        result = settle_or_raise(position, balance, inp.oracle_price, inp.funding_rate, config=config)
        assert result.position is not None and result.balance is not None and result.event is not None
        position, balance = result.position, result.balance
        events.append(result.event)
    return position, balance, events
