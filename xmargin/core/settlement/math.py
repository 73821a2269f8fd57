"""Checked integer arithmetic for the settlement engine.

Python ints never wrap, so the fixed-width contract of the stored records is
enforced explicitly: every add/sub/mul is evaluated exactly and then bounded to
a two's-complement range of the requested bit width. A result outside that
range raises ``ArithmeticOverflow`` instead of wrapping or saturating.

Two widths matter:
- the *stored* widths (`position_bits`, `collateral_bits`) of record fields,
- the *wide* width (`wide_bits`) used for every intermediate value.
"""

from __future__ import annotations

from .errors import ArithmeticOverflow


def int_min(bits: int) -> int:
    """Smallest value of a signed ``bits``-wide integer."""
    return -(1 << (bits - 1))


def int_max(bits: int) -> int:
    """Largest value of a signed ``bits``-wide integer."""
    return (1 << (bits - 1)) - 1


I64_MIN: int = int_min(64)
I64_MAX: int = int_max(64)
I128_MIN: int = int_min(128)
I128_MAX: int = int_max(128)


def fits(x: int, bits: int) -> bool:
    """True when *x* is representable as a signed ``bits``-wide integer."""
    return int_min(bits) <= x <= int_max(bits)


def abs_val(x: int) -> int:
    """Absolute value of *x*."""
    return x if x >= 0 else -x


# -- Checked operations ------------------------------------------------------

def narrow(x: int, bits: int, *, what: str = "value") -> int:
    """Return *x* unchanged if it fits in ``bits``, else raise ``ArithmeticOverflow``."""
    if not fits(x, bits):
        raise ArithmeticOverflow(f"{what} does not fit in i{bits}")
    return x


def checked_add(a: int, b: int, bits: int, *, what: str = "add") -> int:
    return narrow(a + b, bits, what=what)


def checked_sub(a: int, b: int, bits: int, *, what: str = "sub") -> int:
    return narrow(a - b, bits, what=what)


def checked_mul(a: int, b: int, bits: int, *, what: str = "mul") -> int:
    return narrow(a * b, bits, what=what)


# -- Settlement amounts ------------------------------------------------------

def unrealized_pnl(size: int, entry_price: int, oracle_price: int, wide_bits: int) -> int:
    """Signed PnL since the last mark: ``(oracle_price - entry_price) * size``.

    Positive for a long when price rises, negative for a short on the same
    move (the sign rides on ``size``).
    """
    price_delta = checked_sub(oracle_price, entry_price, wide_bits, what="price_delta")
    return checked_mul(price_delta, size, wide_bits, what="unrealized_pnl")


def funding_payment(size: int, last_funding_rate: int, funding_rate: int, wide_bits: int) -> int:
    """Signed funding owed since the last checkpoint: ``(rate - last_rate) * size``.

    Positive means the account pays (longs when the rate rises), negative
    means it receives.
    """
    rate_delta = checked_sub(funding_rate, last_funding_rate, wide_bits, what="rate_delta")
    return checked_mul(rate_delta, size, wide_bits, what="funding_payment")


def net_settlement(pnl: int, funding: int, wide_bits: int) -> int:
    """Collateral change: PnL minus funding paid."""
    return checked_sub(pnl, funding, wide_bits, what="net_settlement")


def apply_to_collateral(collateral: int, net: int, wide_bits: int, collateral_bits: int) -> int:
    """``collateral + net`` computed wide, then narrowed to the stored width.

    This is the one step a well-configured engine can actually overflow on:
    collateral accumulates across settlements with no upper bound.
    """
    total = checked_add(collateral, net, wide_bits, what="collateral")
    return narrow(total, collateral_bits, what="new_collateral")
