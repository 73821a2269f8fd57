"""Exception types for the settlement engine.

Every rejection has a stable ``code`` (used as ``SettleResult.rejection``) and
a human-readable message. ``settle_or_raise()`` in ``engine.py`` maps codes
back to these classes for callers that prefer exceptions.
"""

from __future__ import annotations


class SettlementError(Exception):
    """Base class for all settlement rejections."""

    code: str = "SettlementError"
    message: str = "settlement rejected"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        text = self.message if not detail else f"{self.message}: {detail}"
        super().__init__(text)


class InvalidOraclePrice(SettlementError):
    """Raised when the supplied oracle price is not strictly positive."""

    code = "InvalidOraclePrice"
    message = "Oracle price must be positive"


class InvalidPositionState(SettlementError):
    """Raised when a stored open position has a non-positive entry price."""

    code = "InvalidPositionState"
    message = "Entry price must be positive"


class FundingRateOutOfBounds(SettlementError):
    """Raised when the new or checkpointed funding rate exceeds the configured bound."""

    code = "FundingRateOutOfBounds"
    message = "Funding rate is outside acceptable bounds"


class ArithmeticOverflow(SettlementError):
    """Raised when a value cannot be represented in its configured width."""

    code = "ArithmeticOverflow"
    message = "Calculation resulted in overflow or underflow"


class SettlementInvariantError(SettlementError):
    """Raised when a post-state violates one or more invariants."""

    code = "SettlementInvariantError"
    message = "invariant violations"

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(", ".join(violations))


ERRORS_BY_CODE: dict[str, type[SettlementError]] = {
    cls.code: cls
    for cls in (
        InvalidOraclePrice,
        InvalidPositionState,
        FundingRateOutOfBounds,
        ArithmeticOverflow,
    )
}
