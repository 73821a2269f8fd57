"""
Reference host for the settlement engine.

The engine is a pure function; something still has to load records, decide
who may trigger a settlement, commit the results and emit the event. This
module is that caller, kept deliberately small and fail-closed:
- Positions and balances live in memory, addressed by canonical 32-byte hex keys.
- A settlement may be triggered by the position owner or by a configured keeper.
- Both records are committed only after the engine accepts and the sink (if
  any) has taken the event; a rejection or a sink failure leaves storage
  untouched and propagates the error.
- Each committed settlement's event is appended to the host log. A sink gets
  it as canonical JSON bytes before the commit, so a retry re-emits the same event.

Concurrency: one settlement at a time. Hosts that accept concurrent requests
must serialize calls per position themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Iterable, Optional

from ..core.logger import get_logger, setup_logging
from ..core.settlement import (
    Position,
    SettlementConfig,
    SettlementError,
    SettlementEvent,
    UserBalance,
    settle_or_raise,
)
from ..core.settlement.config import AppConfig
from ..core.settlement.math import fits
from ..state.canonical import canonical_hex_fixed_allow_0x
from .events import encode_event, event_digest

PUBKEY_BYTES = 32

logger = get_logger("xmargin.host")


class UnauthorizedSigner(SettlementError):
    """Raised when the signer is neither the position owner nor a keeper."""

    code = "UnauthorizedSigner"
    message = "Signer is not authorized to settle this position"


class UnknownPosition(SettlementError):
    """Raised when no position is stored under the requested key."""

    code = "UnknownPosition"
    message = "Position not found"


@dataclass(frozen=True)
class PositionRecord:
    owner: str
    position: Position


def _key(value: str, name: str) -> str:
    return canonical_hex_fixed_allow_0x(value, nbytes=PUBKEY_BYTES, name=name)


def _require_int(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")


class SettlementHost:
    def __init__(
        self,
        *,
        keepers: Iterable[str] = (),
        config: Optional[SettlementConfig] = None,
        sink: Optional[Callable[[bytes], None]] = None,
    ) -> None:
        self._config = config or SettlementConfig()
        self._keepers = frozenset(_key(k, "keeper") for k in keepers)
        self._sink = sink
        self._positions: dict[str, PositionRecord] = {}
        self._balances: dict[str, UserBalance] = {}
        self._events: list[SettlementEvent] = []

    @classmethod
    def from_app_config(
        cls,
        app_config: AppConfig,
        *,
        keepers: Iterable[str] = (),
        sink: Optional[Callable[[bytes], None]] = None,
    ) -> "SettlementHost":
        """Build a host from a loaded ``AppConfig`` and configure logging from it."""
        setup_logging(app_config.logging)
        return cls(keepers=keepers, config=app_config.settlement, sink=sink)

    @property
    def config(self) -> SettlementConfig:
        return self._config

    @property
    def events(self) -> tuple[SettlementEvent, ...]:
        return tuple(self._events)

    # -- Fixtures / account context ----------------------------------------

    def open_position(
        self,
        owner: str,
        key: str,
        *,
        size: int,
        entry_price: int,
        last_funding_rate: int = 0,
    ) -> Position:
        """Create a position record. Opening/closing proper is out of scope here."""
        owner = _key(owner, "owner")
        key = _key(key, "position key")
        if key in self._positions:
            raise ValueError(f"position already exists: {key}")
        _require_int("size", size)
        _require_int("entry_price", entry_price)
        _require_int("last_funding_rate", last_funding_rate)
        if size != 0 and entry_price <= 0:
            raise ValueError("entry_price must be positive for an open position")
        for name, val in (("size", size), ("entry_price", entry_price), ("last_funding_rate", last_funding_rate)):
            if not fits(val, self._config.position_bits):
                raise ValueError(f"{name} does not fit in i{self._config.position_bits}")
        position = Position(size=size, entry_price=entry_price, last_funding_rate=last_funding_rate, key=key)
        self._positions[key] = PositionRecord(owner=owner, position=position)
        self._balances.setdefault(owner, UserBalance())
        return position

    def deposit(self, owner: str, amount: int) -> UserBalance:
        owner = _key(owner, "owner")
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValueError("deposit amount must be a positive int")
        current = self._balances.get(owner, UserBalance())
        new_collateral = current.collateral + amount
        if not fits(new_collateral, self._config.collateral_bits):
            raise ValueError(f"collateral does not fit in i{self._config.collateral_bits}")
        balance = replace(current, collateral=new_collateral)
        self._balances[owner] = balance
        return balance

    def position(self, key: str) -> Position:
        record = self._positions.get(_key(key, "position key"))
        if record is None:
            raise UnknownPosition(key)
        return record.position

    def owner_of(self, key: str) -> str:
        record = self._positions.get(_key(key, "position key"))
        if record is None:
            raise UnknownPosition(key)
        return record.owner

    def balance(self, owner: str) -> UserBalance:
        return self._balances.get(_key(owner, "owner"), UserBalance())

    # -- Settlement --------------------------------------------------------

    def is_authorized(self, signer: str, key: str) -> bool:
        """False for a malformed signer as well as for one outside the authorized set."""
        try:
            signer = _key(signer, "signer")
        except (TypeError, ValueError):
            return False
        return signer in self._keepers or signer == self.owner_of(key)

    def settle(self, signer: str, key: str, oracle_price: int, funding_rate: int) -> SettlementEvent:
        """Settle one stored position and commit the result.

        Raises:
            UnknownPosition: no position under *key*.
            UnauthorizedSigner: *signer* is neither owner nor keeper.
            SettlementError: any engine rejection, verbatim.
            Exception: whatever the sink raises; nothing is committed.
        """
        key = _key(key, "position key")
        record = self._positions.get(key)
        if record is None:
            logger.warning("settlement.rejected", position=key, reason=UnknownPosition.code)
            raise UnknownPosition(key)
        if not self.is_authorized(signer, key):
            logger.warning("settlement.rejected", position=key, reason=UnauthorizedSigner.code)
            raise UnauthorizedSigner(signer)

        balance = self._balances.get(record.owner, UserBalance())
        try:
            result = settle_or_raise(
                record.position, balance, oracle_price, funding_rate, config=self._config,
            )
        except SettlementError as exc:
            logger.warning(
                "settlement.rejected",
                position=key,
                reason=exc.code,
                oracle_price=oracle_price,
                funding_rate=funding_rate,
            )
            raise

        assert result.position is not None and result.balance is not None and result.event is not None
        event = result.event
        if self._sink is not None:
            payload = encode_event(event)
            try:
                self._sink(payload)
            except Exception as exc:
                logger.error("settlement.emit_failed", position=key, error=repr(exc))
                raise

        # Commit both records together.
        self._positions[key] = replace(record, position=result.position)
        self._balances[record.owner] = result.balance
        self._events.append(event)

        logger.info(
            "settlement.applied",
            position=key,
            digest=event_digest(event),
            unrealized_pnl=event.unrealized_pnl,
            funding_payment=event.funding_payment,
            net_settlement=event.net_settlement,
            new_collateral=event.new_collateral,
        )
        return event
