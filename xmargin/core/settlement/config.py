"""Engine configuration: stored integer widths and the funding-rate bound.

The host must configure these consistently with its record layout; the
overflow-free guarantee for intermediate values only holds when
``wide_bits >= 2 * position_bits``.

Configuration files are YAML mappings, e.g.::

    settlement:
      position_bits: 64
      collateral_bits: 128
      wide_bits: 128
      max_rate_magnitude: 9223372036854
    logging:
      level: INFO
      renderer: console
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

from .math import int_max

DEFAULT_POSITION_BITS: int = 64
DEFAULT_COLLATERAL_BITS: int = 128
DEFAULT_WIDE_BITS: int = 128
# Keeps |rate_delta * size| far inside i128 for any i64 size.
DEFAULT_MAX_RATE_MAGNITUDE: int = int_max(64) // 1_000_000

_RENDERERS = ("console", "json")
CONFIG_ENV_VAR = "XMARGIN_CONFIG"


@dataclass(frozen=True)
class SettlementConfig:
    position_bits: int = DEFAULT_POSITION_BITS
    collateral_bits: int = DEFAULT_COLLATERAL_BITS
    wide_bits: int = DEFAULT_WIDE_BITS
    max_rate_magnitude: int = DEFAULT_MAX_RATE_MAGNITUDE

    def __post_init__(self) -> None:
        for f in fields(self):
            val = getattr(self, f.name)
            if not isinstance(val, int) or isinstance(val, bool):
                raise TypeError(f"{f.name} must be an int, got {type(val).__name__}")
        self.validate()

    def validate(self) -> None:
        """Raise ``ValueError`` if the widths/bound are inconsistent."""
        if self.position_bits < 8 or self.collateral_bits < 8:
            raise ValueError("stored widths must be at least 8 bits")
        if self.wide_bits < 2 * self.position_bits:
            raise ValueError("wide_bits must be at least twice position_bits")
        if self.collateral_bits > self.wide_bits:
            raise ValueError("collateral_bits must not exceed wide_bits")
        if not (0 < self.max_rate_magnitude <= int_max(self.position_bits)):
            raise ValueError("max_rate_magnitude must be positive and fit in position_bits")


DEFAULT_CONFIG = SettlementConfig()


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    renderer: str = "console"

    def __post_init__(self) -> None:
        if self.renderer not in _RENDERERS:
            raise ValueError(f"renderer must be one of {_RENDERERS}, got {self.renderer!r}")


@dataclass(frozen=True)
class AppConfig:
    settlement: SettlementConfig = DEFAULT_CONFIG
    logging: LoggingConfig = LoggingConfig()


def _section(cls, raw: Any, name: str):
    if raw is None:
        return cls()
    if not isinstance(raw, Mapping):
        raise TypeError(f"{name} section must be a mapping")
    known = {f.name for f in fields(cls)}
    unknown = set(raw) - known
    if unknown:
        raise ValueError(f"unknown {name} keys: {sorted(unknown)}")
    return cls(**dict(raw))


def config_from_mapping(obj: Mapping[str, Any]) -> AppConfig:
    if not isinstance(obj, Mapping):
        raise TypeError("config must be a mapping")
    unknown = set(obj) - {"settlement", "logging"}
    if unknown:
        raise ValueError(f"unknown config sections: {sorted(unknown)}")
    return AppConfig(
        settlement=_section(SettlementConfig, obj.get("settlement"), "settlement"),
        logging=_section(LoggingConfig, obj.get("logging"), "logging"),
    )


def load_config(path: str | Path) -> AppConfig:
    """Load an ``AppConfig`` from a YAML file. An empty file yields defaults."""
    obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if obj is None:
        return AppConfig()
    return config_from_mapping(obj)


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Load from *path*, else from ``$XMARGIN_CONFIG``, else defaults."""
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or None
    if path is None:
        return AppConfig()
    return load_config(path)
