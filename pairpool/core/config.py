"""
Pool configuration.

The share math is fixed-point: every share amount is scaled by
`SHARE_PRECISION`. Nothing else in the package spells out the scale factor.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml


SHARE_PRECISION = 10**18

# Shares minted for the very first deposit, in whole shares.
BOOTSTRAP_WHOLE_SHARES = 100

# Share quotes for the two assets must agree after integer division by this.
DEFAULT_PROPORTION_TOLERANCE = 1000


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class PoolConfig:
    """
    Runtime parameters of the share accounting.

    `bootstrap_shares` defaults to `BOOTSTRAP_WHOLE_SHARES` whole shares at
    `share_precision`; pass it explicitly to override.
    """

    share_precision: int = SHARE_PRECISION
    bootstrap_shares: Optional[int] = None
    proportion_tolerance: int = DEFAULT_PROPORTION_TOLERANCE

    def __post_init__(self) -> None:
        if self.bootstrap_shares is None and _is_int(self.share_precision):
            object.__setattr__(self, "bootstrap_shares", BOOTSTRAP_WHOLE_SHARES * self.share_precision)
        for f in fields(self):
            value = getattr(self, f.name)
            if not _is_int(value):
                raise TypeError(f"{f.name} must be an int")
            if value <= 0:
                raise ValueError(f"{f.name} must be positive: {value}")


def pool_config_from_mapping(obj: Mapping[str, Any]) -> PoolConfig:
    """Build a PoolConfig from a plain mapping. Unknown keys are rejected."""
    if not isinstance(obj, Mapping):
        raise TypeError("pool config must be a mapping")
    known = {f.name for f in fields(PoolConfig)}
    unknown = sorted(set(obj) - known)
    if unknown:
        raise ValueError(f"unknown pool config keys: {', '.join(map(str, unknown))}")
    return PoolConfig(**dict(obj))


def load_pool_config(path: Union[str, Path]) -> PoolConfig:
    """
    Load a PoolConfig from a YAML file.

    An empty document yields the defaults. A top-level `pool:` section is
    accepted so the settings can live next to other keys in a shared file.
    """
    obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if obj is None:
        return PoolConfig()
    if not isinstance(obj, Mapping):
        raise TypeError("pool config YAML must be a mapping")
    if set(obj) == {"pool"}:
        obj = obj["pool"] or {}
    return pool_config_from_mapping(obj)
