"""
Price series derived from swap records.

Each swap record carries the post-swap reserves, so the pool's marginal
rate after the trade is `reserve_b / reserve_a`. Rates are rounded half-up to
`RATE_DECIMALS` places for display.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from fractions import Fraction
from typing import Iterable, List, Optional, Tuple

from ..state.balances import AssetId
from .events import SwapRecord

RATE_DECIMALS = 5


def swap_rate(record: SwapRecord, *, decimals: int = RATE_DECIMALS) -> Fraction:
    """Post-swap rate (units of asset_b per asset_a), rounded half-up."""
    if record.reserve_a <= 0:
        raise ValueError(f"swap record has no asset_a reserve: {record.reserve_a}")
    scale = 10**decimals
    raw = Fraction(record.reserve_b, record.reserve_a)
    return Fraction(math.floor(raw * scale + Fraction(1, 2)), scale)


@dataclass(frozen=True)
class PricePoint:
    timestamp: int
    rate: Fraction
    record: SwapRecord


@dataclass(frozen=True)
class PriceHistory:
    """Chronologically ordered price points."""

    points: Tuple[PricePoint, ...] = ()

    def rates(self) -> List[Fraction]:
        return [p.rate for p in self.points]

    def latest_first(self) -> List[PricePoint]:
        return list(reversed(self.points))

    def latest(self) -> Optional[PricePoint]:
        return self.points[-1] if self.points else None

    def __len__(self) -> int:
        return len(self.points)


def build_price_history(
    records: Iterable[SwapRecord],
    asset_a: AssetId,
    asset_b: AssetId,
    *,
    decimals: int = RATE_DECIMALS,
) -> PriceHistory:
    """
    Build the price series for the (asset_a, asset_b) pair.

    Records whose input or output asset is outside the pair are skipped.
    Ties on timestamp keep their original (emission) order.
    """
    pair = {asset_a, asset_b}
    relevant = [r for r in records if r.asset_in in pair and r.asset_out in pair]
    relevant.sort(key=lambda r: r.timestamp)
    return PriceHistory(
        points=tuple(PricePoint(timestamp=r.timestamp, rate=swap_rate(r, decimals=decimals), record=r) for r in relevant)
    )
