"""Invariant checkers for the pool ledger.

Each function returns True when the invariant holds, and `check_all()` returns
the list of violated invariant IDs (empty = all pass). They are evaluated on
a `PoolState` snapshot after every ledger mutation.
"""

from __future__ import annotations

from typing import Callable

from ..state.pools import PoolState


def inv_non_negative(s: PoolState) -> bool:
    if s.reserve_a < 0 or s.reserve_b < 0 or s.total_shares < 0:
        return False
    return all(amount > 0 for _, amount in s.shares)


def inv_funded_or_empty(s: PoolState) -> bool:
    # reserve_a > 0 <=> reserve_b > 0 <=> total_shares > 0
    return (s.reserve_a > 0) == (s.reserve_b > 0) == (s.total_shares > 0)


def inv_k_matches_reserves(s: PoolState) -> bool:
    return s.k == s.reserve_a * s.reserve_b


def inv_shares_sum_to_total(s: PoolState) -> bool:
    return sum(amount for _, amount in s.shares) == s.total_shares


def inv_unique_holders(s: PoolState) -> bool:
    holders = [h for h, _ in s.shares]
    return len(holders) == len(set(holders))


# ---------------------------------------------------------------------------
# Registry + check_all
# ---------------------------------------------------------------------------

INVARIANT_REGISTRY: dict[str, Callable[[PoolState], bool]] = {
    "inv_non_negative": inv_non_negative,
    "inv_funded_or_empty": inv_funded_or_empty,
    "inv_k_matches_reserves": inv_k_matches_reserves,
    "inv_shares_sum_to_total": inv_shares_sum_to_total,
    "inv_unique_holders": inv_unique_holders,
}


def check_all(state: PoolState) -> list[str]:
    """Return list of violated invariant IDs (empty = all pass)."""
    return [
        inv_id
        for inv_id, check_fn in INVARIANT_REGISTRY.items()
        if not check_fn(state)
    ]
