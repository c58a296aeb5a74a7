"""
Pool ledger: reserves, the constant product K and share accounting.

The ledger is pure state plus invariant checks; it never talks to token
collaborators. It is owned by a single `LiquidityPool` and only mutated
through the `apply_*` methods, each of which recomputes K from the reserves
and re-checks every invariant before returning.
"""

from __future__ import annotations

from ..state.balances import Amount, AssetId, HolderId
from ..state.pools import PoolState, compute_pool_id, validate_asset_pair
from ..state.shares import ShareTable
from .errors import InvalidInputError, InvariantError
from .invariants import check_all


class PoolLedger:
    """
    Mutable ledger of a two-asset pool, bound permanently to (asset_a, asset_b).

    Reads are exposed as properties; there are no setters.
    """

    def __init__(self, asset_a: AssetId, asset_b: AssetId) -> None:
        validate_asset_pair(asset_a, asset_b)
        self._asset_a = asset_a
        self._asset_b = asset_b
        self._pool_id = compute_pool_id(asset_a, asset_b)
        self._reserve_a: Amount = 0
        self._reserve_b: Amount = 0
        self._k: int = 0
        self._shares = ShareTable()

    # -- reads -----------------------------------------------------------------

    @property
    def pool_id(self) -> str:
        return self._pool_id

    @property
    def asset_a(self) -> AssetId:
        return self._asset_a

    @property
    def asset_b(self) -> AssetId:
        return self._asset_b

    @property
    def reserve_a(self) -> Amount:
        return self._reserve_a

    @property
    def reserve_b(self) -> Amount:
        return self._reserve_b

    @property
    def k(self) -> int:
        return self._k

    @property
    def total_shares(self) -> Amount:
        return self._shares.total

    def shares_of(self, holder: HolderId) -> Amount:
        return self._shares.get(holder)

    def holders(self) -> list[HolderId]:
        return self._shares.holders()

    def reserve_of(self, asset: AssetId) -> Amount:
        if asset == self._asset_a:
            return self._reserve_a
        if asset == self._asset_b:
            return self._reserve_b
        raise InvalidInputError(f"Asset {asset} not in pool {self._pool_id}")

    def other_asset(self, asset: AssetId) -> AssetId:
        if asset == self._asset_a:
            return self._asset_b
        if asset == self._asset_b:
            return self._asset_a
        raise InvalidInputError(f"Asset {asset} not in pool {self._pool_id}")

    def snapshot(self) -> PoolState:
        return PoolState(
            pool_id=self._pool_id,
            asset_a=self._asset_a,
            asset_b=self._asset_b,
            reserve_a=self._reserve_a,
            reserve_b=self._reserve_b,
            k=self._k,
            total_shares=self._shares.total,
            shares=self._shares.items(),
        )

    # -- mutations -------------------------------------------------------------

    def apply_deposit(self, holder: HolderId, amount_a: Amount, amount_b: Amount, shares: Amount) -> None:
        self._reserve_a += amount_a
        self._reserve_b += amount_b
        self._recompute_k()
        self._shares.mint(holder, shares)
        self._check()

    def apply_swap(self, asset_in: AssetId, amount_in: Amount, amount_out: Amount) -> None:
        if asset_in == self._asset_a:
            self._reserve_a += amount_in
            self._reserve_b -= amount_out
        elif asset_in == self._asset_b:
            self._reserve_b += amount_in
            self._reserve_a -= amount_out
        else:
            raise InvalidInputError(f"Asset {asset_in} not in pool {self._pool_id}")
        self._recompute_k()
        self._check()

    def apply_withdrawal(self, holder: HolderId, shares: Amount, amount_a: Amount, amount_b: Amount) -> None:
        self._shares.burn(holder, shares)
        self._reserve_a -= amount_a
        self._reserve_b -= amount_b
        self._recompute_k()
        self._check()

    def restore(self, state: PoolState) -> None:
        """Reinstate a snapshot previously taken from this ledger."""
        if state.pool_id != self._pool_id:
            raise ValueError(f"snapshot belongs to another pool: {state.pool_id}")
        self._reserve_a = state.reserve_a
        self._reserve_b = state.reserve_b
        self._k = state.k
        self._shares.load(state.shares)

    def _recompute_k(self) -> None:
        # Always derived from the reserves, never adjusted incrementally.
        self._k = self._reserve_a * self._reserve_b

    def _check(self) -> None:
        violations = check_all(self.snapshot())
        if violations:
            raise InvariantError(violations)

    def __repr__(self) -> str:
        return (
            f"PoolLedger(assets=({self._asset_a}, {self._asset_b}), "
            f"reserves=({self._reserve_a}, {self._reserve_b}), total_shares={self._shares.total})"
        )
