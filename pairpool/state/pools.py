"""
Pool state snapshots.

`PoolState` is an immutable view of the ledger at one instant. The live, mutable
ledger lives in `pairpool.core.ledger`; snapshots are what it hands out for
reads, invariant checks and transaction rollback.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Tuple

from .balances import AssetId, Amount, HolderId
from .canonical import canonical_json_bytes, domain_sep_bytes, sha256_hex


def validate_asset_pair(asset_a: AssetId, asset_b: AssetId) -> None:
    """
    Validate the two asset identities a pool is bound to.

    Raises:
        ValueError: If either identity is empty/malformed or both are equal
    """
    for name, asset in (("asset_a", asset_a), ("asset_b", asset_b)):
        if not isinstance(asset, str) or not asset:
            raise ValueError(f"{name} must be a non-empty string: {asset!r}")
        if asset != asset.strip():
            raise ValueError(f"{name} must not carry surrounding whitespace: {asset!r}")
    if asset_a == asset_b:
        raise ValueError(f"Pool assets must differ: {asset_a} == {asset_b}")


def compute_pool_id(asset_a: AssetId, asset_b: AssetId) -> str:
    """
    Deterministically compute a pool_id for the given asset pair.

        pool_id = H(domain || asset_a || "|" || asset_b)

    Order matters: the pool is bound to (asset_a, asset_b) as given.
    """
    validate_asset_pair(asset_a, asset_b)
    data = (
        domain_sep_bytes("PairPool")
        + asset_a.encode("utf-8")
        + b"|"
        + asset_b.encode("utf-8")
    )
    return sha256_hex(data)


@dataclass(frozen=True)
class PoolState:
    """
    Snapshot of a two-asset pool.

    Attributes:
        pool_id: Pool identifier (hex string)
        asset_a: First bound asset
        asset_b: Second bound asset
        reserve_a: Pool-held balance of asset_a
        reserve_b: Pool-held balance of asset_b
        k: Constant product as recorded by the ledger
        total_shares: Sum of all holder shares
        shares: Sorted (holder, shares) pairs, zero balances omitted
    """
    pool_id: str
    asset_a: AssetId
    asset_b: AssetId
    reserve_a: Amount = 0
    reserve_b: Amount = 0
    k: int = 0
    total_shares: Amount = 0
    shares: Tuple[Tuple[HolderId, Amount], ...] = ()

    def __post_init__(self) -> None:
        validate_asset_pair(self.asset_a, self.asset_b)
        for name in ("reserve_a", "reserve_b", "k", "total_shares"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"{name} must be an int")
            if value < 0:
                raise ValueError(f"{name} must be non-negative: {value}")

    def get_reserve(self, asset: AssetId) -> Amount:
        """
        Get reserve for a specific asset.

        Raises:
            ValueError: If asset is not in this pool
        """
        if asset == self.asset_a:
            return self.reserve_a
        if asset == self.asset_b:
            return self.reserve_b
        raise ValueError(f"Asset {asset} not in pool {self.pool_id}")

    def other_asset(self, asset: AssetId) -> AssetId:
        """Return the counterpart of `asset` in this pool."""
        if asset == self.asset_a:
            return self.asset_b
        if asset == self.asset_b:
            return self.asset_a
        raise ValueError(f"Asset {asset} not in pool {self.pool_id}")

    def shares_of(self, holder: HolderId) -> Amount:
        for h, amount in self.shares:
            if h == holder:
                return amount
        return 0

    def constant_product(self) -> int:
        """Compute reserve_a * reserve_b from the reserves (not the recorded k)."""
        return self.reserve_a * self.reserve_b

    def is_empty(self) -> bool:
        return self.total_shares == 0

    def __repr__(self) -> str:
        return (
            f"PoolState(pool_id={self.pool_id[:16]}..., "
            f"assets=({self.asset_a}, {self.asset_b}), "
            f"reserves=({self.reserve_a}, {self.reserve_b}), "
            f"total_shares={self.total_shares}, holders={len(self.shares)})"
        )


STATE_VAR_NAMES: Tuple[str, ...] = tuple(PoolState.__dataclass_fields__)


def state_to_dict(state: PoolState) -> dict[str, Any]:
    """Serialize a PoolState to a plain dict (shares become a holder -> amount mapping)."""
    out: dict[str, Any] = {name: getattr(state, name) for name in STATE_VAR_NAMES if name != "shares"}
    out["shares"] = {holder: amount for holder, amount in state.shares}
    return out


def state_from_dict(d: Mapping[str, Any]) -> PoolState:
    """Deserialize a dict to a PoolState. Raises KeyError on missing fields."""
    shares_obj = d["shares"]
    if not isinstance(shares_obj, Mapping):
        raise TypeError("shares must be a mapping of holder -> amount")
    shares = []
    for holder, amount in shares_obj.items():
        if not isinstance(holder, str):
            raise TypeError(f"share holder must be str, got {type(holder).__name__}")
        if not isinstance(amount, int) or isinstance(amount, bool) or amount <= 0:
            raise ValueError(f"share balance for {holder!r} must be a positive int")
        shares.append((holder, int(amount)))
    return PoolState(
        pool_id=str(d["pool_id"]),
        asset_a=d["asset_a"],
        asset_b=d["asset_b"],
        reserve_a=d["reserve_a"],
        reserve_b=d["reserve_b"],
        k=d["k"],
        total_shares=d["total_shares"],
        shares=tuple(sorted(shares)),
    )


def state_digest(state: PoolState) -> str:
    """sha256 over the canonical JSON encoding of the snapshot."""
    return sha256_hex(canonical_json_bytes(state_to_dict(state)))
