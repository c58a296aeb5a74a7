"""
State management for PairPool
"""

from .balances import Amount, AssetId, BalanceTable, HolderId
from .pools import PoolState, compute_pool_id, state_digest, state_from_dict, state_to_dict, validate_asset_pair
from .shares import ShareTable

__all__ = [
    "Amount",
    "AssetId",
    "BalanceTable",
    "HolderId",
    "PoolState",
    "ShareTable",
    "compute_pool_id",
    "state_digest",
    "state_from_dict",
    "state_to_dict",
    "validate_asset_pair",
]
