"""
PairPool: a two-asset constant-product liquidity pool.

Layout:
- `pairpool.state`: balance/share tables and immutable pool snapshots
- `pairpool.core`: exchange math, ledger, invariants and pool operations
- `pairpool.integration`: token collaborator contract + in-memory reference token
"""

from .core import (
    SHARE_PRECISION,
    LiquidityPool,
    PoolConfig,
    PoolError,
    InvalidInputError,
    QuoteError,
    TransferError,
    ReentrancyError,
    InvariantError,
)
from .integration import InMemoryToken

__all__ = [
    "SHARE_PRECISION",
    "LiquidityPool",
    "PoolConfig",
    "PoolError",
    "InvalidInputError",
    "QuoteError",
    "TransferError",
    "ReentrancyError",
    "InvariantError",
    "InMemoryToken",
]
