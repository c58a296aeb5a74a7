"""
Core pool algorithms
"""

from .config import SHARE_PRECISION, PoolConfig, load_pool_config, pool_config_from_mapping
from .errors import (
    InvalidInputError,
    InvariantError,
    PoolError,
    QuoteError,
    ReentrancyError,
    TransferError,
)
from .events import DepositRecord, Event, EventLog, SwapRecord, WithdrawalRecord
from .exchange import SwapQuote, preview_swap, quote_co_deposit, quote_share_issue, quote_swap, quote_withdrawal
from .guard import ReentrancyGuard
from .invariants import check_all
from .ledger import PoolLedger
from .pool import LiquidityPool
from .price_history import PriceHistory, PricePoint, build_price_history, swap_rate

__all__ = [
    "SHARE_PRECISION",
    "PoolConfig",
    "load_pool_config",
    "pool_config_from_mapping",
    "PoolError",
    "InvalidInputError",
    "QuoteError",
    "TransferError",
    "ReentrancyError",
    "InvariantError",
    "Event",
    "EventLog",
    "DepositRecord",
    "WithdrawalRecord",
    "SwapRecord",
    "SwapQuote",
    "preview_swap",
    "quote_swap",
    "quote_co_deposit",
    "quote_share_issue",
    "quote_withdrawal",
    "ReentrancyGuard",
    "check_all",
    "PoolLedger",
    "LiquidityPool",
    "PriceHistory",
    "PricePoint",
    "build_price_history",
    "swap_rate",
]
