"""
Liquidity pool operations: deposit, swap, withdraw.

Every mutating operation follows the same discipline:

1. Take the re-entrancy guard (nested calls are rejected outright).
2. Open a transaction: snapshot the ledger and checkpoint the collaborators.
3. Validate inputs and compute the quote against the current ledger.
4. Commit the full state delta to the ledger (K is recomputed there).
5. Only then move tokens through the collaborators.
6. On any failure, roll back everything opened in (2), refund pulls made on
   collaborators without checkpoints, and re-raise.

Deposit is the one exception to (4)-before-(5): it pulls funds into the pool
first, since the share quote compares the deposit against the pre-deposit
reserves. Those calls only move funds *into* the pool, and the guard is held
throughout.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from fractions import Fraction
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from structlog import get_logger

from ..integration.token_ledger import Checkpointable, TokenCollaborator
from ..state.balances import Amount, AssetId, HolderId
from ..state.pools import PoolState
from .config import PoolConfig
from .errors import InvalidInputError, PoolError, QuoteError, TransferError
from .events import DepositRecord, EventLog, SwapRecord, WithdrawalRecord
from .exchange import preview_swap, quote_co_deposit, quote_share_issue, quote_withdrawal
from .guard import ReentrancyGuard
from .ledger import PoolLedger

logger = get_logger()


def _now() -> int:
    return int(time.time())


def _require_amount(name: str, value: Amount) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value <= 0:
        raise InvalidInputError(f"{name} must be positive: {value}")


class LiquidityPool:
    """
    Constant-product pool over two token collaborators.

    Args:
        token_a: Collaborator for the first asset (its `asset_id` becomes asset_a)
        token_b: Collaborator for the second asset
        address: The pool's own holder identity in both token ledgers
        config: Share accounting parameters
        clock: Returns the current timestamp for swap records

    Collaborators without `Checkpointable` support cannot be rolled back. When
    an operation on such a token fails, funds already pulled from the holder
    are refunded with a compensating `transfer`; payouts that already left the
    pool are not recoverable.
    """

    def __init__(
        self,
        token_a: TokenCollaborator,
        token_b: TokenCollaborator,
        *,
        address: HolderId,
        config: Optional[PoolConfig] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        for name, token in (("token_a", token_a), ("token_b", token_b)):
            if not isinstance(token, TokenCollaborator):
                raise TypeError(f"{name} does not implement the token collaborator interface")
        if not isinstance(address, str) or not address:
            raise ValueError(f"address must be a non-empty string: {address!r}")

        self._ledger = PoolLedger(token_a.asset_id, token_b.asset_id)
        self._tokens: Dict[AssetId, TokenCollaborator] = {
            self._ledger.asset_a: token_a,
            self._ledger.asset_b: token_b,
        }
        self.address = address
        self.config = config or PoolConfig()
        self._clock = clock or _now
        self._guard = ReentrancyGuard()
        self._refunds: List[Tuple[AssetId, HolderId, Amount]] = []
        self.events = EventLog()

        self.log = logger.new(pool_id=self._ledger.pool_id, asset_a=self.asset_a, asset_b=self.asset_b)
        for asset, token in self._tokens.items():
            if not isinstance(token, Checkpointable):
                self.log.warn('collaborator does not support checkpoints, its transfers cannot be rolled back',
                              asset=asset)

    # -- reads -----------------------------------------------------------------

    @property
    def pool_id(self) -> str:
        return self._ledger.pool_id

    @property
    def asset_a(self) -> AssetId:
        return self._ledger.asset_a

    @property
    def asset_b(self) -> AssetId:
        return self._ledger.asset_b

    @property
    def reserve_a(self) -> Amount:
        return self._ledger.reserve_a

    @property
    def reserve_b(self) -> Amount:
        return self._ledger.reserve_b

    @property
    def k(self) -> int:
        return self._ledger.k

    @property
    def total_shares(self) -> Amount:
        return self._ledger.total_shares

    def shares_of(self, holder: HolderId) -> Amount:
        return self._ledger.shares_of(holder)

    def reserve_of(self, asset: AssetId) -> Amount:
        return self._ledger.reserve_of(asset)

    def state(self) -> PoolState:
        return self._ledger.snapshot()

    # -- read-only quotes ------------------------------------------------------

    def quote_swap(self, asset_in: AssetId, amount_in: Amount) -> Amount:
        """Output amount a swap of `amount_in` of `asset_in` would receive right now."""
        asset_out = self._ledger.other_asset(asset_in)
        return preview_swap(
            amount_in,
            self._ledger.reserve_of(asset_in),
            self._ledger.reserve_of(asset_out),
            self._ledger.k,
        ).amount_out

    def quote_co_deposit(self, asset_in: AssetId, amount_in: Amount) -> Amount:
        """
        Amount of the other asset that must accompany `amount_in` of `asset_in`.

        The result is floored, so once swaps have moved the reserves off a round
        ratio the pair can fall outside the deposit tolerance band and be rejected;
        treat it as an estimate, not a ready-to-submit amount.
        """
        asset_out = self._ledger.other_asset(asset_in)
        return quote_co_deposit(amount_in, self._ledger.reserve_of(asset_in), self._ledger.reserve_of(asset_out))

    def quote_withdrawal(self, share_amount: Amount) -> Tuple[Amount, Amount]:
        return quote_withdrawal(share_amount, self._ledger.total_shares, self._ledger.reserve_a, self._ledger.reserve_b)

    def spot_price(self, base_asset: AssetId) -> Fraction:
        """Units of the other asset per unit of `base_asset`, from current reserves."""
        quote_asset = self._ledger.other_asset(base_asset)
        base_reserve = self._ledger.reserve_of(base_asset)
        if base_reserve == 0:
            raise QuoteError("pool is empty, no spot price")
        return Fraction(self._ledger.reserve_of(quote_asset), base_reserve)

    # -- operations ------------------------------------------------------------

    def deposit(self, amount_a: Amount, amount_b: Amount, holder: HolderId) -> DepositRecord:
        """Add liquidity; returns the deposit record (shares issued to `holder`)."""
        with self._operation('deposit'):
            self._require_holder(holder)
            _require_amount("amount_a", amount_a)
            _require_amount("amount_b", amount_b)

            reserve_a = self._ledger.reserve_a
            reserve_b = self._ledger.reserve_b
            total_shares = self._ledger.total_shares

            self._pull(self.asset_a, holder, amount_a)
            self._pull(self.asset_b, holder, amount_b)

            shares = quote_share_issue(
                amount_a, amount_b, total_shares, reserve_a, reserve_b, config=self.config,
            )
            self._ledger.apply_deposit(holder, amount_a, amount_b, shares)

        record = DepositRecord(holder=holder, amount_a=amount_a, amount_b=amount_b, shares_issued=shares)
        self.events.append(record)
        self.log.debug('deposit committed', holder=holder, amount_a=amount_a, amount_b=amount_b, shares=shares,
                       reserve_a=self.reserve_a, reserve_b=self.reserve_b)
        return record

    def swap(self, amount_in: Amount, asset_in: AssetId, holder: HolderId) -> SwapRecord:
        """Swap `amount_in` of `asset_in` for the other asset."""
        with self._operation('swap'):
            self._require_holder(holder)
            _require_amount("amount_in", amount_in)
            asset_out = self._ledger.other_asset(asset_in)

            quote = preview_swap(
                amount_in,
                self._ledger.reserve_of(asset_in),
                self._ledger.reserve_of(asset_out),
                self._ledger.k,
            )
            self._ledger.apply_swap(asset_in, amount_in, quote.amount_out)

            self._pull(asset_in, holder, amount_in)
            self._push(asset_out, holder, quote.amount_out)
            timestamp = self._clock()

        record = SwapRecord(
            holder=holder,
            asset_in=asset_in,
            amount_in=amount_in,
            asset_out=asset_out,
            amount_out=quote.amount_out,
            reserve_a=self.reserve_a,
            reserve_b=self.reserve_b,
            timestamp=timestamp,
        )
        self.events.append(record)
        self.log.debug('swap committed', holder=holder, asset_in=asset_in, amount_in=amount_in,
                       amount_out=quote.amount_out, dust=quote.dust_applied,
                       reserve_a=self.reserve_a, reserve_b=self.reserve_b)
        return record

    def swap_a_for_b(self, amount_in: Amount, holder: HolderId) -> SwapRecord:
        return self.swap(amount_in, self.asset_a, holder)

    def swap_b_for_a(self, amount_in: Amount, holder: HolderId) -> SwapRecord:
        return self.swap(amount_in, self.asset_b, holder)

    def withdraw(self, share_amount: Amount, holder: HolderId) -> WithdrawalRecord:
        """Redeem `share_amount` of holder's shares for a proportional slice of both reserves."""
        with self._operation('withdraw'):
            self._require_holder(holder)
            _require_amount("share_amount", share_amount)
            owned = self._ledger.shares_of(holder)
            if share_amount > owned:
                raise InvalidInputError(f"Insufficient shares: requested {share_amount} > owned {owned}")

            amount_a, amount_b = quote_withdrawal(
                share_amount, self._ledger.total_shares, self._ledger.reserve_a, self._ledger.reserve_b,
            )
            self._ledger.apply_withdrawal(holder, share_amount, amount_a, amount_b)

            self._push(self.asset_a, holder, amount_a)
            self._push(self.asset_b, holder, amount_b)

        record = WithdrawalRecord(holder=holder, shares_burned=share_amount, amount_a=amount_a, amount_b=amount_b)
        self.events.append(record)
        self.log.debug('withdrawal committed', holder=holder, shares=share_amount, amount_a=amount_a,
                       amount_b=amount_b, reserve_a=self.reserve_a, reserve_b=self.reserve_b)
        return record

    # -- internals -------------------------------------------------------------

    @contextmanager
    def _operation(self, op: str) -> Iterator[None]:
        if self._guard.entered:
            self.log.warn('re-entrant call rejected', op=op)
        with self._guard, self._transaction(op):
            yield

    @contextmanager
    def _transaction(self, op: str) -> Iterator[None]:
        saved = self._ledger.snapshot()
        checkpoints: List[Tuple[Checkpointable, object]] = [
            (token, token.checkpoint())
            for token in self._tokens.values()
            if isinstance(token, Checkpointable)
        ]
        self._refunds = []
        try:
            yield
        except Exception as exc:
            for token, checkpoint in reversed(checkpoints):
                token.rollback(checkpoint)
            self._refund_pulls()
            self._ledger.restore(saved)
            self.log.warn('operation reverted', op=op, error=repr(exc))
            raise
        finally:
            self._refunds = []

    def _refund_pulls(self) -> None:
        for asset, holder, amount in reversed(self._refunds):
            token = self._tokens[asset]
            try:
                ok = token.transfer(holder, amount)
            except Exception as exc:
                self.log.error('refund failed', asset=asset, holder=holder, amount=amount, error=repr(exc))
                continue
            if ok is not True:
                self.log.error('refund rejected by the token', asset=asset, holder=holder, amount=amount)

    def _require_holder(self, holder: HolderId) -> None:
        if not isinstance(holder, str) or not holder:
            raise InvalidInputError(f"holder must be a non-empty string: {holder!r}")
        if holder == self.address:
            raise InvalidInputError("holder cannot be the pool itself")

    def _pull(self, asset: AssetId, holder: HolderId, amount: Amount) -> None:
        token = self._tokens[asset]
        self._settle(asset, 'transfer_from', lambda: token.transfer_from(holder, self.address, amount))
        if not isinstance(token, Checkpointable):
            self._refunds.append((asset, holder, amount))

    def _push(self, asset: AssetId, holder: HolderId, amount: Amount) -> None:
        token = self._tokens[asset]
        self._settle(asset, 'transfer', lambda: token.transfer(holder, amount))

    def _settle(self, asset: AssetId, action: str, call: Callable[[], bool]) -> None:
        try:
            ok = call()
        except PoolError:
            raise
        except Exception as exc:
            raise TransferError(f"{action} of {asset} failed: {exc}") from exc
        if ok is not True:
            raise TransferError(f"{action} of {asset} was rejected by the token")

    def __repr__(self) -> str:
        return (
            f"LiquidityPool(assets=({self.asset_a}, {self.asset_b}), "
            f"reserves=({self.reserve_a}, {self.reserve_b}), total_shares={self.total_shares})"
        )
