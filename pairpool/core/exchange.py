"""
Exchange engine: pure quote functions for the constant-product pool.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Floor Rounding
- Time Complexity: O(1) per quote
- Space Complexity: O(1) auxiliary
- Invariant: no successful quote leaves either reserve at zero while shares exist

Every function either returns a usable, non-zero result or raises. Caller
mistakes raise `InvalidInputError`; quotes that would break a pool invariant
raise `QuoteError`. Both are `ValueError` subclasses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..state.balances import Amount
from .config import PoolConfig
from .errors import InvalidInputError, QuoteError


_DEFAULT_CONFIG = PoolConfig()


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def _require_reserves(*reserves: Tuple[str, int]) -> None:
    for name, value in reserves:
        _require_int(name, value)
        if value < 0:
            raise QuoteError(f"{name} must be non-negative: {value}")


@dataclass(frozen=True)
class SwapQuote:
    amount_in: int
    amount_out: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int
    dust_applied: bool


def preview_swap(amount_in: Amount, reserve_in: Amount, reserve_out: Amount, k: int) -> SwapQuote:
    """
    Constant-product swap quote + post-state.

        reserve_out_after = floor(k / (reserve_in + amount_in))
        amount_out = reserve_out - reserve_out_after

    If `amount_out` would equal the whole opposing reserve, one unit is held
    back (dust decrement) so the reserve never reaches zero.

    Note: with floor rounding the post-swap product can end up slightly below
    `k`, by strictly less than `reserve_in + amount_in`.

    Raises:
        InvalidInputError: If amount_in is not positive
        QuoteError: On empty reserves, a stale k, or a degenerate output
    """
    _require_int("amount_in", amount_in)
    _require_int("k", k)
    _require_reserves(("reserve_in", reserve_in), ("reserve_out", reserve_out))

    if amount_in <= 0:
        raise InvalidInputError(f"amount_in must be positive: {amount_in}")
    if reserve_in == 0 or reserve_out == 0:
        raise QuoteError(f"cannot swap against an empty reserve: ({reserve_in}, {reserve_out})")
    if k != reserve_in * reserve_out:
        raise QuoteError(f"stale invariant: k ({k}) != reserve_in * reserve_out ({reserve_in * reserve_out})")

    new_reserve_in = reserve_in + amount_in
    reserve_out_after = k // new_reserve_in
    amount_out = reserve_out - reserve_out_after

    dust_applied = False
    if amount_out == reserve_out:
        amount_out -= 1
        dust_applied = True

    if amount_out <= 0:
        raise QuoteError("amount_out is zero (trade too small)")
    if amount_out >= reserve_out:
        raise QuoteError(f"swap would drain reserve: amount_out ({amount_out}) >= reserve_out ({reserve_out})")

    new_reserve_out = reserve_out - amount_out
    return SwapQuote(
        amount_in=amount_in,
        amount_out=amount_out,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=k,
        k_after=new_reserve_in * new_reserve_out,
        dust_applied=dust_applied,
    )


def quote_swap(amount_in: Amount, reserve_in: Amount, reserve_out: Amount, k: int) -> Amount:
    """Return the output amount for swapping `amount_in` (see `preview_swap`)."""
    return preview_swap(amount_in, reserve_in, reserve_out, k).amount_out


def quote_co_deposit(amount_in: Amount, reserve_in: Amount, reserve_out: Amount) -> Amount:
    """
    Amount of the other asset that must accompany `amount_in` on a deposit.

        amount_out = floor(reserve_out * amount_in / reserve_in)
    """
    _require_int("amount_in", amount_in)
    _require_reserves(("reserve_in", reserve_in), ("reserve_out", reserve_out))
    if amount_in <= 0:
        raise InvalidInputError(f"amount_in must be positive: {amount_in}")
    if reserve_in == 0:
        raise QuoteError("cannot quote a co-deposit against an empty reserve")
    return (reserve_out * amount_in) // reserve_in


def quote_share_issue(
    amount_a: Amount,
    amount_b: Amount,
    total_shares: Amount,
    reserve_a: Amount,
    reserve_b: Amount,
    *,
    config: Optional[PoolConfig] = None,
) -> Amount:
    """
    Compute shares to issue for a deposit of (amount_a, amount_b).

    For the first deposit (total_shares == 0):
        shares = config.bootstrap_shares  (independent of the amounts)

    For subsequent deposits:
        share_a = floor(total_shares * amount_a / reserve_a)
        share_b = floor(total_shares * amount_b / reserve_b)
        require share_a // tol == share_b // tol
        shares = share_a

    Args:
        amount_a: Amount of asset_a being deposited
        amount_b: Amount of asset_b being deposited
        total_shares: Current share supply
        reserve_a: Current (pre-deposit) reserve of asset_a
        reserve_b: Current (pre-deposit) reserve of asset_b
        config: Share accounting parameters (defaults to PoolConfig())

    Returns:
        Amount of shares to mint

    Raises:
        InvalidInputError: If a deposit amount is not positive
        QuoteError: If proportions diverge, a reserve is exhausted, or the result is zero
    """
    cfg = config or _DEFAULT_CONFIG
    _require_int("amount_a", amount_a)
    _require_int("amount_b", amount_b)
    _require_reserves(("total_shares", total_shares), ("reserve_a", reserve_a), ("reserve_b", reserve_b))

    if amount_a <= 0 or amount_b <= 0:
        raise InvalidInputError(f"Deposit amounts must be positive: ({amount_a}, {amount_b})")

    if total_shares == 0:
        return cfg.bootstrap_shares

    if reserve_a == 0 or reserve_b == 0:
        raise QuoteError(f"pool has shares but an exhausted reserve: ({reserve_a}, {reserve_b})")

    share_a = (total_shares * amount_a) // reserve_a
    share_b = (total_shares * amount_b) // reserve_b

    tol = cfg.proportion_tolerance
    if share_a // tol != share_b // tol:
        raise QuoteError(f"deposit proportions diverge from pool ratio: share_a={share_a} share_b={share_b}")

    if share_a <= 0:
        raise QuoteError("computed share amount is zero (deposit too small)")
    return share_a


def quote_withdrawal(
    share_amount: Amount,
    total_shares: Amount,
    reserve_a: Amount,
    reserve_b: Amount,
) -> Tuple[Amount, Amount]:
    """
    Compute asset amounts returned for redeeming `share_amount`.

    Formula:
        amount_a = floor(reserve_a * share_amount / total_shares)
        amount_b = floor(reserve_b * share_amount / total_shares)
    """
    _require_int("share_amount", share_amount)
    _require_reserves(("total_shares", total_shares), ("reserve_a", reserve_a), ("reserve_b", reserve_b))

    if share_amount <= 0:
        raise InvalidInputError(f"share_amount must be positive: {share_amount}")
    if share_amount > total_shares:
        raise InvalidInputError(f"Cannot redeem more shares than supply: {share_amount} > {total_shares}")

    amount_a = (reserve_a * share_amount) // total_shares
    amount_b = (reserve_b * share_amount) // total_shares

    if amount_a == 0 or amount_b == 0:
        raise QuoteError(f"withdrawal rounds to zero: ({amount_a}, {amount_b})")
    return amount_a, amount_b
