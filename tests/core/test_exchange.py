# [TESTER] v1

from __future__ import annotations

import pytest

from pairpool.core.config import SHARE_PRECISION, PoolConfig
from pairpool.core.errors import InvalidInputError, QuoteError
from pairpool.core.exchange import (
    preview_swap,
    quote_co_deposit,
    quote_share_issue,
    quote_swap,
    quote_withdrawal,
)


# ---------------------------------------------------------------------------
# quote_swap
# ---------------------------------------------------------------------------

def test_quote_swap_matches_floor_formula() -> None:
    # 2000 - floor(2_000_000 / 1100) = 2000 - 1818
    assert quote_swap(100, 1000, 2000, 2_000_000) == 182


def test_quote_swap_equal_to_reserve_stays_below_reserve() -> None:
    out = quote_swap(1000, 1000, 1000, 1000 * 1000)
    assert 0 < out < 1000
    assert out == 500


def test_preview_swap_reports_post_state() -> None:
    q = preview_swap(100, 1000, 2000, 2_000_000)
    assert q.amount_out == 182
    assert (q.new_reserve_in, q.new_reserve_out) == (1100, 1818)
    assert q.k_before == 2_000_000
    assert q.k_after == 1100 * 1818
    assert q.dust_applied is False


def test_dust_decrement_keeps_one_unit_in_reserve() -> None:
    # floor(20 / 110) == 0 would hand out the whole opposing reserve.
    q = preview_swap(100, 10, 2, 20)
    assert q.dust_applied is True
    assert q.amount_out == 1
    assert q.new_reserve_out == 1
    assert q.k_after > q.k_before


def test_dust_decrement_to_zero_is_rejected() -> None:
    with pytest.raises(QuoteError, match="zero"):
        quote_swap(5, 10, 1, 10)


def test_quote_swap_rejects_zero_amount() -> None:
    with pytest.raises(InvalidInputError):
        quote_swap(0, 1000, 2000, 2_000_000)


def test_quote_swap_rejects_negative_amount() -> None:
    with pytest.raises(InvalidInputError):
        quote_swap(-1, 1000, 2000, 2_000_000)


@pytest.mark.parametrize("reserve_in,reserve_out", [(0, 100), (100, 0), (0, 0)])
def test_quote_swap_rejects_empty_reserve(reserve_in: int, reserve_out: int) -> None:
    with pytest.raises(QuoteError, match="empty reserve"):
        quote_swap(10, reserve_in, reserve_out, reserve_in * reserve_out)


def test_quote_swap_rejects_stale_k() -> None:
    with pytest.raises(QuoteError, match="stale"):
        quote_swap(10, 100, 100, 9_999)


def test_quote_swap_rejects_non_int_inputs() -> None:
    with pytest.raises(TypeError):
        quote_swap(True, 100, 100, 10_000)
    with pytest.raises(TypeError):
        quote_swap(1.5, 100, 100, 10_000)  # type: ignore[arg-type]


def test_quote_errors_are_value_errors() -> None:
    with pytest.raises(ValueError):
        quote_swap(0, 100, 100, 10_000)
    with pytest.raises(ValueError):
        quote_swap(10, 0, 100, 0)


# ---------------------------------------------------------------------------
# quote_co_deposit
# ---------------------------------------------------------------------------

def test_quote_co_deposit_is_linear_proportion() -> None:
    assert quote_co_deposit(500, 1000, 2000) == 1000
    assert quote_co_deposit(1000, 2000, 1000) == 500
    # floor(2000 * 3 / 1000)
    assert quote_co_deposit(3, 1000, 2000) == 6
    assert quote_co_deposit(1, 3, 2) == 0


def test_quote_co_deposit_rejects_bad_inputs() -> None:
    with pytest.raises(InvalidInputError):
        quote_co_deposit(0, 1000, 2000)
    with pytest.raises(QuoteError):
        quote_co_deposit(10, 0, 2000)


# ---------------------------------------------------------------------------
# quote_share_issue
# ---------------------------------------------------------------------------

def test_first_deposit_gets_bootstrap_shares_regardless_of_amounts() -> None:
    assert quote_share_issue(1000, 2000, 0, 0, 0) == 100 * SHARE_PRECISION
    assert quote_share_issue(1, 10**30, 0, 0, 0) == 100 * SHARE_PRECISION


def test_bootstrap_amount_follows_config() -> None:
    cfg = PoolConfig(bootstrap_shares=7)
    assert quote_share_issue(5, 5, 0, 0, 0, config=cfg) == 7


def test_proportional_deposit_issues_share_a() -> None:
    total = 100 * SHARE_PRECISION
    assert quote_share_issue(500, 1000, total, 1000, 2000) == 50 * SHARE_PRECISION


def test_disproportionate_deposit_is_rejected() -> None:
    total = 100 * SHARE_PRECISION
    # share_a = 50e18, share_b = 49.95e18
    with pytest.raises(QuoteError, match="proportions"):
        quote_share_issue(500, 999, total, 1000, 2000)


def test_rounding_mismatch_within_tolerance_is_accepted() -> None:
    # share_a = 100 * 1 // 3 = 33, share_b = 100 * 2 // 7 = 28: equal after // 1000
    assert quote_share_issue(1, 2, 100, 3, 7) == 33


def test_tolerance_is_configurable() -> None:
    total = 100 * SHARE_PRECISION
    # share_b = 50.05e18 diverges under the default band but not under a 1e18 band.
    with pytest.raises(QuoteError):
        quote_share_issue(500, 1001, total, 1000, 2000)
    cfg = PoolConfig(proportion_tolerance=SHARE_PRECISION)
    assert quote_share_issue(500, 1001, total, 1000, 2000, config=cfg) == 50 * SHARE_PRECISION


def test_share_issue_rejects_exhausted_reserve() -> None:
    with pytest.raises(QuoteError, match="exhausted"):
        quote_share_issue(10, 10, 100, 0, 10)


def test_share_issue_rejects_zero_result() -> None:
    # share_a = 10 * 1 // 1000 == 0 and share_b == 0: proportions agree but nothing to mint.
    with pytest.raises(QuoteError, match="zero"):
        quote_share_issue(1, 1, 10, 1000, 1000)


def test_share_issue_rejects_non_positive_amounts() -> None:
    with pytest.raises(InvalidInputError):
        quote_share_issue(0, 10, 0, 0, 0)
    with pytest.raises(InvalidInputError):
        quote_share_issue(10, -1, 100, 10, 10)


# ---------------------------------------------------------------------------
# quote_withdrawal
# ---------------------------------------------------------------------------

def test_quote_withdrawal_is_proportional() -> None:
    total = 150 * SHARE_PRECISION
    assert quote_withdrawal(50 * SHARE_PRECISION, total, 1500, 3000) == (500, 1000)


def test_quote_withdrawal_floors() -> None:
    # 1000 * 1 // 3 == 333, 2000 * 1 // 3 == 666
    assert quote_withdrawal(1, 3, 1000, 2000) == (333, 666)


def test_quote_withdrawal_full_supply_returns_full_reserves() -> None:
    assert quote_withdrawal(10, 10, 1000, 2000) == (1000, 2000)


def test_quote_withdrawal_rejects_bad_share_amounts() -> None:
    with pytest.raises(InvalidInputError):
        quote_withdrawal(0, 100, 1000, 2000)
    with pytest.raises(InvalidInputError, match="more shares than supply"):
        quote_withdrawal(101, 100, 1000, 2000)


def test_quote_withdrawal_rejects_zero_amounts() -> None:
    with pytest.raises(QuoteError, match="rounds to zero"):
        quote_withdrawal(1, 100 * SHARE_PRECISION, 1000, 2000)
