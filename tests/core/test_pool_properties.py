"""Property-based tests for the pool: ledger invariants under random operation sequences.

Uses Hypothesis to drive random deposits, swaps and withdrawals through a
pool backed by in-memory tokens and checks the invariants after every step.
"""

from __future__ import annotations

import importlib.util
from math import gcd

import pytest

if importlib.util.find_spec("hypothesis") is None:  # pragma: no cover
    pytest.skip("hypothesis not installed", allow_module_level=True)

import hypothesis.strategies as st
from hypothesis import event, given, settings

from pairpool.core import PoolError, check_all, preview_swap, quote_withdrawal

from pool_fixtures import ALICE, AMM, BOB, fund, make_pool, seed

reserves = st.integers(min_value=1, max_value=10**24)
amounts = st.integers(min_value=1, max_value=10**24)


@given(reserve_in=reserves, reserve_out=reserves, amount_in=amounts)
@settings(max_examples=300, deadline=None)
def test_swap_output_bounded_and_k_drift_limited(reserve_in: int, reserve_out: int, amount_in: int) -> None:
    k = reserve_in * reserve_out
    try:
        q = preview_swap(amount_in, reserve_in, reserve_out, k)
    except PoolError:
        return
    assert 0 < q.amount_out < reserve_out
    assert q.new_reserve_in == reserve_in + amount_in
    assert q.new_reserve_out == reserve_out - q.amount_out
    # Floor rounding of the post-swap reserve loses strictly less than one unit of it.
    assert q.k_before - q.k_after < q.new_reserve_in


@given(
    amount_a=st.integers(min_value=1, max_value=10**12),
    amount_b=st.integers(min_value=1, max_value=10**12),
    swap_in=st.integers(min_value=1, max_value=10**12),
    multiple=st.integers(min_value=2, max_value=1_000),
)
@settings(max_examples=150, deadline=None)
def test_deposit_then_withdraw_never_profits(amount_a: int, amount_b: int, swap_in: int, multiple: int) -> None:
    pool, tok_a, tok_b = make_pool()
    seed(pool, tok_a, tok_b, ALICE, amount_a, amount_b)
    fund(tok_a, BOB, swap_in)
    try:
        pool.swap_a_for_b(swap_in, BOB)
        event("deposit after swap")
    except PoolError:
        event("deposit into untouched pool")

    # A whole multiple of the reduced reserve ratio: share_a == share_b exactly.
    g = gcd(pool.reserve_a, pool.reserve_b)
    dep_a = pool.reserve_a // g * multiple
    dep_b = pool.reserve_b // g * multiple

    rec = seed(pool, tok_a, tok_b, "carol", dep_a, dep_b)
    wd = pool.withdraw(rec.shares_issued, "carol")

    assert dep_a - 1 <= wd.amount_a <= dep_a
    assert dep_b - 1 <= wd.amount_b <= dep_b
    assert pool.shares_of("carol") == 0


ops = st.lists(
    st.tuples(
        st.sampled_from(["deposit", "swap_a", "swap_b", "withdraw"]),
        st.sampled_from([ALICE, BOB, "carol"]),
        st.integers(min_value=1, max_value=10**9),
    ),
    min_size=1,
    max_size=25,
)


@given(ops=ops)
@settings(max_examples=150, deadline=None)
def test_invariants_hold_after_every_operation(ops) -> None:
    pool, tok_a, tok_b = make_pool()
    seed(pool, tok_a, tok_b, ALICE, 10**9, 3 * 10**9)

    for op, holder, amount in ops:
        before = pool.state()
        try:
            if op == "deposit":
                co = pool.quote_co_deposit(pool.asset_a, amount)
                fund(tok_a, holder, amount)
                fund(tok_b, holder, max(co, 1))
                pool.deposit(amount, max(co, 1), holder)
            elif op == "swap_a":
                fund(tok_a, holder, amount)
                pool.swap_a_for_b(amount, holder)
            elif op == "swap_b":
                fund(tok_b, holder, amount)
                pool.swap_b_for_a(amount, holder)
            else:
                share = min(pool.shares_of(holder), amount * 10**9)
                pool.withdraw(max(share, 1), holder)
        except PoolError:
            assert pool.state() == before
        state = pool.state()
        assert check_all(state) == []
        assert state.reserve_a == tok_a.balance_of(AMM)
        assert state.reserve_b == tok_b.balance_of(AMM)
        assert sum(amount for _, amount in state.shares) == state.total_shares


@given(
    share=st.integers(min_value=1, max_value=10**20),
    total=st.integers(min_value=1, max_value=10**20),
    reserve_a=reserves,
    reserve_b=reserves,
)
@settings(max_examples=300, deadline=None)
def test_withdrawal_quote_never_exceeds_pro_rata(share: int, total: int, reserve_a: int, reserve_b: int) -> None:
    try:
        out_a, out_b = quote_withdrawal(share, total, reserve_a, reserve_b)
    except PoolError:
        return
    assert out_a * total <= reserve_a * share
    assert out_b * total <= reserve_b * share
    assert out_a <= reserve_a
    assert out_b <= reserve_b
