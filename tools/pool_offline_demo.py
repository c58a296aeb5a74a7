#!/usr/bin/env python3

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pairpool.core import LiquidityPool, PoolError, build_price_history, load_pool_config
from pairpool.integration import InMemoryToken


def _now() -> int:
    return int(time.time())


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Run a deposit/swap/withdraw round against an in-memory pool.")
    ap.add_argument("--config", type=Path, default=None, help="optional pool config YAML")
    args = ap.parse_args(argv)

    config = load_pool_config(args.config) if args.config is not None else None

    mensa = InMemoryToken("0x" + "11" * 20, "Mensa Token", "MNSA")
    usd = InMemoryToken("0x" + "22" * 20, "USD Token", "USD")
    deployer = "deployer"
    trader = "trader"
    amm = "amm"

    # 1,000,000 whole tokens each.
    mensa.mint(deployer, mensa.units(1_000_000))
    usd.mint(deployer, usd.units(1_000_000))
    mensa.connect(deployer).transfer(trader, mensa.units(1_000))
    usd.connect(deployer).transfer(trader, usd.units(1_000))

    ticks = iter(range(_now(), _now() + 1_000))
    pool = LiquidityPool(mensa.connect(amm), usd.connect(amm), address=amm, config=config, clock=lambda: next(ticks))
    print(f"[offline-demo] pool_id={pool.pool_id}")

    amount_a = mensa.units(100_000)
    amount_b = usd.units(100_000)
    mensa.connect(deployer).approve(amm, amount_a)
    usd.connect(deployer).approve(amm, amount_b)
    try:
        dep = pool.deposit(amount_a, amount_b, deployer)
    except PoolError as exc:
        print(f"[offline-demo] FAIL (deposit): {exc}")
        return 1
    print(f"[offline-demo] deposit: shares={dep.shares_issued} reserves=({pool.reserve_a}, {pool.reserve_b})")

    for token, asset, amount in (
        (mensa, pool.asset_a, mensa.units(10)),
        (usd, pool.asset_b, usd.units(25)),
        (mensa, pool.asset_a, mensa.units(50)),
    ):
        token.connect(trader).approve(amm, amount)
        try:
            rec = pool.swap(amount, asset, trader)
        except PoolError as exc:
            print(f"[offline-demo] FAIL (swap): {exc}")
            return 1
        print(f"[offline-demo] swap {token.symbol}: in={rec.amount_in} out={rec.amount_out} "
              f"reserves=({rec.reserve_a}, {rec.reserve_b})")

    history = build_price_history(pool.events.swaps(), pool.asset_a, pool.asset_b)
    for point in history.points:
        print(f"[offline-demo] t={point.timestamp} rate={float(point.rate):.5f}")

    half = pool.shares_of(deployer) // 2
    try:
        wd = pool.withdraw(half, deployer)
    except PoolError as exc:
        print(f"[offline-demo] FAIL (withdraw): {exc}")
        return 1
    print(f"[offline-demo] withdraw: shares={wd.shares_burned} out=({wd.amount_a}, {wd.amount_b})")
    print(f"[offline-demo] final reserves=({pool.reserve_a}, {pool.reserve_b}) total_shares={pool.total_shares}")
    print("[offline-demo] OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
