# [TESTER] v1

from __future__ import annotations

from pathlib import Path

import pytest

from pairpool.core.config import (
    DEFAULT_PROPORTION_TOLERANCE,
    SHARE_PRECISION,
    PoolConfig,
    load_pool_config,
    pool_config_from_mapping,
)
from pairpool.core.exchange import quote_share_issue


def test_defaults() -> None:
    cfg = PoolConfig()
    assert cfg.share_precision == 10**18
    assert cfg.bootstrap_shares == 100 * SHARE_PRECISION
    assert cfg.proportion_tolerance == DEFAULT_PROPORTION_TOLERANCE == 1000


def test_share_precision_drives_default_bootstrap() -> None:
    cfg = PoolConfig(share_precision=10**6)
    assert cfg.bootstrap_shares == 100 * 10**6
    assert quote_share_issue(1, 1, 0, 0, 0, config=cfg) == 100 * 10**6


def test_explicit_bootstrap_overrides_precision() -> None:
    cfg = PoolConfig(share_precision=10**6, bootstrap_shares=42)
    assert cfg.bootstrap_shares == 42


def test_yaml_precision_flows_into_bootstrap(tmp_path: Path) -> None:
    path = tmp_path / "pool.yaml"
    path.write_text("share_precision: 1000\n", encoding="utf-8")
    assert load_pool_config(path).bootstrap_shares == 100_000


@pytest.mark.parametrize("field", ["share_precision", "bootstrap_shares", "proportion_tolerance"])
def test_rejects_non_positive(field: str) -> None:
    with pytest.raises(ValueError, match=field):
        PoolConfig(**{field: 0})


@pytest.mark.parametrize("value", [True, 1.5, "10"])
def test_rejects_non_int(value: object) -> None:
    with pytest.raises(TypeError):
        PoolConfig(proportion_tolerance=value)  # type: ignore[arg-type]


def test_from_mapping_rejects_unknown_keys() -> None:
    with pytest.raises(ValueError, match="unknown pool config keys: fee"):
        pool_config_from_mapping({"fee": 3})


def test_from_mapping_rejects_non_mapping() -> None:
    with pytest.raises(TypeError):
        pool_config_from_mapping([("proportion_tolerance", 5)])  # type: ignore[arg-type]


def test_load_yaml(tmp_path: Path) -> None:
    path = tmp_path / "pool.yaml"
    path.write_text("proportion_tolerance: 5000\nbootstrap_shares: 1000\n", encoding="utf-8")
    cfg = load_pool_config(path)
    assert cfg == PoolConfig(proportion_tolerance=5000, bootstrap_shares=1000)


def test_load_yaml_pool_section(tmp_path: Path) -> None:
    path = tmp_path / "settings.yaml"
    path.write_text("pool:\n  proportion_tolerance: 7\n", encoding="utf-8")
    assert load_pool_config(str(path)).proportion_tolerance == 7


def test_load_empty_yaml_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_pool_config(path) == PoolConfig()


def test_load_non_mapping_yaml(tmp_path: Path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(TypeError, match="mapping"):
        load_pool_config(path)
