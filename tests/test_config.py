from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from emma_core.config import AppConfig


def _write_cfg(root: Path, text: str) -> Path:
    cfg_dir = root / "config"
    cfg_dir.mkdir(parents=True, exist_ok=True)
    p = cfg_dir / "app_config.yaml"
    p.write_text(text, encoding="utf-8")
    return p


def test_example_config_loads(repo_root):
    app_cfg = AppConfig.from_yaml(repo_root / "config" / "example_config.yaml")

    assert app_cfg.store.path == (repo_root / "data" / "emma" / "emma.duckdb").resolve()
    assert app_cfg.resolver.floor_date == date(2015, 1, 1)
    assert app_cfg.resolver.max_lookback is None
    assert app_cfg.calendar.holidays == "none"
    assert app_cfg.catalog == []


def test_defaults_for_empty_yaml(tmp_path):
    app_cfg = AppConfig.from_yaml(_write_cfg(tmp_path, ""))

    assert app_cfg.store.path == (tmp_path / "data" / "emma" / "emma.duckdb").resolve()
    assert app_cfg.fetch.base_url == "https://emma.msrb.org/"
    assert app_cfg.fetch.retries == 0
    assert app_cfg.resolver.floor_date == date(2000, 1, 1)
    assert app_cfg.resolver.max_lookback is None
    assert app_cfg.resolver.store_sibling_series is True


def test_overrides_and_catalog_rows(tmp_path):
    cfg = _write_cfg(
        tmp_path,
        """
store:
  path: cache/curves.duckdb
fetch:
  base_url: http://localhost:9000/
  timeout: 5
  retries: 2
resolver:
  floor_date: 2020-01-02
  max_lookback: 4
  store_sibling_series: false
calendar:
  holidays: us_federal
catalog:
  - source: Example
    id: EXMPL
    name: Example AAA Curve.
""",
    )
    app_cfg = AppConfig.from_yaml(cfg)

    assert app_cfg.store.path == (tmp_path / "cache" / "curves.duckdb").resolve()
    assert app_cfg.fetch.timeout == 5.0
    assert app_cfg.fetch.retries == 2
    assert app_cfg.resolver.floor_date == date(2020, 1, 2)
    assert app_cfg.resolver.max_lookback == 4
    assert app_cfg.resolver.store_sibling_series is False
    assert app_cfg.calendar.holidays == "us_federal"
    assert [c.id for c in app_cfg.catalog] == ["EXMPL"]
    assert app_cfg.catalog[0].base_url == "http://localhost:9000/"


def test_bad_values_rejected(tmp_path):
    with pytest.raises(ValueError):
        AppConfig.from_yaml(_write_cfg(tmp_path, "resolver:\n  max_lookback: 0\n"))
    with pytest.raises(ValueError):
        AppConfig.from_yaml(_write_cfg(tmp_path, "catalog:\n  - source: X\n"))


def test_default_without_yaml(tmp_path):
    app_cfg = AppConfig.default(tmp_path)
    assert app_cfg.store.path == (tmp_path / "data" / "emma" / "emma.duckdb").resolve()
    assert app_cfg.output_root == app_cfg.store.path.parent / "output"
    assert app_cfg.output_root.is_dir()
