from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
import pandas as pd

from emma_core.curves.catalog import EMMA_BASE_URL, CurveSpec


# ---------- Store ----------

@dataclass
class StoreConfig:
    # e.g. <repo_root>/data/emma/emma.duckdb
    path: Path


# ---------- Remote fetch ----------

@dataclass
class FetchConfig:
    base_url: str = EMMA_BASE_URL
    timeout: float = 30.0
    retries: int = 0          # extra attempts after the first
    backoff: float = 2.0      # sleep backoff**i between attempts


# ---------- Resolver ----------

@dataclass
class ResolverConfig:
    """
    Limits on the backward walk.

    floor_date:   never probe earlier than this
    max_lookback: optional cap on business days probed per walk; None means
                  only floor_date bounds it
    store_sibling_series: also keep other curves found in the same envelope
    """
    floor_date: date = date(2000, 1, 1)
    max_lookback: Optional[int] = None
    store_sibling_series: bool = True


@dataclass
class CalendarConfig:
    holidays: str = "none"    # "none" (weekends only) or "us_federal"


@dataclass
class AppConfig:
    """
    Top-level configuration object for emma_core.

    - store: where the DuckDB archive lives
    - fetch: EMMA root + HTTP timeouts
    - resolver: backward-walk limits
    - calendar: business-day convention
    - catalog: extra curve rows on top of the built-in table
    """
    store: StoreConfig
    fetch: FetchConfig = field(default_factory=FetchConfig)
    resolver: ResolverConfig = field(default_factory=ResolverConfig)
    calendar: CalendarConfig = field(default_factory=CalendarConfig)
    catalog: List[CurveSpec] = field(default_factory=list)

    # ---------- path helpers ----------

    @property
    def output_root(self) -> Path:
        """
        Base output directory, next to the store:

            <store dir>/output
        """
        out = self.store.path.parent / "output"
        out.mkdir(parents=True, exist_ok=True)
        return out

    # ---------- constructors ----------

    @classmethod
    def default(cls, root: Optional[Path] = None) -> "AppConfig":
        """
        Fallback when there is no YAML: store at <root>/data/emma/emma.duckdb.
        """
        if root is None:
            root = Path.cwd()
        return cls(store=StoreConfig(path=(Path(root) / "data" / "emma" / "emma.duckdb").resolve()))

    @classmethod
    def from_yaml(cls, cfg_path: Path) -> "AppConfig":
        """
        Load configuration from a YAML file.

        Paths in the YAML are interpreted as relative to the repo root.
        We assume this file lives in: <repo root>/config/example_config.yaml
        """
        cfg_path = Path(cfg_path)
        text = cfg_path.read_text(encoding="utf-8")
        data: Dict[str, Any] = yaml.safe_load(text) or {}

        # repo root ~ parent of the "config" directory
        repo_root = cfg_path.parent.parent

        def resolve_path(p: str) -> Path:
            path = Path(p)
            if not path.is_absolute():
                path = repo_root / path
            return path.resolve()

        # ----- Store -----
        store_data: Dict[str, Any] = data.get("store", {}) or {}
        store_cfg = StoreConfig(
            path=resolve_path(store_data.get("path", "data/emma/emma.duckdb")),
        )

        # ----- Fetch -----
        fetch_data: Dict[str, Any] = data.get("fetch", {}) or {}
        fetch_cfg = FetchConfig(
            base_url=str(fetch_data.get("base_url", EMMA_BASE_URL)),
            timeout=float(fetch_data.get("timeout", 30.0)),
            retries=int(fetch_data.get("retries", 0)),
            backoff=float(fetch_data.get("backoff", 2.0)),
        )

        # ----- Resolver -----
        res_data: Dict[str, Any] = data.get("resolver", {}) or {}
        floor_raw = res_data.get("floor_date")
        lookback_raw = res_data.get("max_lookback")
        resolver_cfg = ResolverConfig(
            floor_date=pd.to_datetime(floor_raw).date() if floor_raw else ResolverConfig.floor_date,
            max_lookback=int(lookback_raw) if lookback_raw is not None else None,
            store_sibling_series=bool(res_data.get("store_sibling_series", True)),
        )
        if resolver_cfg.max_lookback is not None and resolver_cfg.max_lookback < 1:
            raise ValueError(f"resolver.max_lookback must be >= 1, got {resolver_cfg.max_lookback}")

        # ----- Calendar -----
        cal_data: Dict[str, Any] = data.get("calendar", {}) or {}
        calendar_cfg = CalendarConfig(holidays=str(cal_data.get("holidays", "none")))

        # ----- Extra catalog rows -----
        catalog_rows: List[CurveSpec] = []
        for row in data.get("catalog", []) or []:
            try:
                catalog_rows.append(
                    CurveSpec(
                        source=str(row["source"]),
                        id=str(row["id"]),
                        name=str(row.get("name", row["id"])),
                        description=str(row.get("description", "")),
                        base_url=str(row.get("base_url", fetch_cfg.base_url)),
                    )
                )
            except KeyError as exc:
                raise ValueError(f"catalog row is missing {exc}: {row!r}") from exc

        return cls(
            store=store_cfg,
            fetch=fetch_cfg,
            resolver=resolver_cfg,
            calendar=calendar_cfg,
            catalog=catalog_rows,
        )
