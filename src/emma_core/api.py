"""
Caller-facing query surface for EMMA curves.

EmmaCurves is built once (from an AppConfig) and owns the store connection.
Each method mirrors one of the spreadsheet functions of the original add-in:

    get_curve            EMMA(id, date)      -> [(year, rate), ...]
    get_most_recent_date                     -> date of the snapshot used
    source / url / help_url                  EMMA.SOURCE / EMMA.URL / EMMA.HELP
    ids                                      EMMA_ENUM
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Tuple

import pandas as pd

from emma_core.config import AppConfig
from emma_core.curves.calendar import BusinessCalendar
from emma_core.curves.catalog import CurveCatalog
from emma_core.curves.resolver import CurveResolver
from emma_core.curves.types import CurveSnapshot
from emma_core.io.fetcher import RemoteFetcher
from emma_core.io.store import PointStore


class EmmaCurves:
    def __init__(self, resolver: CurveResolver) -> None:
        self.resolver = resolver

    @classmethod
    def from_config(cls, app_cfg: AppConfig) -> "EmmaCurves":
        catalog = CurveCatalog.with_extra(app_cfg.catalog, base_url=app_cfg.fetch.base_url)
        store = PointStore(app_cfg.store.path)
        fetcher = RemoteFetcher(
            timeout=app_cfg.fetch.timeout,
            retries=app_cfg.fetch.retries,
            backoff=app_cfg.fetch.backoff,
        )
        calendar = BusinessCalendar(holidays=app_cfg.calendar.holidays)
        resolver = CurveResolver(
            catalog=catalog,
            store=store,
            fetcher=fetcher,
            calendar=calendar,
            floor_date=app_cfg.resolver.floor_date,
            max_lookback=app_cfg.resolver.max_lookback,
            store_sibling_series=app_cfg.resolver.store_sibling_series,
        )
        return cls(resolver)

    # ---------- lifecycle ----------

    def __enter__(self) -> "EmmaCurves":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self.resolver.store.close()
        self.resolver.fetcher.close()

    # ---------- shortcuts ----------

    @property
    def catalog(self) -> CurveCatalog:
        return self.resolver.catalog

    @property
    def store(self) -> PointStore:
        return self.resolver.store

    # ---------- curves ----------

    def snapshot(self, curve_id: str, asof=None) -> CurveSnapshot:
        return self.resolver.resolve(curve_id, asof)

    def get_curve(self, curve_id: str, asof=None) -> List[Tuple[float, float]]:
        """
        (year, rate) pairs sorted by year, rate as a decimal. Default date is the
        previous business day.
        """
        return self.resolver.resolve(curve_id, asof).pairs()

    def get_curve_frame(self, curve_id: str, asof=None) -> pd.DataFrame:
        return self.resolver.resolve(curve_id, asof).to_frame()

    def get_most_recent_date(self, curve_id: str, asof=None) -> date:
        """Date of the latest published curve at or before asof (default today)."""
        return self.resolver.most_recent_date(curve_id, asof)

    def history(self, curve_id: str, start=None, end=None) -> pd.DataFrame:
        """Cached history only; never fetches."""
        self.catalog.lookup(curve_id)
        return self.store.history(curve_id, start, end)

    # ---------- catalog ----------

    def ids(self) -> List[str]:
        return self.catalog.ids()

    def source(self, curve_id: str) -> str:
        return self.catalog.source(curve_id)

    def url(self, curve_id: str) -> str:
        return self.catalog.url(curve_id)

    def help_url(self, curve_id: str) -> str:
        return self.catalog.help_url(curve_id)

    def describe(self, curve_id: Optional[str] = None) -> pd.DataFrame:
        specs = self.catalog.specs() if curve_id is None else [self.catalog.lookup(curve_id)]
        return pd.DataFrame.from_records(
            [
                {
                    "id": s.id,
                    "source": s.source,
                    "key": s.key,
                    "name": s.name,
                    "url": s.url_template,
                    "help_url": s.help_url,
                }
                for s in specs
            ]
        )
