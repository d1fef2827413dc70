from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from emma_core.curves.calendar import BusinessCalendar
from emma_core.curves.catalog import CurveCatalog
from emma_core.curves.resolver import CurveResolver
from emma_core.io.fetcher import FetchResult, FetchStatus, build_url
from emma_core.io.store import PointStore

EMPTY_BODY = '{"Series":[]}'


def envelope(*series) -> str:
    """
    envelope(("Treasury", [(1, 5.4), (10, 3.81)]), ...) -> EMMA JSON body.
    X and Y are encoded as strings, like the live feed.
    """
    return json.dumps(
        {
            "Series": [
                {"Id": sid, "Points": [{"X": str(x), "Y": str(y)} for x, y in pts]}
                for sid, pts in series
            ]
        }
    )


class FakeFetcher:
    """
    Stands in for RemoteFetcher. bodies maps (curve_id, date) or date -> body;
    anything not listed comes back as an empty Series list.
    """

    def __init__(self, bodies=None, errors=()):
        self.bodies = dict(bodies or {})
        self.errors = set(errors)
        self.calls: list[tuple[str, date]] = []

    def fetch(self, curve, asof):
        self.calls.append((curve.id, asof))
        url = build_url(curve.url_template, asof)
        if asof in self.errors:
            return FetchResult(FetchStatus.ERROR, url, error="ConnectionError: boom")
        body = self.bodies.get((curve.id, asof), self.bodies.get(asof, EMPTY_BODY))
        return FetchResult(FetchStatus.OK, url, body=body)

    def close(self):
        pass


@pytest.fixture(scope="session")
def repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


@pytest.fixture
def today() -> date:
    # Keep deterministic: a Monday after the July 4th 2023 holiday week
    return date(2023, 7, 10)


@pytest.fixture
def calendar(today: date) -> BusinessCalendar:
    return BusinessCalendar(today_fn=lambda: today)


@pytest.fixture
def catalog() -> CurveCatalog:
    return CurveCatalog()


@pytest.fixture
def store(tmp_path: Path):
    s = PointStore(tmp_path / "emma.duckdb")
    yield s
    s.close()


@pytest.fixture
def make_resolver(catalog, store, calendar):
    def _make(fetcher, **kwargs) -> CurveResolver:
        return CurveResolver(
            catalog=catalog,
            store=store,
            fetcher=fetcher,
            calendar=kwargs.pop("calendar", calendar),
            **kwargs,
        )

    return _make


@pytest.fixture
def treasury_body() -> str:
    # Points deliberately out of tenor order
    return envelope(("Treasury Yield Curve Rates", [(10, 3.81), (1, 5.40), (5, 4.13), (30, 3.93)]))
