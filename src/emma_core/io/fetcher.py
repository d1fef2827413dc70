"""
fetcher.py

Remote fetch of one EMMA curve payload per (curve, date).

The fetcher never raises for transport problems: it hands back a FetchResult
tagged OK / EMPTY / ERROR and the resolver branches on the tag.
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from datetime import date
from typing import Dict, Optional

import requests

from emma_core.curves.calendar import as_date
from emma_core.curves.catalog import CurveSpec

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "emma-curve-core",
}


class FetchStatus(enum.Enum):
    OK = "ok"
    EMPTY = "empty"
    ERROR = "error"


@dataclass(frozen=True)
class FetchResult:
    status: FetchStatus
    url: str
    body: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.OK


def build_url(template: str, asof) -> str:
    """Append the curve date as MM/DD/YYYY, e.g. '...?curveDate=06/30/2023'."""
    return template + as_date(asof).strftime("%m/%d/%Y")


class RemoteFetcher:
    """
    Blocking HTTP fetcher built on a requests.Session.

    timeout bounds each attempt; retries > 0 re-issues the request after a
    backoff**i sleep when the transport fails.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        retries: int = 0,
        backoff: float = 2.0,
        headers: Optional[Dict[str, str]] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout = timeout
        self.retries = max(0, int(retries))
        self.backoff = backoff
        self.headers = dict(DEFAULT_HEADERS if headers is None else headers)
        self.session = session or requests.Session()

    def fetch(self, curve: CurveSpec, asof: date) -> FetchResult:
        url = build_url(curve.url_template, asof)
        return self.fetch_url(url)

    def fetch_url(self, url: str) -> FetchResult:
        last_err: Optional[str] = None

        for attempt in range(self.retries + 1):
            if attempt:
                time.sleep(self.backoff ** (attempt - 1))
            try:
                logger.info("GET %s (attempt %d)", url, attempt + 1)
                r = self.session.get(url, timeout=self.timeout, headers=self.headers)
                r.raise_for_status()
            except requests.RequestException as exc:
                last_err = f"{type(exc).__name__}: {exc}"
                logger.warning("Fetch failed for %s: %s", url, last_err)
                continue

            body = r.text or ""
            if not body.strip():
                return FetchResult(FetchStatus.EMPTY, url)
            return FetchResult(FetchStatus.OK, url, body=body)

        return FetchResult(FetchStatus.ERROR, url, error=last_err)

    def close(self) -> None:
        self.session.close()
