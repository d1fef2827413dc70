"""
parser.py

Decode the EMMA daily yield curve envelope:

    {"Series": [{"Id": "CAAA ...", "Points": [{"X": "1", "Y": "2.903"}, ...]}, ...]}

into flat ParsedPoint rows. Rates stay in percent.

Dependency contract:
- Allowed imports: standard library, emma_core.curves.types/errors
- Forbidden imports: store, fetcher, resolver
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any, List, Optional

from emma_core.curves.errors import ResponseFormatError
from emma_core.curves.types import ParsedPoint

logger = logging.getLogger(__name__)


def canonical_series_key(raw_id: Any) -> str:
    """
    'ABC 10Y Curve' -> 'ABC'. Only the part before the first space is the key.
    """
    s = str(raw_id or "").strip()
    return s.split(" ", 1)[0]


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        out = float(str(value).strip())
    except ValueError:
        return None
    if math.isnan(out) or math.isinf(out):
        return None
    return out


@dataclass
class ParsedEnvelope:
    points: List[ParsedPoint] = field(default_factory=list)
    n_series: int = 0

    @property
    def is_empty(self) -> bool:
        return self.n_series == 0

    def series_keys(self) -> List[str]:
        keys: List[str] = []
        for p in self.points:
            if p.series_key not in keys:
                keys.append(p.series_key)
        return keys

    def points_for(self, series_key: str) -> List[ParsedPoint]:
        return [p for p in self.points if p.series_key == series_key]


def parse_envelope(text: Optional[str]) -> ParsedEnvelope:
    """
    Parse a raw response body.

    A blank body or a zero-length Series list means "nothing published for this
    date" and comes back as an empty envelope, not an error.
    """
    if text is None or not str(text).strip():
        return ParsedEnvelope()

    try:
        data = json.loads(text)
    except ValueError as exc:
        raise ResponseFormatError(f"Response is not valid JSON: {exc}") from exc

    if not isinstance(data, dict) or "Series" not in data:
        raise ResponseFormatError("Response has no 'Series' list")

    series_list = data.get("Series") or []
    if not isinstance(series_list, list):
        raise ResponseFormatError("'Series' is not a list")

    out = ParsedEnvelope(n_series=len(series_list))

    for series in series_list:
        if not isinstance(series, dict):
            raise ResponseFormatError(f"Series entry is not an object: {series!r}")

        key = canonical_series_key(series.get("Id"))
        raw_points = series.get("Points") or []
        if not isinstance(raw_points, list):
            raise ResponseFormatError(f"'Points' for series {key!r} is not a list")

        dropped = 0
        for pt in raw_points:
            if not isinstance(pt, dict):
                dropped += 1
                continue
            year = _to_float(pt.get("X"))
            rate = _to_float(pt.get("Y"))
            if year is None or rate is None or year < 0:
                dropped += 1
                continue
            out.points.append(ParsedPoint(series_key=key, year=year, rate_pct=rate))

        if dropped:
            logger.warning("Dropped %d unusable point(s) from series %r", dropped, key)

    return out
