# src/emma_core/curves/resolver.py

"""
Cache-miss resolution for EMMA curves.

resolve(curve_id, date) returns the cached snapshot when one exists. On a miss
it walks backward through business days:

    CHECKING --miss--> FETCHING --points--> PERSISTING --> FOUND
        ^                  |
        +--previous bday---+  (nothing published)

    CHECKING / FETCHING --floor, cycle--> EXHAUSTED

An optional lookback cap limits how many business days are probed; once it
is spent the walk settles on the latest cached date instead of fetching on.

Only the date that actually has data gets point rows. Past dates that came
back empty are recorded as misses so a later walk can step over them without
another request.
"""

from __future__ import annotations

import enum
import logging
from datetime import date
from typing import List, Optional, Set

from .calendar import BusinessCalendar, as_date
from .catalog import CurveCatalog, CurveSpec
from .errors import NoDataAvailable, ResponseFormatError, TransportFailure
from .types import CurveSnapshot, ParsedPoint
from emma_core.io.fetcher import FetchStatus, RemoteFetcher
from emma_core.io.parser import ParsedEnvelope, parse_envelope
from emma_core.io.store import PointStore

logger = logging.getLogger(__name__)

DEFAULT_FLOOR_DATE = date(2000, 1, 1)


class WalkState(enum.Enum):
    CHECKING = "checking"
    FETCHING = "fetching"
    PERSISTING = "persisting"
    FOUND = "found"
    EXHAUSTED = "exhausted"


class CurveResolver:
    """
    Orchestrates catalog -> store -> fetcher -> parser -> store.

    All collaborators are passed in; the resolver keeps no state between calls
    beyond what the store holds.
    """

    def __init__(
        self,
        catalog: CurveCatalog,
        store: PointStore,
        fetcher: RemoteFetcher,
        calendar: BusinessCalendar,
        floor_date: date = DEFAULT_FLOOR_DATE,
        max_lookback: Optional[int] = None,
        store_sibling_series: bool = True,
    ) -> None:
        if max_lookback is not None and max_lookback < 1:
            raise ValueError(f"max_lookback must be >= 1, got {max_lookback}")
        self.catalog = catalog
        self.store = store
        self.fetcher = fetcher
        self.calendar = calendar
        self.floor_date = as_date(floor_date)
        self.max_lookback = int(max_lookback) if max_lookback is not None else None
        self.store_sibling_series = store_sibling_series

    def default_date(self) -> date:
        return self.calendar.previous_business_day(self.calendar.today())

    # ---------- public ----------

    def resolve(self, curve_id: str, asof=None) -> CurveSnapshot:
        """
        Snapshot for curve_id at asof, or at the most recent earlier business
        day with published data.

        Raises UnknownCurve, TransportFailure or NoDataAvailable.

        Repeat calls make no fetch only for dates before today: today and later
        are never recorded as empty, since they may still publish.
        """
        curve = self.catalog.lookup(curve_id)
        requested = as_date(asof) if asof is not None else self.default_date()

        points = self.store.read(curve.id, requested)
        if points:
            logger.debug("Cache hit for %s @ %s", curve.id, requested)
            return CurveSnapshot(curve.id, requested, points, from_cache=True)

        return self._walk(curve, requested)

    def most_recent_date(self, curve_id: str, asof=None) -> date:
        asof = asof if asof is not None else self.calendar.today()
        return self.resolve(curve_id, asof).date

    # ---------- backward walk ----------

    def _walk(self, curve: CurveSpec, requested: date) -> CurveSnapshot:
        today = self.calendar.today()
        current = requested
        seen: Set[date] = set()
        probes = 0
        envelope: Optional[ParsedEnvelope] = None
        chosen: List[ParsedPoint] = []
        from_cache = False
        reason = ""

        state = WalkState.CHECKING
        while state not in (WalkState.FOUND, WalkState.EXHAUSTED):
            logger.debug("%s walk: %s @ %s", curve.id, state.value, current)

            if state is WalkState.CHECKING:
                if current < self.floor_date:
                    reason = f"reached floor date {self.floor_date}"
                    state = WalkState.EXHAUSTED
                elif current in seen:
                    reason = f"calendar returned {current} twice"
                    state = WalkState.EXHAUSTED
                elif self.max_lookback is not None and probes >= self.max_lookback:
                    cached = self.store.most_recent_date_at_or_before(curve.id, current)
                    if cached is not None and cached >= self.floor_date:
                        logger.info(
                            "%s: lookback of %d spent, using cached %s",
                            curve.id, self.max_lookback, cached,
                        )
                        current = cached
                        from_cache = True
                        state = WalkState.FOUND
                    else:
                        reason = f"no data in {self.max_lookback} business day(s)"
                        state = WalkState.EXHAUSTED
                else:
                    seen.add(current)
                    probes += 1
                    if self.store.most_recent_date_at_or_before(curve.id, current) == current:
                        from_cache = True
                        state = WalkState.FOUND
                    elif self.store.is_known_empty(curve.id, current):
                        logger.debug("%s @ %s known empty, stepping back", curve.id, current)
                        current, state, reason = self._step_back(current)
                    else:
                        state = WalkState.FETCHING

            elif state is WalkState.FETCHING:
                envelope = self._fetch(curve, current)
                chosen = self._select_points(curve, envelope, current)
                if chosen:
                    state = WalkState.PERSISTING
                else:
                    logger.info("No %s curve published for %s", curve.id, current)
                    if current < today:
                        self.store.mark_empty(curve.id, current)
                    current, state, reason = self._step_back(current)

            elif state is WalkState.PERSISTING:
                self.store.write(curve.id, current, chosen)
                if self.store_sibling_series and envelope is not None:
                    self._write_siblings(curve, envelope, current)
                state = WalkState.FOUND

        if state is WalkState.EXHAUSTED:
            raise NoDataAvailable(
                f"No {curve.id} curve at or before {requested}: {reason}"
            )

        points = self.store.read(curve.id, current)
        if not points:
            raise NoDataAvailable(f"No {curve.id} points stored for {current}")
        if current != requested:
            logger.info("%s: requested %s, using %s", curve.id, requested, current)
        return CurveSnapshot(curve.id, current, points, from_cache=from_cache)

    def _step_back(self, current: date):
        prev = self.calendar.previous_business_day(current)
        if prev >= current:
            return current, WalkState.EXHAUSTED, f"calendar did not move back from {current}"
        return prev, WalkState.CHECKING, ""

    # ---------- fetch + parse ----------

    def _fetch(self, curve: CurveSpec, asof: date) -> ParsedEnvelope:
        result = self.fetcher.fetch(curve, asof)
        if result.status is FetchStatus.ERROR:
            raise TransportFailure(f"Fetch failed for {curve.id} @ {asof} ({result.url}): {result.error}")
        if result.status is FetchStatus.EMPTY:
            return ParsedEnvelope()
        return parse_envelope(result.body)

    def _select_points(self, curve: CurveSpec, envelope: ParsedEnvelope, asof: date) -> List[ParsedPoint]:
        """
        Points for this curve out of a possibly multi-series envelope.

        A lone series whose key does not match is still taken: the catalog, not
        the payload, names the curve. Series present but no usable points is a
        format error, never "nothing published".
        """
        if envelope.is_empty:
            return []

        matched = envelope.points_for(curve.series_id)
        if matched:
            return matched

        keys = envelope.series_keys()
        if not keys:
            raise ResponseFormatError(
                f"{curve.id} @ {asof}: {envelope.n_series} series but no usable points"
            )
        if envelope.n_series == 1:
            logger.warning(
                "%s @ %s: envelope series %r does not match, storing under %s",
                curve.id, asof, keys[0], curve.id,
            )
            return envelope.points
        raise ResponseFormatError(
            f"{curve.id} @ {asof}: none of the series {keys} matches {curve.series_id!r}"
        )

    def _write_siblings(self, curve: CurveSpec, envelope: ParsedEnvelope, asof: date) -> None:
        sibling_ids = {s.id for s in self.catalog.siblings(curve.id)}
        for key in envelope.series_keys():
            if key in sibling_ids:
                self.store.write(key, asof, envelope.points_for(key))
