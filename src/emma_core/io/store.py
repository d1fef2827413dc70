"""
store.py

Embedded, append-only archive of EMMA curve points (DuckDB).

Tables:
- curve(curve_id, date, year, rate)       PRIMARY KEY (curve_id, date, year)
    rate is stored in PERCENT, as published; read() divides by 100.
- curve_miss(curve_id, date, checked_at)  PRIMARY KEY (curve_id, date)
    past dates for which the source published nothing.

Rows are never updated or deleted. Each insert is a single-row statement in
autocommit mode, so a write is durable before write() returns.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, List, Optional, Union

import duckdb
import pandas as pd

from emma_core.curves.calendar import as_date
from emma_core.curves.errors import CurveStoreError, StoreWriteConflict
from emma_core.curves.types import CurvePoint, ParsedPoint

logger = logging.getLogger(__name__)

CURVE_TABLE = "curve"
MISS_TABLE = "curve_miss"

_DDL = (
    f"""
    CREATE TABLE IF NOT EXISTS {CURVE_TABLE} (
        curve_id TEXT NOT NULL,
        date     DATE NOT NULL,
        year     DOUBLE NOT NULL,
        rate     DOUBLE NOT NULL,
        PRIMARY KEY (curve_id, date, year)
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {MISS_TABLE} (
        curve_id   TEXT NOT NULL,
        date       DATE NOT NULL,
        checked_at TIMESTAMP,
        PRIMARY KEY (curve_id, date)
    )
    """,
)


class PointStore:
    """
    The store IS the cache: there is no in-memory layer on top of it.
    """

    def __init__(self, path: Union[str, Path] = ":memory:") -> None:
        self.path = str(path)
        if self.path != ":memory:":
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)

        try:
            self.con = duckdb.connect(self.path)
            for ddl in _DDL:
                self.con.execute(ddl)
        except duckdb.Error as exc:
            raise CurveStoreError(f"Could not open curve store at {self.path}: {exc}") from exc

    # ---------- context manager ----------

    def __enter__(self) -> "PointStore":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self.con.close()

    # ---------- reads ----------

    def read(self, curve_id: str, asof) -> List[CurvePoint]:
        """
        Points for (curve_id, asof), sorted by year, rate as a decimal.
        An empty list means nothing is cached.
        """
        rows = self._fetchall(
            f"SELECT year, rate FROM {CURVE_TABLE} WHERE curve_id = ? AND date = ? ORDER BY year",
            [curve_id, as_date(asof)],
        )
        return [CurvePoint(float(y), float(r) / 100.0) for y, r in rows]

    def most_recent_date_at_or_before(self, curve_id: str, asof) -> Optional[date]:
        rows = self._fetchall(
            f"SELECT max(date) FROM {CURVE_TABLE} WHERE curve_id = ? AND date <= ?",
            [curve_id, as_date(asof)],
        )
        latest = rows[0][0] if rows else None
        return as_date(latest) if latest is not None else None

    def dates(self, curve_id: str) -> List[date]:
        rows = self._fetchall(
            f"SELECT DISTINCT date FROM {CURVE_TABLE} WHERE curve_id = ? ORDER BY date",
            [curve_id],
        )
        return [as_date(r[0]) for r in rows]

    def is_known_empty(self, curve_id: str, asof) -> bool:
        rows = self._fetchall(
            f"SELECT count(*) FROM {MISS_TABLE} WHERE curve_id = ? AND date = ?",
            [curve_id, as_date(asof)],
        )
        return bool(rows and rows[0][0])

    def history(self, curve_id: str, start=None, end=None) -> pd.DataFrame:
        """
        Long-form history for one curve:

            date, curve_key, tenor_yrs, rate_dec
        """
        sql = (
            f"SELECT date, curve_id AS curve_key, year AS tenor_yrs, rate / 100.0 AS rate_dec "
            f"FROM {CURVE_TABLE} WHERE curve_id = ?"
        )
        params: list = [curve_id]
        if start is not None:
            sql += " AND date >= ?"
            params.append(as_date(start))
        if end is not None:
            sql += " AND date <= ?"
            params.append(as_date(end))
        sql += " ORDER BY date, year"

        try:
            df = self.con.execute(sql, params).df()
        except duckdb.Error as exc:
            raise CurveStoreError(f"History query failed for {curve_id}: {exc}") from exc

        if not df.empty:
            df["date"] = pd.to_datetime(df["date"]).dt.date
        return df

    # ---------- writes ----------

    def insert_point(self, curve_id: str, asof: date, year: float, rate_pct: float) -> None:
        try:
            self.con.execute(
                f"INSERT INTO {CURVE_TABLE} (curve_id, date, year, rate) VALUES (?, ?, ?, ?)",
                [curve_id, asof, float(year), float(rate_pct)],
            )
        except duckdb.ConstraintException as exc:
            raise StoreWriteConflict(f"{curve_id} {asof} year={year} already stored") from exc
        except duckdb.Error as exc:
            raise CurveStoreError(f"Insert failed for {curve_id} {asof}: {exc}") from exc

    def write(self, curve_id: str, asof, points: Iterable[ParsedPoint]) -> int:
        """
        Insert each point under curve_id. Already-present (curve_id, date, year)
        keys are skipped, so a retry after a partial write is safe.

        Returns the number of rows actually added.
        """
        d = as_date(asof)
        added = 0
        skipped = 0
        for p in points:
            try:
                self.insert_point(curve_id, d, p.year, p.rate_pct)
            except StoreWriteConflict:
                skipped += 1
                continue
            added += 1

        if skipped:
            logger.debug("Skipped %d existing row(s) for %s @ %s", skipped, curve_id, d)
        logger.info("Stored %d point(s) for %s @ %s", added, curve_id, d)
        return added

    def mark_empty(self, curve_id: str, asof) -> None:
        try:
            self.con.execute(
                f"INSERT OR IGNORE INTO {MISS_TABLE} (curve_id, date, checked_at) VALUES (?, ?, ?)",
                [curve_id, as_date(asof), datetime.now()],
            )
        except duckdb.Error as exc:
            raise CurveStoreError(f"Could not record miss for {curve_id} {asof}: {exc}") from exc

    # ---------- helpers ----------

    def _fetchall(self, sql: str, params: list) -> list:
        try:
            return self.con.execute(sql, params).fetchall()
        except duckdb.Error as exc:
            raise CurveStoreError(f"Query failed: {exc}") from exc
