from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Tuple

import pandas as pd


@dataclass(frozen=True)
class CurvePoint:
    """
    A single point on a published EMMA curve.

    year: tenor in years (e.g. 1.0, 5.0, 30.0)
    rate: par coupon rate as a DECIMAL (e.g. 0.0325 = 3.25%)
    """
    year: float
    rate: float


@dataclass(frozen=True)
class ParsedPoint:
    """
    One point as it comes out of the response envelope.

    rate_pct stays in PERCENT units; scaling to a decimal happens on read.
    """
    series_key: str
    year: float
    rate_pct: float


@dataclass(frozen=True)
class CurveSnapshot:
    """
    The full set of points held for one (curve_id, date).

    from_cache is True when no fetch was needed to produce it.
    """

    curve_id: str
    date: date
    points: List[CurvePoint] = field(default_factory=list)
    from_cache: bool = False

    def __post_init__(self) -> None:
        if not self.points:
            raise ValueError("CurveSnapshot requires at least one point")

    @classmethod
    def from_pairs(
        cls,
        curve_id: str,
        asof: date,
        pairs: Iterable[Tuple[float, float]],
        from_cache: bool = False,
    ) -> "CurveSnapshot":
        pts = sorted((CurvePoint(float(t), float(r)) for t, r in pairs), key=lambda p: p.year)
        return cls(curve_id=curve_id, date=asof, points=pts, from_cache=from_cache)

    def pairs(self) -> List[Tuple[float, float]]:
        return [(p.year, p.rate) for p in self.points]

    def to_frame(self) -> pd.DataFrame:
        """
        Long-form frame in the usual curve-history shape:

            date, curve_key, tenor_yrs, rate_dec
        """
        return pd.DataFrame.from_records(
            [
                {
                    "date": self.date,
                    "curve_key": self.curve_id,
                    "tenor_yrs": p.year,
                    "rate_dec": p.rate,
                }
                for p in self.points
            ],
            columns=["date", "curve_key", "tenor_yrs", "rate_dec"],
        )
