from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, Optional

import pandas as pd

from .types import CurveSnapshot

LONG_COLUMNS = ["date", "curve_key", "tenor_yrs", "rate_dec"]


def snapshots_to_frame(snapshots: Iterable[CurveSnapshot]) -> pd.DataFrame:
    """Stack snapshots into one long frame: date, curve_key, tenor_yrs, rate_dec."""
    frames = [s.to_frame() for s in snapshots]
    if not frames:
        return pd.DataFrame(columns=LONG_COLUMNS)
    out = pd.concat(frames, ignore_index=True)
    out.sort_values(["curve_key", "date", "tenor_yrs"], inplace=True)
    out.reset_index(drop=True, inplace=True)
    return out


def pivot_curves(df: pd.DataFrame, value_col: str = "rate_dec") -> pd.DataFrame:
    """
    Convert long format into wide format:

        date | 1.0 | 2.0 | ... | 30.0

    - Removes timestamps (keeps YYYY-MM-DD)
    - Sorts with most recent date *on top*
    """
    if df.empty:
        return pd.DataFrame(columns=["date"])

    df = df.copy()
    df["date"] = pd.to_datetime(df["date"]).dt.date

    pivot = df.pivot(index="date", columns="tenor_yrs", values=value_col)
    pivot = pivot.sort_index(ascending=False)  # latest date first
    pivot = pivot.reset_index()
    pivot.columns.name = None

    return pivot


def export_curves_to_excel(
    frames: Dict[str, pd.DataFrame],
    out_dir: Path | str,
    stem: str = "emma_curves",
    stamp: Optional[str] = None,
) -> Path:
    """
    Write one sheet per curve (wide, latest date first) to
    <out_dir>/<stem>_<timestamp>.xlsx.

    frames maps curve_key -> long-format frame.
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    stamp = stamp or datetime.now().strftime("%Y%m%d_%H%M%S")
    out_path = out_dir / f"{stem}_{stamp}.xlsx"

    with pd.ExcelWriter(out_path, engine="openpyxl") as xw:
        if not frames:
            pd.DataFrame(columns=LONG_COLUMNS).to_excel(xw, sheet_name="EMPTY", index=False)
        for curve_key, df in frames.items():
            # Excel caps sheet names at 31 chars
            pivot_curves(df).to_excel(xw, sheet_name=str(curve_key)[:31], index=False)

    return out_path
