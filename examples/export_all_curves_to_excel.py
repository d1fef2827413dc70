from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Dict, Optional

import pandas as pd

from emma_core import AppConfig, EmmaCurves
from emma_core.curves import CurveError, export_curves_to_excel


def export_all_curves_to_excel(
    *,
    cfg_path: Path,
    out_dir: Path,
    asof: Optional[date] = None,
) -> Path:
    """
    Resolve every catalog curve for asof (default: previous business day) and
    write one sheet per curve. Curves that fail are reported and skipped.
    """
    app_cfg = AppConfig.from_yaml(cfg_path)
    frames: Dict[str, pd.DataFrame] = {}

    with EmmaCurves.from_config(app_cfg) as emma:
        for curve_id in emma.ids():
            try:
                snap = emma.snapshot(curve_id, asof)
            except CurveError as e:
                print(f"[WARN] {curve_id}: {e}")
                continue
            frames[curve_id] = snap.to_frame()
            print(f"[OK] {curve_id} @ {snap.date}: {len(snap.points)} points")

    return export_curves_to_excel(frames, out_dir, stem="emma_all_curves")


if __name__ == "__main__":
    repo_root = Path(__file__).resolve().parents[1]
    cfg_path = repo_root / "config" / "example_config.yaml"
    out_dir = repo_root / "data" / "emma" / "output"

    out = export_all_curves_to_excel(cfg_path=cfg_path, out_dir=out_dir)
    print(f"Wrote: {out}")
