"""
run_emma_curve.py

Command-line runner for EMMA curves.

Runs one of:
  - list the known curves (--list)
  - resolve a curve for a date, fetching and caching on a miss
  - dump cached history for a curve (--history), optionally to Excel (--export)

Usage (from repo root):
  python run_emma_curve.py --curve Treasury --date 2023-07-04
  python run_emma_curve.py --curve CAAA --history --start 2024-01-01 --export

Notes:
- Config defaults to config/app_config.yaml, then config/example_config.yaml.
- Exit code 0 on success, 1 on a bad config or any curve error.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from emma_core import AppConfig, EmmaCurves
from emma_core.curves import CurveError, export_curves_to_excel


def find_config(repo_root: Path, explicit: Optional[Path]) -> Optional[Path]:
    if explicit is not None:
        return explicit
    for name in ("app_config.yaml", "example_config.yaml"):
        p = repo_root / "config" / name
        if p.exists():
            return p
    return None


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Fetch and cache MSRB EMMA yield curves.")
    ap.add_argument("--config", default=None, type=Path, help="AppConfig YAML")
    ap.add_argument("--curve", default=None, help="Curve id, e.g. Treasury, CAAA, ICE")
    ap.add_argument("--date", default=None, help="Curve date (YYYY-MM-DD); default previous business day")
    ap.add_argument("--list", action="store_true", help="List known curves and exit")
    ap.add_argument("--history", action="store_true", help="Show cached history instead of resolving")
    ap.add_argument("--start", default=None, help="History start date")
    ap.add_argument("--end", default=None, help="History end date")
    ap.add_argument("--export", action="store_true", help="Write the result to an Excel workbook")
    ap.add_argument("--out-dir", default=None, type=Path, help="Export folder (default <store dir>/output)")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    repo_root = Path(__file__).resolve().parent
    cfg_path = find_config(repo_root, args.config)
    if cfg_path is not None:
        print(f"[INFO] Using config file: {cfg_path}")
        try:
            app_cfg = AppConfig.from_yaml(cfg_path)
        except (OSError, ValueError) as e:
            print("\n[ERROR] Bad config:", e)
            return 1
    else:
        print("[WARN] No config YAML found; using defaults.")
        app_cfg = AppConfig.default(repo_root)

    try:
        with EmmaCurves.from_config(app_cfg) as emma:
            if args.list:
                print(emma.describe().to_string(index=False))
                return 0

            if not args.curve:
                print("[ERROR] --curve is required (see --list)")
                return 1

            if args.history:
                df = emma.history(args.curve, args.start, args.end)
                print(f"[OK] {args.curve}: {df['date'].nunique() if not df.empty else 0} cached date(s)")
            else:
                snap = emma.snapshot(args.curve, args.date)
                src = "cache" if snap.from_cache else "EMMA"
                print(f"[OK] {snap.curve_id} @ {snap.date} ({len(snap.points)} points, from {src})")
                df = snap.to_frame()

            if not df.empty:
                print(df[["date", "tenor_yrs", "rate_dec"]].to_string(index=False))

            if args.export:
                out_dir = args.out_dir or app_cfg.output_root
                out_path = export_curves_to_excel({args.curve: df}, out_dir, stem=f"emma_{args.curve}")
                print(f"[OK] Wrote: {out_path}")

        return 0

    except CurveError as e:
        logging.getLogger(__name__).debug("curve error", exc_info=True)
        print("\n[ERROR]", e)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
