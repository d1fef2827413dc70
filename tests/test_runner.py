from __future__ import annotations

from datetime import date
from pathlib import Path

import run_emma_curve
from emma_core.curves.types import ParsedPoint
from emma_core.io.store import PointStore


def _cfg(tmp_path: Path) -> Path:
    cfg_dir = tmp_path / "config"
    cfg_dir.mkdir()
    p = cfg_dir / "app_config.yaml"
    p.write_text("store:\n  path: data/emma.duckdb\n", encoding="utf-8")
    return p


def test_list_curves(tmp_path, capsys):
    assert run_emma_curve.main(["--config", str(_cfg(tmp_path)), "--list"]) == 0
    out = capsys.readouterr().out
    assert "Treasury" in out
    assert "Bloomberg_CAAA" in out


def test_unknown_curve_exits_1(tmp_path, capsys):
    assert run_emma_curve.main(["--config", str(_cfg(tmp_path)), "--curve", "NOPE", "--date", "2023-06-30"]) == 1
    assert "[ERROR]" in capsys.readouterr().out


def test_missing_curve_argument(tmp_path, capsys):
    assert run_emma_curve.main(["--config", str(_cfg(tmp_path))]) == 1


def test_cached_curve_and_history_export(tmp_path, capsys):
    cfg = _cfg(tmp_path)
    with PointStore(tmp_path / "data" / "emma.duckdb") as s:
        s.write("ICE", date(2023, 6, 30), [ParsedPoint("ICE", 1.0, 3.0), ParsedPoint("ICE", 10.0, 2.5)])

    assert run_emma_curve.main(["--config", str(cfg), "--curve", "ICE", "--date", "2023-06-30"]) == 0
    assert "from cache" in capsys.readouterr().out

    out_dir = tmp_path / "xl"
    assert run_emma_curve.main(
        ["--config", str(cfg), "--curve", "ICE", "--history", "--export", "--out-dir", str(out_dir)]
    ) == 0
    assert "1 cached date(s)" in capsys.readouterr().out
    assert len(list(out_dir.glob("emma_ICE_*.xlsx"))) == 1


def test_bad_config_exits_1(tmp_path, capsys):
    cfg = _cfg(tmp_path)
    cfg.write_text("resolver:\n  max_lookback: 0\n", encoding="utf-8")

    assert run_emma_curve.main(["--config", str(cfg), "--list"]) == 1
    assert "[ERROR]" in capsys.readouterr().out


def test_missing_config_file_exits_1(tmp_path, capsys):
    assert run_emma_curve.main(["--config", str(tmp_path / "nope.yaml"), "--list"]) == 1
    assert "[ERROR]" in capsys.readouterr().out
