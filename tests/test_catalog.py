from __future__ import annotations

import pytest

from emma_core.curves.catalog import EMMA_CURVES, CurveCatalog, CurveSpec
from emma_core.curves.errors import UnknownCurve


def test_default_table(catalog):
    assert catalog.ids() == ["CAAA", "BVMB", "BondWave", "ICE", "AAA", "MBIS", "TradeWeb", "Treasury"]
    assert len(catalog) == len(EMMA_CURVES)
    assert "Treasury" in catalog
    assert catalog.contains("ICE")
    assert not catalog.contains("UST")


def test_lookup_unknown_raises(catalog):
    with pytest.raises(UnknownCurve) as exc_info:
        catalog.lookup("UST")
    assert "UST" in str(exc_info.value)
    # also usable where a KeyError is expected
    with pytest.raises(KeyError):
        catalog.lookup("UST")


def test_urls_and_keys(catalog):
    assert catalog.url("Treasury") == (
        "https://emma.msrb.org/TreasuryData/GetTreasuryDailyYieldCurve?curveDate="
    )
    assert catalog.url("CAAA") == catalog.url("BVMB")
    assert catalog.help_url("AAA") == (
        "https://emma.msrb.org/ToolsAndResources/IHSMarkitYieldCurve?daily=True"
    )
    assert catalog.source("AAA") == "IHSMarkit"
    assert catalog.lookup("CAAA").key == "Bloomberg_CAAA"


def test_siblings_share_a_source(catalog):
    assert [s.id for s in catalog.siblings("CAAA")] == ["BVMB"]
    assert catalog.siblings("Treasury") == []


def test_with_extra_rows_and_base_url():
    extra = CurveSpec("Example", "EXMPL", "Example AAA Curve.")
    cat = CurveCatalog.with_extra([extra], base_url="http://localhost:8080/")

    assert cat.url("Treasury").startswith("http://localhost:8080/TreasuryData/")
    assert cat.url("EXMPL") == "https://emma.msrb.org/ExampleData/GetExampleDailyYieldCurve?curveDate="
    assert cat.by_series_key("EXMPL") is extra


def test_duplicate_ids_rejected():
    with pytest.raises(ValueError):
        CurveCatalog(list(EMMA_CURVES) + [CurveSpec("Other", "ICE", "dup")])
