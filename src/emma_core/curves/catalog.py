# src/emma_core/curves/catalog.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .errors import UnknownCurve

EMMA_BASE_URL = "https://emma.msrb.org/"
EMMA_ENUM_HELP = "https://emma.msrb.org/ToolsAndResources/MarketIndicators"


@dataclass(frozen=True)
class CurveSpec:
    """
    One row of the EMMA curve table.

    source:    EMMA data source, also used to build the fetch URL (e.g. "Bloomberg")
    id:        curve identifier used by callers and as the store key (e.g. "CAAA")
    name:      short display name
    description: long description shown as help text
    base_url:  EMMA root the URL templates hang off
    """
    source: str
    id: str
    name: str
    description: str = ""
    base_url: str = EMMA_BASE_URL

    @property
    def key(self) -> str:
        """Composite Source_Id key, e.g. 'Bloomberg_CAAA'."""
        return f"{self.source}_{self.id}"

    @property
    def series_id(self) -> str:
        """Series Id expected in the response envelope."""
        return self.id

    @property
    def url_template(self) -> str:
        # Date is appended as MM/DD/YYYY by the fetcher.
        return f"{self.base_url}{self.source}Data/Get{self.source}DailyYieldCurve?curveDate="

    @property
    def help_url(self) -> str:
        return f"{self.base_url}ToolsAndResources/{self.source}YieldCurve?daily=True"


# Assumes id is unique across sources.
EMMA_CURVES: tuple[CurveSpec, ...] = (
    CurveSpec(
        "Bloomberg", "CAAA", "BVAL® AAA Callable Municipal Curve.",
        "The BVAL® AAA Municipal Curves use dynamic real-time trades and contributed "
        "sources to reflect movement in the municipal market.",
    ),
    CurveSpec(
        "Bloomberg", "BVMB", "BVAL® AAA Municipal Curve.",
        "The BVAL® AAA Municipal Curves use dynamic real-time trades and contributed "
        "sources to reflect movement in the municipal market.",
    ),
    CurveSpec(
        "BondWave", "BondWave", "BondWave AA QCurve.",
        "The BondWave AA QCurve is a quantitatively derived yield curve built from "
        "executed trades offering full data transparency.",
    ),
    CurveSpec(
        "ICE", "ICE", "ICE US Municipal AAA Curve.",
        "The ICE US Municipal AAA Yield Curve is produced continuously and used daily "
        "to apply intraday and end-of-day market moves to the majority of the "
        "investment grade municipal bond universe.",
    ),
    CurveSpec(
        "IHSMarkit", "AAA", "IHS Markit Municipal Bond AAA Curve.",
        "The IHS Markit Municipal Bond AAA Curve is a tax-exempt yield curve that "
        "consists of 5% General Obligation AAA debt, callable after 10 years.",
    ),
    CurveSpec(
        "MBIS", "MBIS", "MBIS AAA Municipal Curve.",
        "The MBIS Municipal Benchmark Curve is a tax-exempt investment grade yield "
        "curve that is valued directly against pre- and post-trade market data "
        "provided by the MSRB.",
    ),
    CurveSpec(
        "TradeWeb", "TradeWeb", "Tradeweb AAA Municipal Yield Curve.",
        "Tradeweb's Ai-Price for Municipal Bonds prices approximately one million "
        "municipal bonds at or near traded prices using MSRB and Tradeweb data.",
    ),
    CurveSpec(
        "Treasury", "Treasury", "Treasury Yield Curve Rates.",
        'U.S. Treasury Yield Curve Rates are commonly referred to as "Constant '
        'Maturity Treasury" rates, or CMTs.',
    ),
)


class CurveCatalog:
    """
    Closed, read-only set of known curves, keyed by id.
    """

    def __init__(self, specs: Iterable[CurveSpec] = EMMA_CURVES) -> None:
        self._by_id: Dict[str, CurveSpec] = {}
        for spec in specs:
            if spec.id in self._by_id:
                raise ValueError(f"Duplicate curve id in catalog: {spec.id}")
            self._by_id[spec.id] = spec

    @classmethod
    def with_extra(
        cls,
        extra: Iterable[CurveSpec] = (),
        base_url: Optional[str] = None,
    ) -> "CurveCatalog":
        """
        Default table plus extra rows; base_url (if given) replaces the EMMA root
        on the default rows.
        """
        rows: List[CurveSpec] = []
        for spec in EMMA_CURVES:
            if base_url:
                spec = CurveSpec(spec.source, spec.id, spec.name, spec.description, base_url)
            rows.append(spec)
        rows.extend(extra)
        return cls(rows)

    def __contains__(self, curve_id: object) -> bool:
        return curve_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)

    def contains(self, curve_id: str) -> bool:
        return curve_id in self._by_id

    def lookup(self, curve_id: str) -> CurveSpec:
        try:
            return self._by_id[curve_id]
        except (KeyError, TypeError):
            raise UnknownCurve(curve_id) from None

    def ids(self) -> List[str]:
        return list(self._by_id)

    def specs(self) -> List[CurveSpec]:
        return list(self._by_id.values())

    def source(self, curve_id: str) -> str:
        return self.lookup(curve_id).source

    def url(self, curve_id: str) -> str:
        return self.lookup(curve_id).url_template

    def help_url(self, curve_id: str) -> str:
        return self.lookup(curve_id).help_url

    def siblings(self, curve_id: str) -> List[CurveSpec]:
        """Other curves served by the same source (and so the same URL)."""
        spec = self.lookup(curve_id)
        return [s for s in self._by_id.values() if s.source == spec.source and s.id != spec.id]

    def by_series_key(self, series_key: str) -> Optional[CurveSpec]:
        return self._by_id.get(series_key)
