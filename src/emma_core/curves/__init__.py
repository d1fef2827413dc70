"""
Curve catalog, business calendar, and cache-miss resolution for emma_core.
"""

from .types import CurvePoint, CurveSnapshot, ParsedPoint
from .catalog import EMMA_CURVES, CurveCatalog, CurveSpec
from .calendar import BusinessCalendar, as_date
from .errors import (
    CurveError,
    CurveStoreError,
    NoDataAvailable,
    ResponseFormatError,
    StoreWriteConflict,
    TransportFailure,
    UnknownCurve,
)
from .resolver import CurveResolver, WalkState
from .export import export_curves_to_excel, pivot_curves, snapshots_to_frame


__all__ = [
    # basic curve types
    "CurvePoint",
    "CurveSnapshot",
    "ParsedPoint",

    # catalog + calendar
    "EMMA_CURVES",
    "CurveCatalog",
    "CurveSpec",
    "BusinessCalendar",
    "as_date",

    # errors
    "CurveError",
    "CurveStoreError",
    "NoDataAvailable",
    "ResponseFormatError",
    "StoreWriteConflict",
    "TransportFailure",
    "UnknownCurve",

    # resolution
    "CurveResolver",
    "WalkState",

    # exports
    "export_curves_to_excel",
    "pivot_curves",
    "snapshots_to_frame",
]
