"""
Error kinds raised while resolving EMMA curves.

UnknownCurve and NoDataAvailable reach the caller as-is; TransportFailure
covers both the HTTP request and an undecodable payload; StoreWriteConflict
never leaves the store.
"""

from __future__ import annotations


class CurveError(Exception):
    """Base class for every curve resolution failure."""


class UnknownCurve(CurveError, KeyError):
    def __init__(self, curve_id: str) -> None:
        super().__init__(curve_id)
        self.curve_id = curve_id

    def __str__(self) -> str:
        return f"Unknown curve id: {self.curve_id!r}"


class TransportFailure(CurveError):
    """The remote fetch failed (network error, HTTP status, timeout)."""


class ResponseFormatError(TransportFailure):
    """The remote payload could not be decoded as a curve envelope."""


class NoDataAvailable(CurveError):
    """The backward walk ended without finding a published curve."""


class StoreWriteConflict(CurveError):
    """A (curve_id, date, year) row already exists."""


class CurveStoreError(CurveError):
    """Any other failure of the embedded store."""
