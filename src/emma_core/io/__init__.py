"""
Input/output helpers for emma_core: remote fetch, envelope parsing, DuckDB store.
"""

from .fetcher import FetchResult, FetchStatus, RemoteFetcher, build_url
from .parser import ParsedEnvelope, canonical_series_key, parse_envelope
from .store import PointStore

__all__ = [
    "FetchResult",
    "FetchStatus",
    "RemoteFetcher",
    "build_url",
    "ParsedEnvelope",
    "canonical_series_key",
    "parse_envelope",
    "PointStore",
]
