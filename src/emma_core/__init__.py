"""
emma_core: MSRB EMMA yield curves, cached in a local DuckDB archive.
"""

from .api import EmmaCurves
from .config import AppConfig

__all__ = ["EmmaCurves", "AppConfig"]
