"""
Configuration loading for emma_core.
"""

from .loader import AppConfig, CalendarConfig, FetchConfig, ResolverConfig, StoreConfig

__all__ = ["AppConfig", "CalendarConfig", "FetchConfig", "ResolverConfig", "StoreConfig"]
