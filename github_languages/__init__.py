"""Aggregate a GitHub user's language usage across their public repositories."""

from .config import Settings
from .errors import AggregationError, AggregationErrorKind, FetchError, FetchErrorKind
from .normalizer import LanguageStat
from .stats import get_language_stats

__all__ = [
    "AggregationError",
    "AggregationErrorKind",
    "FetchError",
    "FetchErrorKind",
    "LanguageStat",
    "Settings",
    "get_language_stats",
]
