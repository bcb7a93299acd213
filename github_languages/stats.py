# stats.py

from __future__ import annotations

import logging
from typing import List, Optional

from .aggregator import aggregate
from .config import Settings
from .fetcher import GitHubFetcher
from .normalizer import LanguageStat, normalize
from .repositories import list_repositories

logger = logging.getLogger(__name__)


def get_language_stats(
    username: str,
    fetcher: Optional[GitHubFetcher] = None,
    settings: Optional[Settings] = None,
    include_forks: bool = True,
) -> List[LanguageStat]:
    """Run the full pipeline: enumerate, aggregate, normalize.

    Raises AggregationError for every terminal outcome; per-repository
    failures are logged and skipped inside ``aggregate``.
    """
    if fetcher is None:
        fetcher = GitHubFetcher(settings or Settings.from_env())
    refs = list_repositories(fetcher, username, include_forks=include_forks)
    byte_map = aggregate(fetcher, refs)
    stats = normalize(byte_map)
    logger.info("Computed %d language stats for %s", len(stats), username.strip())
    return stats
