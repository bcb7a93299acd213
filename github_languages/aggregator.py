# aggregator.py

from __future__ import annotations

import logging
from collections import Counter
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Iterable, Optional

from .errors import AggregationError, AggregationErrorKind, FetchError, FetchErrorKind
from .fetcher import GitHubFetcher
from .repositories import RepositoryRef

logger = logging.getLogger(__name__)

LanguageByteMap = Dict[str, int]


def parse_language_breakdown(data, url: str = "") -> LanguageByteMap:
    """Validate a /languages payload: language name -> non-negative byte count."""
    if not isinstance(data, dict):
        raise FetchError(FetchErrorKind.INVALID_RESPONSE, f"expected a JSON object from {url}")
    breakdown = {}
    for lang, count in data.items():
        if not isinstance(lang, str) or isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise FetchError(
                FetchErrorKind.INVALID_RESPONSE, f"invalid byte count {count!r} for {lang!r} from {url}"
            )
        if count:
            breakdown[lang] = count
    return breakdown


def fetch_repo_languages(fetcher: GitHubFetcher, ref: RepositoryRef) -> LanguageByteMap:
    return parse_language_breakdown(fetcher.fetch_json(ref.languages_url), ref.languages_url)


def aggregate(
    fetcher: GitHubFetcher, refs: Iterable[RepositoryRef], max_workers: Optional[int] = None
) -> LanguageByteMap:
    """Sum language bytes across repositories, skipping any that fail.

    Workers only fetch and parse; merging happens on the calling thread as
    results complete.
    """
    refs = list(refs)
    workers = max(1, max_workers or fetcher.settings.max_workers)
    totals: Counter = Counter()
    skipped = 0

    if refs:
        with ThreadPoolExecutor(max_workers=min(workers, len(refs))) as executor:
            future_to_ref = {executor.submit(fetch_repo_languages, fetcher, ref): ref for ref in refs}
            for future in as_completed(future_to_ref):
                ref = future_to_ref[future]
                try:
                    breakdown = future.result()
                except FetchError as exc:
                    skipped += 1
                    logger.warning("Error fetching languages for %s: %s", ref.name or ref.languages_url, exc)
                    continue
                totals.update(breakdown)

    if skipped:
        logger.warning("Skipped %d of %d repositories", skipped, len(refs))

    merged = {lang: count for lang, count in totals.items() if count > 0}
    if not merged:
        raise AggregationError(AggregationErrorKind.NO_LANGUAGE_DATA, "no language data found in repositories")
    return merged
