# repositories.py

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List
from urllib.parse import quote

from .errors import AggregationError, AggregationErrorKind, FetchError, FetchErrorKind
from .fetcher import GitHubFetcher

logger = logging.getLogger(__name__)

# GitHub logins: alphanumerics and single inner hyphens, at most 39 chars
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9]|-(?=[A-Za-z0-9])){0,38}$")


@dataclass(frozen=True)
class RepositoryRef:
    languages_url: str
    name: str = ""
    fork: bool = False


def validate_username(username: str) -> str:
    username = (username or "").strip()
    if not USERNAME_PATTERN.match(username):
        raise AggregationError(
            AggregationErrorKind.INVALID_USERNAME, f"invalid GitHub username: {username!r}"
        )
    return username


def repositories_url(fetcher: GitHubFetcher, username: str) -> str:
    settings = fetcher.settings
    return (
        f"{settings.api_url}/users/{quote(username)}/repos"
        f"?per_page={settings.per_page}&type=owner&sort=updated"
    )


def parse_repositories(records: list, include_forks: bool = True) -> List[RepositoryRef]:
    """Keep records exposing a languages_url; anything else contributes nothing."""
    refs = []
    for record in records:
        if not isinstance(record, dict):
            continue
        url = record.get("languages_url")
        if not url or not isinstance(url, str):
            continue
        fork = bool(record.get("fork"))
        if fork and not include_forks:
            continue
        refs.append(RepositoryRef(languages_url=url, name=str(record.get("name") or ""), fork=fork))
    return refs


def list_repositories(
    fetcher: GitHubFetcher, username: str, include_forks: bool = True
) -> List[RepositoryRef]:
    """Resolve a username to the first page of their repositories.

    Only one page is requested, so users with more repositories than the
    page size are under-counted.
    """
    username = validate_username(username)
    try:
        records = fetcher.fetch_json(repositories_url(fetcher, username))
    except FetchError as exc:
        if exc.kind is FetchErrorKind.UPSTREAM_ERROR and exc.status_code == 404:
            raise AggregationError(
                AggregationErrorKind.USER_NOT_FOUND, f"GitHub user {username} not found", cause=exc
            ) from exc
        if exc.kind is FetchErrorKind.INVALID_RESPONSE:
            raise AggregationError(
                AggregationErrorKind.INVALID_RESPONSE, f"failed to parse repository data: {exc}", cause=exc
            ) from exc
        raise AggregationError(
            AggregationErrorKind.FETCH_FAILED, f"failed to fetch repositories: {exc}", cause=exc
        ) from exc

    if not isinstance(records, list):
        raise AggregationError(
            AggregationErrorKind.INVALID_RESPONSE, "failed to parse repository data: expected a list"
        )
    if not records:
        raise AggregationError(
            AggregationErrorKind.NO_REPOSITORIES, f"no repositories found for user {username}"
        )

    refs = parse_repositories(records, include_forks=include_forks)
    logger.info("Found %d repositories for %s (%d with language data)", len(records), username, len(refs))
    return refs
