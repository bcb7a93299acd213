"""Error taxonomy for upstream fetches and the aggregation pipeline."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class FetchErrorKind(str, Enum):
    INVALID_REQUEST = "invalid_request"
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"
    UPSTREAM_ERROR = "upstream_error"
    INVALID_RESPONSE = "invalid_response"


class AggregationErrorKind(str, Enum):
    INVALID_USERNAME = "invalid_username"
    USER_NOT_FOUND = "user_not_found"
    FETCH_FAILED = "fetch_failed"
    INVALID_RESPONSE = "invalid_response"
    NO_REPOSITORIES = "no_repositories"
    NO_LANGUAGE_DATA = "no_language_data"


class GitHubLanguagesError(Exception):
    """Base exception for language stats failures."""


class FetchError(GitHubLanguagesError):
    """Raised when a single outbound request fails.

    ``status_code`` and ``body`` are only set for ``UPSTREAM_ERROR``; the raw
    body is kept so callers can report what GitHub actually said.
    """

    def __init__(
        self,
        kind: FetchErrorKind,
        message: str,
        status_code: Optional[int] = None,
        body: str = "",
    ):
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code
        self.body = body

    @property
    def is_rate_limited(self) -> bool:
        if self.kind is not FetchErrorKind.UPSTREAM_ERROR:
            return False
        return self.status_code in (403, 429) and "rate limit" in self.body.lower()

    def __str__(self) -> str:
        message = super().__str__()
        if self.kind is FetchErrorKind.UPSTREAM_ERROR:
            return f"API error {self.status_code}: {message}"
        return message


class AggregationError(GitHubLanguagesError):
    """Raised when a request ends without usable language data."""

    def __init__(
        self,
        kind: AggregationErrorKind,
        message: str,
        cause: Optional[FetchError] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.cause = cause
