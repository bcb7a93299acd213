# fetcher.py

from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.request
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from .config import Settings
from .errors import FetchError, FetchErrorKind

logger = logging.getLogger(__name__)


class GitHubFetcher:
    """Issues single, time-bounded GET requests against the GitHub REST API."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.headers = self._build_headers(self.settings)

    @staticmethod
    def _build_headers(settings: Settings) -> Dict[str, str]:
        headers = {
            "User-Agent": settings.user_agent,
            "Accept": "application/vnd.github+json",
        }
        if settings.github_token:
            headers["Authorization"] = f"token {settings.github_token}"
        return headers

    def _build_request(self, url: str) -> urllib.request.Request:
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise FetchError(FetchErrorKind.INVALID_REQUEST, f"invalid request URL: {url!r}")
        try:
            parsed.port
            return urllib.request.Request(url, headers=self.headers)
        except ValueError as exc:
            raise FetchError(FetchErrorKind.INVALID_REQUEST, f"failed to create request: {exc}") from exc

    def fetch(self, url: str) -> bytes:
        """Return the raw body of a 2xx response, or raise FetchError."""
        req = self._build_request(url)
        logger.debug("GET %s", url)
        try:
            with urllib.request.urlopen(req, timeout=self.settings.timeout) as resp:
                return resp.read()
        except urllib.error.HTTPError as exc:
            body = _read_error_body(exc)
            raise FetchError(
                FetchErrorKind.UPSTREAM_ERROR, body or str(exc.reason), status_code=exc.code, body=body
            ) from exc
        except urllib.error.URLError as exc:
            if isinstance(exc.reason, TimeoutError):
                raise FetchError(FetchErrorKind.TIMEOUT, f"request to {url} timed out") from exc
            raise FetchError(FetchErrorKind.NETWORK_ERROR, f"request failed: {exc.reason}") from exc
        except TimeoutError as exc:
            raise FetchError(FetchErrorKind.TIMEOUT, f"request to {url} timed out") from exc
        except (http.client.InvalidURL, ValueError) as exc:
            # Bad ports or characters http.client cannot put on the request line
            raise FetchError(FetchErrorKind.INVALID_REQUEST, f"invalid request URL {url!r}: {exc}") from exc
        except (OSError, http.client.HTTPException) as exc:
            raise FetchError(FetchErrorKind.NETWORK_ERROR, f"failed to read response: {exc}") from exc

    def fetch_json(self, url: str) -> Any:
        body = self.fetch(url)
        try:
            return json.loads(body)
        except ValueError as exc:
            raise FetchError(FetchErrorKind.INVALID_RESPONSE, f"invalid JSON from {url}: {exc}") from exc


def _read_error_body(exc: urllib.error.HTTPError) -> str:
    try:
        return exc.read().decode("utf-8", errors="replace")
    except (OSError, http.client.HTTPException):
        return ""
    finally:
        exc.close()
