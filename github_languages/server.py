# server.py

from __future__ import annotations

import json
import logging
from functools import lru_cache
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Optional
from urllib.parse import parse_qs, urlparse

from .config import Settings
from .errors import AggregationError, AggregationErrorKind
from .fetcher import GitHubFetcher
from .stats import get_language_stats

logger = logging.getLogger(__name__)

ROUTES = frozenset({"/languages", "/api/languages"})
RATE_LIMIT_INFO = "GitHub API rate limits apply. Add GITHUB_TOKEN for higher limits."

ERROR_STATUS = {
    AggregationErrorKind.INVALID_USERNAME: HTTPStatus.BAD_REQUEST,
    AggregationErrorKind.USER_NOT_FOUND: HTTPStatus.NOT_FOUND,
    AggregationErrorKind.NO_REPOSITORIES: HTTPStatus.NOT_FOUND,
    AggregationErrorKind.NO_LANGUAGE_DATA: HTTPStatus.NOT_FOUND,
    AggregationErrorKind.FETCH_FAILED: HTTPStatus.BAD_GATEWAY,
    AggregationErrorKind.INVALID_RESPONSE: HTTPStatus.BAD_GATEWAY,
}


@lru_cache(maxsize=1)
def default_settings() -> Settings:
    return Settings.from_env()


def parse_bool(value: str, default: bool = True) -> bool:
    value = value.strip().lower()
    if value in ("0", "false", "no", "off"):
        return False
    if value in ("1", "true", "yes", "on"):
        return True
    return default


class LanguagesHandler(BaseHTTPRequestHandler):
    """GET /languages?username=<name> -> ranked JSON language stats."""

    settings: Optional[Settings] = None

    def _get_settings(self) -> Settings:
        return self.settings or default_settings()

    def _send_cors_headers(self):
        self.send_header("Access-Control-Allow-Origin", "*")
        self.send_header("Access-Control-Allow-Methods", "GET, OPTIONS")
        self.send_header("Access-Control-Allow-Headers", "Content-Type")

    def _send_json(self, status: int, payload, extra_headers=None):
        body = json.dumps(payload).encode()
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self._send_cors_headers()
        for name, value in (extra_headers or {}).items():
            self.send_header(name, value)
        self.end_headers()
        self.wfile.write(body)

    def _send_error_json(self, status: HTTPStatus, message: str, code: str = ""):
        payload = {"error": status.phrase, "message": message}
        if code:
            payload["code"] = code
        self._send_json(status, payload)

    def do_OPTIONS(self):
        self.send_response(HTTPStatus.OK)
        self._send_cors_headers()
        self.send_header("Content-Length", "0")
        self.end_headers()

    def do_GET(self):
        url = urlparse(self.path)
        if url.path.rstrip("/") not in ROUTES:
            self._send_error_json(HTTPStatus.NOT_FOUND, f"Unknown path {url.path}")
            return

        query = parse_qs(url.query)
        username = query.get("username", [""])[0].strip()
        if not username:
            self._send_error_json(HTTPStatus.BAD_REQUEST, "Username parameter is required")
            return
        include_forks = parse_bool(query.get("forks", ["true"])[0])

        try:
            fetcher = GitHubFetcher(self._get_settings())
            stats = get_language_stats(username, fetcher=fetcher, include_forks=include_forks)
        except AggregationError as exc:
            status = ERROR_STATUS.get(exc.kind, HTTPStatus.INTERNAL_SERVER_ERROR)
            logger.error("Error getting language stats for %s: %s", username, exc)
            message = str(exc)
            if exc.cause is not None and exc.cause.is_rate_limited:
                message = f"{message} ({RATE_LIMIT_INFO})"
            self._send_error_json(status, message, exc.kind.value)
            return
        except Exception:
            logger.exception("Unexpected error getting language stats for %s", username)
            self._send_error_json(HTTPStatus.INTERNAL_SERVER_ERROR, "Internal error while computing language stats")
            return

        self._send_json(
            HTTPStatus.OK,
            [stat.as_dict() for stat in stats],
            extra_headers={"X-RateLimit-Info": RATE_LIMIT_INFO},
        )

    def _method_not_allowed(self):
        self._send_error_json(HTTPStatus.METHOD_NOT_ALLOWED, "Method not allowed")

    do_POST = do_PUT = do_PATCH = do_DELETE = _method_not_allowed

    def log_message(self, format, *args):
        logger.info("%s - %s", self.address_string(), format % args)


def make_server(settings: Settings, host: str = "") -> ThreadingHTTPServer:
    handler_cls = type("ConfiguredLanguagesHandler", (LanguagesHandler,), {"settings": settings})
    return ThreadingHTTPServer((host, settings.port), handler_cls)


def serve(settings: Optional[Settings] = None):
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    server = make_server(settings)
    logger.info("Starting GitHub Language Analyzer Server")
    logger.info("Using port: %s", settings.port)
    if settings.authenticated:
        logger.info("Using GITHUB_TOKEN for authentication")
    else:
        logger.warning("Running without GITHUB_TOKEN - limited to 60 requests/hour")
    logger.info("Access the endpoint at: http://localhost:%s/languages?username=USERNAME", settings.port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        server.server_close()
