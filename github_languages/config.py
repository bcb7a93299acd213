# config.py

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_PORT = 8080
DEFAULT_TIMEOUT = 15
DEFAULT_MAX_WORKERS = 10
USER_AGENT = "GitHub-Language-Analyzer"
# Largest page the repository listing endpoint will return
MAX_PER_PAGE = 100


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, resolved once at startup."""

    github_token: str = ""
    port: int = DEFAULT_PORT
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    max_workers: int = DEFAULT_MAX_WORKERS
    per_page: int = MAX_PER_PAGE
    user_agent: str = USER_AGENT
    log_level: str = "INFO"

    @property
    def authenticated(self) -> bool:
        return bool(self.github_token)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            github_token=env.get("GITHUB_TOKEN", "").strip(),
            port=int(env.get("PORT") or DEFAULT_PORT),
            api_url=(env.get("GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/"),
            timeout=float(env.get("GITHUB_TIMEOUT") or DEFAULT_TIMEOUT),
            max_workers=max(1, int(env.get("GITHUB_MAX_WORKERS") or DEFAULT_MAX_WORKERS)),
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
        )
