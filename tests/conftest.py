import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from github_languages.config import Settings
from github_languages.errors import FetchError, FetchErrorKind

API = "https://api.github.com"


class FakeFetcher:
    """Serves canned JSON payloads (or raises canned errors) keyed by URL."""

    def __init__(self, responses=None, settings=None):
        self.settings = settings or Settings()
        self.responses = dict(responses or {})
        self.calls = []

    def fetch_json(self, url):
        self.calls.append(url)
        if url not in self.responses:
            raise FetchError(FetchErrorKind.UPSTREAM_ERROR, "Not Found", status_code=404, body='{"message": "Not Found"}')
        value = self.responses[url]
        if isinstance(value, Exception):
            raise value
        return value


def repos_url(username, per_page=100):
    return f"{API}/users/{username}/repos?per_page={per_page}&type=owner&sort=updated"


def languages_url(owner, repo):
    return f"{API}/repos/{owner}/{repo}/languages"


def repo_record(owner, name, fork=False):
    return {"name": name, "fork": fork, "languages_url": languages_url(owner, name)}


@pytest.fixture
def fake_fetcher():
    def make(responses=None, **settings):
        return FakeFetcher(responses, Settings(**settings) if settings else None)
    return make
