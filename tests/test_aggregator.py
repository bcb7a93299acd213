import threading

import pytest

from conftest import languages_url
from github_languages.aggregator import aggregate, parse_language_breakdown
from github_languages.errors import AggregationError, AggregationErrorKind, FetchError, FetchErrorKind
from github_languages.repositories import RepositoryRef


def refs_for(*names):
    return [RepositoryRef(languages_url('octocat', name), name=name) for name in names]


BREAKDOWNS = {
    languages_url('octocat', 'api'): {"Go": 5000, "Shell": 200},
    languages_url('octocat', 'site'): {"JavaScript": 1000, "HTML": 300, "Shell": 100},
    languages_url('octocat', 'tools'): {"Go": 2000, "Python": 2000},
}


def test_merges_bytes_across_repositories(fake_fetcher):
    merged = aggregate(fake_fetcher(BREAKDOWNS), refs_for('api', 'site', 'tools'))
    assert merged == {"Go": 7000, "Shell": 300, "JavaScript": 1000, "HTML": 300, "Python": 2000}


def test_failed_repositories_contribute_nothing(fake_fetcher):
    responses = dict(BREAKDOWNS)
    responses[languages_url('octocat', 'broken')] = FetchError(FetchErrorKind.TIMEOUT, 'timed out')
    responses[languages_url('octocat', 'limited')] = FetchError(
        FetchErrorKind.UPSTREAM_ERROR, 'limited', status_code=403, body='API rate limit exceeded')

    with_failures = aggregate(fake_fetcher(responses), refs_for('api', 'broken', 'site', 'limited', 'tools'))
    successful_only = aggregate(fake_fetcher(BREAKDOWNS), refs_for('api', 'site', 'tools'))
    assert with_failures == successful_only


def test_missing_repository_is_skipped(fake_fetcher):
    merged = aggregate(fake_fetcher(BREAKDOWNS), refs_for('api', 'deleted'))
    assert merged == {"Go": 5000, "Shell": 200}


def test_unparseable_breakdown_is_skipped(fake_fetcher):
    responses = dict(BREAKDOWNS)
    responses[languages_url('octocat', 'odd')] = ["not", "a", "mapping"]
    responses[languages_url('octocat', 'neg')] = {"Go": -5}
    merged = aggregate(fake_fetcher(responses), refs_for('api', 'odd', 'neg'))
    assert merged == {"Go": 5000, "Shell": 200}


def test_all_failures_yield_no_language_data(fake_fetcher):
    with pytest.raises(AggregationError) as info:
        aggregate(fake_fetcher(), refs_for('a', 'b', 'c'))
    assert info.value.kind is AggregationErrorKind.NO_LANGUAGE_DATA


def test_zero_repositories_yield_no_language_data(fake_fetcher):
    with pytest.raises(AggregationError) as info:
        aggregate(fake_fetcher(), [])
    assert info.value.kind is AggregationErrorKind.NO_LANGUAGE_DATA


def test_empty_breakdowns_yield_no_language_data(fake_fetcher):
    responses = {languages_url('octocat', 'docs'): {}, languages_url('octocat', 'blank'): {"Text": 0}}
    with pytest.raises(AggregationError) as info:
        aggregate(fake_fetcher(responses), refs_for('docs', 'blank'))
    assert info.value.kind is AggregationErrorKind.NO_LANGUAGE_DATA


def test_zero_byte_entries_not_inserted():
    assert parse_language_breakdown({"Go": 10, "Makefile": 0}) == {"Go": 10}


@pytest.mark.parametrize('payload', [None, [], {"Go": "10"}, {"Go": 1.5}, {"Go": True}, {"Go": -1}])
def test_parse_rejects_malformed_breakdowns(payload):
    with pytest.raises(FetchError) as info:
        parse_language_breakdown(payload)
    assert info.value.kind is FetchErrorKind.INVALID_RESPONSE


def test_sequential_and_parallel_agree(fake_fetcher):
    refs = refs_for('api', 'site', 'tools')
    assert aggregate(fake_fetcher(BREAKDOWNS), refs, max_workers=1) == aggregate(fake_fetcher(BREAKDOWNS), refs, max_workers=8)


def test_fan_out_bounded_by_max_workers(fake_fetcher):
    names = [f"repo{i}" for i in range(20)]
    responses = {languages_url('octocat', name): {"Python": 1} for name in names}
    fetcher = fake_fetcher(responses, max_workers=3)

    lock = threading.Lock()
    active = {'now': 0, 'peak': 0}
    original = fetcher.fetch_json

    def tracking_fetch_json(url):
        with lock:
            active['now'] += 1
            active['peak'] = max(active['peak'], active['now'])
        try:
            return original(url)
        finally:
            with lock:
                active['now'] -= 1

    fetcher.fetch_json = tracking_fetch_json
    assert aggregate(fetcher, refs_for(*names)) == {"Python": 20}
    assert active['peak'] <= 3


def test_non_ascii_locator_does_not_abort_aggregation(monkeypatch):
    from github_languages import fetcher as fetcher_module
    from github_languages.fetcher import GitHubFetcher

    class DummyResponse:
        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb):
            return False

        def read(self):
            return b'{"Go": 10}'

    def fake_urlopen(req, timeout=None):
        # http.client writes the request line as ASCII
        req.full_url.encode('ascii')
        return DummyResponse()

    monkeypatch.setattr(fetcher_module.urllib.request, 'urlopen', fake_urlopen)
    refs = [
        RepositoryRef(languages_url('octocat', 'good'), name='good'),
        RepositoryRef('https://api.github.com/repos/octocat/café/languages', name='café'),
    ]
    assert aggregate(GitHubFetcher(), refs) == {"Go": 10}
