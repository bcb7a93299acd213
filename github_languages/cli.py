# cli.py

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, TextIO

from .config import Settings
from .errors import AggregationError
from .fetcher import GitHubFetcher
from .normalizer import LanguageStat, total_bytes
from .stats import get_language_stats

RULE = "-" * 40


def format_report(stats: List[LanguageStat]) -> str:
    lines = [
        "Language Statistics:",
        RULE,
        "%-20s %10s %10s" % ("LANGUAGE", "PERCENT", "BYTES"),
        RULE,
    ]
    for stat in stats:
        lines.append("%-20s %9.2f%% %10d" % (stat.language, stat.percent, stat.bytes))
    lines.append(RULE)
    lines.append("%-20s %10s %10d" % ("TOTAL", "", total_bytes(stats)))
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="github-languages",
        description="Aggregate language usage across a GitHub user's public repositories.",
    )
    parser.add_argument("--cli", action="store_true", help="Print a report instead of starting the HTTP server")
    parser.add_argument("--user", "-u", default="", help="GitHub username to analyze")
    parser.add_argument("--no-forks", action="store_true", help="Exclude forked repositories")
    return parser


def print_stats(username: str, settings: Settings, include_forks: bool = True, out: Optional[TextIO] = None) -> None:
    out = out or sys.stdout
    print(f"Fetching language stats for GitHub user: {username}", file=out)
    stats = get_language_stats(username, fetcher=GitHubFetcher(settings), include_forks=include_forks)
    print("", file=out)
    print(format_report(stats), file=out)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()

    if not args.cli:
        from .server import serve

        serve(settings)
        return 0

    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    if not args.user.strip():
        print("Error: username is required in CLI mode", file=sys.stderr)
        print("Usage: github-languages --cli --user <username>", file=sys.stderr)
        return 1

    try:
        print_stats(args.user.strip(), settings, include_forks=not args.no_forks)
    except AggregationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0
