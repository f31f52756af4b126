"""Search command wiring for Gitfetch CLI."""

from __future__ import annotations

import argparse
from typing import Any

from core.config import GitfetchConfig
from core.errors import GitfetchError
from search.github_search import search_repositories


def add_search_command(subparsers: Any) -> None:
    """Register search subcommand."""
    parser = subparsers.add_parser("search", help="Search GitHub repositories by name")
    parser.add_argument("query", help="Repository name or owner/name")


def run_search_command(config: GitfetchConfig, args: argparse.Namespace) -> int:
    """Print search hits as tab separated rows."""
    try:
        hits = search_repositories(args.query, config.github_api_url)
    except GitfetchError as error:
        print(f"search_error={error}")
        return 1
    if not hits:
        print("No repositories found.")
        return 0
    for hit in hits:
        print(f"{hit.full_name}\t{hit.stargazers_count}\t{hit.html_url}\t{hit.description or '-'}")
    return 0
