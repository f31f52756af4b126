"""GitHub repository search over the public REST API."""

from __future__ import annotations

from typing import Any

import requests

from core.constants import SEARCH_RESULT_LIMIT, SEARCH_TIMEOUT_SECONDS, SEARCH_USER_AGENT
from core.errors import GitfetchSearchError
from core.types import SearchHit


def build_search_query(query: str) -> str:
    """Turn ``owner/name`` into a ``repo:`` qualifier, else match on name."""
    if "/" in query:
        return f"repo:{query}"
    return f"{query} in:name"


def search_repositories(
    query: str,
    api_url: str,
    limit: int = SEARCH_RESULT_LIMIT,
) -> list[SearchHit]:
    """Search repositories sorted by stars.

    Args:
        query: Repository name or ``owner/name``.
        api_url: Base URL of the search API.
        limit: Maximum number of hits returned.

    Returns:
        Search hits in API order.

    Raises:
        GitfetchSearchError: If the request or response parsing fails.
    """
    try:
        response = requests.get(
            f"{api_url.rstrip('/')}/search/repositories",
            params={"q": build_search_query(query), "sort": "stars", "order": "desc"},
            headers={"User-Agent": SEARCH_USER_AGENT, "Accept": "application/vnd.github+json"},
            timeout=SEARCH_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        payload = response.json()
    except requests.exceptions.HTTPError as error:
        raise GitfetchSearchError(f"GitHub API error: {error}.") from error
    except ValueError as error:
        raise GitfetchSearchError(f"Invalid search response: {error}.") from error
    except requests.exceptions.RequestException as error:
        raise GitfetchSearchError(f"Network error: {error}.") from error
    items = payload.get("items") if isinstance(payload, dict) else None
    if not isinstance(items, list):
        raise GitfetchSearchError("Invalid search response: expected items list.")
    return [_hit_from_payload(item) for item in items[:limit]]


def _hit_from_payload(item: Any) -> SearchHit:
    try:
        description = item.get("description")
        return SearchHit(
            full_name=str(item["full_name"]),
            html_url=str(item["html_url"]),
            description=str(description) if description else None,
            stargazers_count=int(item.get("stargazers_count") or 0),
        )
    except (AttributeError, KeyError, TypeError, ValueError) as error:
        raise GitfetchSearchError(f"Invalid search result entry: {error}.") from error
