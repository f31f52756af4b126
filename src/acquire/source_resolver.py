"""Source identifier resolution."""

from __future__ import annotations

from core.errors import GitfetchSourceError
from core.types import ResolvedSource


def resolve_source(source: str, github_url: str) -> ResolvedSource:
    """Resolve a URL or ``owner/name`` shorthand to a canonical source.

    Args:
        source: User supplied repository identifier.
        github_url: Base URL for shorthand identifiers.

    Returns:
        Canonical URL plus repository name.

    Raises:
        GitfetchSourceError: If the identifier has an unsupported format.
    """
    candidate = source.strip()
    if candidate.startswith(("http://", "https://")):
        url = candidate
    elif "/" in candidate and not candidate.startswith(("-", "/")):
        url = f"{github_url.rstrip('/')}/{candidate}"
    else:
        raise GitfetchSourceError(
            f"Invalid repository format '{source}'. "
            "Use a full http(s) URL or owner/name shorthand."
        )
    return ResolvedSource(url=url, name=repository_name(url))


def repository_name(url: str) -> str:
    """Derive the repository directory name from its URL.

    Raises:
        GitfetchSourceError: If no usable name can be derived.
    """
    trimmed = url.rstrip("/")
    if trimmed.endswith(".git"):
        trimmed = trimmed[: -len(".git")]
    name = trimmed.rsplit("/", 1)[-1]
    if not name or name in {".", ".."} or name.startswith("-") or ":" in name:
        raise GitfetchSourceError(f"Can't parse repository name from '{url}'.")
    return name
