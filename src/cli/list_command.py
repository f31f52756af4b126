"""List command wiring for Gitfetch CLI."""

from __future__ import annotations

from typing import Any

from core.config import GitfetchConfig
from core.errors import GitfetchError
from store.registry import RegistryStore


def add_list_command(subparsers: Any) -> None:
    """Register list subcommand."""
    subparsers.add_parser("list", help="List acquired repositories")


def run_list_command(config: GitfetchConfig) -> int:
    """Print recorded acquisitions as tab separated rows."""
    try:
        repositories = RegistryStore(config.config_path).load().list_repositories()
    except GitfetchError as error:
        print(f"list_error={error}")
        return 1
    if not repositories:
        print("No repositories installed yet.")
        return 0
    for record in repositories:
        marker = "verified" if record.integrity_verified else "unverified"
        revision = record.revision_id[:8] if record.revision_id else "-"
        print(f"{record.name}\t{marker}\t{revision}\t{record.source_url}\t{record.local_path}")
    return 0
