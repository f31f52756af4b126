"""Gitfetch CLI entry points.
This module exposes acquisition, fingerprint, and registry commands.
It maps argparse commands onto the command modules.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from cli.acquire_command import add_acquire_command, run_acquire_command
from cli.fingerprint_command import (
    add_fingerprint_command,
    add_verify_command,
    run_fingerprint_command,
    run_verify_command,
)
from cli.list_command import add_list_command, run_list_command
from cli.search_command import add_search_command, run_search_command
from core.config import GitfetchConfig
from core.errors import GitfetchConfigError


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="gitfetch",
        description="Acquire repositories through an isolated, verified pipeline",
    )
    parser.add_argument(
        "--config-path",
        help="Override GITFETCH_CONFIG_PATH for this command",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    add_acquire_command(subparsers)
    add_fingerprint_command(subparsers)
    add_verify_command(subparsers)
    add_list_command(subparsers)
    add_search_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Gitfetch CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args.config_path)
    except GitfetchConfigError as error:
        print(f"config_error={error}")
        return 1
    if args.command in {"acquire", "clone"}:
        return run_acquire_command(config, args)
    if args.command in {"fingerprint", "checksum"}:
        return run_fingerprint_command(config, args)
    if args.command == "verify":
        return run_verify_command(config, args)
    if args.command == "list":
        return run_list_command(config)
    if args.command == "search":
        return run_search_command(config, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(config_path: str | None) -> GitfetchConfig:
    """Build runtime config with optional registry path override.

    Args:
        config_path: Optional override path.

    Returns:
        Configured runtime config.
    """
    config = GitfetchConfig.from_env()
    if config_path:
        config = replace(config, config_path=Path(config_path).expanduser().resolve())
    return config
