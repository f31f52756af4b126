"""Fingerprint and verify command wiring for Gitfetch CLI."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

from core.config import GitfetchConfig
from core.constants import UNKNOWN_VALUE
from core.errors import GitfetchError
from core.types import Fingerprint, VerificationReport
from integrity.fingerprint import compute_fingerprint
from integrity.verification import verify_fingerprint
from sandbox.git_probe import read_remote_url
from store.registry import RegistryStore


def add_fingerprint_command(subparsers: Any) -> None:
    """Register fingerprint subcommand."""
    parser = subparsers.add_parser(
        "fingerprint",
        aliases=["checksum"],
        help="Compute the integrity fingerprint of a checked-out repository",
    )
    parser.add_argument("path", help="Path to the repository")
    parser.add_argument("--save", action="store_true", help="Register the fingerprint")
    parser.add_argument("--source-url", help="Override the source URL read from git metadata")


def add_verify_command(subparsers: Any) -> None:
    """Register verify subcommand."""
    parser = subparsers.add_parser(
        "verify",
        help="Verify a repository against its registered fingerprint",
    )
    parser.add_argument("path", help="Path to the repository")
    parser.add_argument("--source-url", help="Override the source URL read from git metadata")


def run_fingerprint_command(config: GitfetchConfig, args: argparse.Namespace) -> int:
    """Compute, print, and optionally register a fingerprint."""
    try:
        root = _existing_directory(args.path)
        fingerprint = compute_fingerprint(root, source_url=args.source_url)
        if args.save:
            _save_fingerprint(config, fingerprint)
    except GitfetchError as error:
        print(f"fingerprint_error={error}")
        return 1
    print(render_fingerprint(fingerprint))
    if args.save:
        print("saved=true")
    return 0


def run_verify_command(config: GitfetchConfig, args: argparse.Namespace) -> int:
    """Verify a tree and return zero only on a full content match."""
    try:
        root = _existing_directory(args.path)
        source_url = args.source_url or read_remote_url(root)
        if source_url is None:
            raise GitfetchError(
                f"Can't read repository URL of {root}. Pass --source-url explicitly."
            )
        expected = RegistryStore(config.config_path).load().get_fingerprint(source_url)
        if expected is None:
            raise GitfetchError(f"No fingerprint registered for: {source_url}")
        report = verify_fingerprint(root, expected)
    except GitfetchError as error:
        print(f"verify_error={error}")
        return 1
    print(render_verification_report(report))
    return 0 if report.matched else 1


def render_fingerprint(fingerprint: Fingerprint) -> str:
    """Render a fingerprint summary as key=value lines."""
    return "\n".join(
        [
            f"source_url={fingerprint.source_url}",
            f"revision_id={fingerprint.revision_id}",
            f"file_count={fingerprint.file_count}",
            f"skipped_count={len(fingerprint.skipped_paths)}",
            f"aggregate_digest={fingerprint.aggregate_digest}",
        ]
    )


def render_verification_report(report: VerificationReport) -> str:
    """Render a verification report with one line per mismatched path."""
    lines = []
    for label, paths in (
        ("CHANGED", report.changed_paths),
        ("MISSING", report.missing_paths),
        ("UNEXPECTED", report.unexpected_paths),
        ("SKIPPED", report.skipped_paths),
    ):
        lines.extend(f"[{label}] {path}" for path in paths)
    if report.revision_drift:
        lines.append(
            f"revision_drift=expected:{report.expected_revision} "
            f"current:{report.current_revision}"
        )
    lines.append(f"verified={report.verified_count}")
    lines.append(f"changed={len(report.changed_paths)}")
    lines.append(f"missing={len(report.missing_paths)}")
    lines.append(f"unexpected={len(report.unexpected_paths)}")
    lines.append(f"status={'verified' if report.matched else 'failed'}")
    return "\n".join(lines)


def _existing_directory(raw_path: str) -> Path:
    path = Path(raw_path).expanduser().resolve()
    if not path.is_dir():
        raise GitfetchError(f"Repository path not found: {path}")
    return path


def _save_fingerprint(config: GitfetchConfig, fingerprint: Fingerprint) -> None:
    if fingerprint.source_url == UNKNOWN_VALUE:
        raise GitfetchError(
            "Can't register a fingerprint without a source URL. Pass --source-url explicitly."
        )
    store = RegistryStore(config.config_path)
    state = store.load()
    state.put_fingerprint(fingerprint.source_url, fingerprint)
    store.save(state)
