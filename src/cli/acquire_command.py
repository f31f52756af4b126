"""Acquire command wiring for Gitfetch CLI."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

from acquire.pipeline import AcquisitionPipeline
from cli.prompt import prompt_user
from core.config import GitfetchConfig
from core.constants import DEFAULT_CHECKOUT_REVISION, DEFAULT_TRUST_MODE, SCAN_PREVIEW_LIMIT
from core.errors import GitfetchError
from core.trust_policy import SUPPORTED_TRUST_MODES, parse_trust_mode
from core.types import AcquisitionRequest, AcquisitionResult
from sandbox.isolation import BubblewrapExecutor
from store.registry import RegistryStore


def add_acquire_command(subparsers: Any) -> None:
    """Register acquire subcommand."""
    parser = subparsers.add_parser(
        "acquire",
        aliases=["clone"],
        help="Fetch a repository in isolation, verify, scan, and release it",
    )
    parser.add_argument("source", help="Repository URL or owner/name shorthand")
    parser.add_argument(
        "--verify-checksum",
        action="store_true",
        help="Abort unless a fingerprint is registered for the source",
    )
    parser.add_argument(
        "--trust-mode",
        default=DEFAULT_TRUST_MODE,
        choices=SUPPORTED_TRUST_MODES,
        help="paranoid prompts at every gate, normal prompts for unknown sources, "
        "yolo never prompts",
    )
    parser.add_argument(
        "--revision",
        default=DEFAULT_CHECKOUT_REVISION,
        help="Revision to check out in the network-isolated stage",
    )


def run_acquire_command(config: GitfetchConfig, args: argparse.Namespace) -> int:
    """Run one acquisition and persist the registry on success."""
    store = RegistryStore(config.config_path)
    try:
        request = AcquisitionRequest(
            source=args.source,
            destination_dir=Path.cwd(),
            verify_checksum=args.verify_checksum,
            trust_mode=parse_trust_mode(args.trust_mode),
            revision=args.revision,
        )
        state = store.load()
        pipeline = AcquisitionPipeline(
            config=config,
            executor=BubblewrapExecutor(),
            registry=state,
            confirm=prompt_user,
        )
        result = pipeline.acquire(request)
        if result.status == "acquired":
            store.save(state)
    except GitfetchError as error:
        print(f"acquire_error={error}")
        return 1
    print(render_acquisition_result(result))
    return 0


def render_acquisition_result(result: AcquisitionResult) -> str:
    """Render an acquisition result as stable key=value lines."""
    lines = [f"status={result.status}", f"source_url={result.source.url}"]
    if result.status == "cancelled":
        lines.append(f"cancelled_at={result.cancelled_at}")
        return "\n".join(lines)
    if result.verification is None:
        lines.append("verification=skipped")
    else:
        report = result.verification
        lines.append(f"verification={'matched' if report.matched else 'mismatch'}")
        lines.append(f"verified={report.verified_count}")
        lines.append(f"issues={report.issue_count}")
        if report.revision_drift:
            lines.append("revision_drift=true")
    if result.scan is not None:
        findings = result.scan.findings
        lines.append(f"findings={len(findings)}")
        for finding in findings[:SCAN_PREVIEW_LIMIT]:
            lines.append(f"finding={finding.render()}")
        if len(findings) > SCAN_PREVIEW_LIMIT:
            lines.append(f"findings_more={len(findings) - SCAN_PREVIEW_LIMIT}")
    record = result.repository
    if record is not None:
        lines.append(f"local_path={record.local_path}")
        lines.append(f"revision_id={record.revision_id or '-'}")
        lines.append(f"integrity_verified={str(record.integrity_verified).lower()}")
        if result.verification is None:
            lines.append(f"hint=gitfetch fingerprint {record.local_path} --save")
    return "\n".join(lines)
