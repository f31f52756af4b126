"""Fingerprint verification against a checked-out tree."""

from __future__ import annotations

from pathlib import Path

from core.logging_config import get_logger
from core.types import Fingerprint, VerificationReport
from integrity.fingerprint import collect_file_digests
from sandbox.git_probe import read_revision_id

_LOGGER = get_logger(__name__)


def verify_fingerprint(
    root_directory: Path,
    expected: Fingerprint,
    current_revision: str | None = None,
) -> VerificationReport:
    """Diff the current tree against an expected fingerprint.

    Content mismatches (changed, missing, unexpected files) fail the report.
    A revision that differs from the recorded one only logs a warning.

    Args:
        root_directory: Tree to verify.
        expected: Previously registered fingerprint.
        current_revision: Known revision; probed from git metadata when omitted.

    Returns:
        Verification report with per-axis paths and counts.

    Raises:
        GitfetchIntegrityError: If the root exists but cannot be listed.
    """
    root = root_directory.expanduser()
    if current_revision is None:
        current_revision = read_revision_id(root)
    tree = collect_file_digests(root)
    current = tree.file_digests
    expected_digests = expected.file_digests
    changed: list[str] = []
    missing: list[str] = []
    verified_count = 0
    for relative_path, expected_digest in expected_digests.items():
        current_digest = current.get(relative_path)
        if current_digest is None:
            missing.append(relative_path)
        elif current_digest == expected_digest:
            verified_count += 1
        else:
            changed.append(relative_path)
    unexpected = [path for path in current if path not in expected_digests]
    report = VerificationReport(
        verified_count=verified_count,
        changed_paths=tuple(sorted(changed)),
        missing_paths=tuple(sorted(missing)),
        unexpected_paths=tuple(sorted(unexpected)),
        skipped_paths=tree.skipped_paths,
        expected_revision=expected.revision_id,
        current_revision=current_revision,
    )
    if report.revision_drift:
        _LOGGER.warning(
            "revision_mismatch",
            expected_revision=report.expected_revision,
            current_revision=report.current_revision,
        )
    _LOGGER.info(
        "verification_completed",
        root=str(root),
        verified=report.verified_count,
        issues=report.issue_count,
        matched=report.matched,
    )
    return report
