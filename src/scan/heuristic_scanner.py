"""Shallow suspicious-pattern scan.

This module inspects source-like files one directory level deep and
records at most one finding per file. It is a fast smell test only and
is never the sole gate for proceeding.
"""

from __future__ import annotations

from pathlib import Path

from core.constants import SCANNED_EXTENSIONS, SUSPICIOUS_PATTERNS
from core.logging_config import get_logger
from core.types import ScanFinding, ScanReport
from integrity.fingerprint import is_untracked_name

_LOGGER = get_logger(__name__)


def scan_repository(root_directory: Path) -> ScanReport:
    """Scan top-level source files for suspicious substrings.

    Unreadable files are skipped and counted; the scan itself never fails.

    Args:
        root_directory: Checked-out tree to scan.

    Returns:
        Sorted, deduplicated findings.
    """
    findings: set[ScanFinding] = set()
    skipped_count = 0
    for file_path in _candidate_files(root_directory):
        try:
            content = file_path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError):
            skipped_count += 1
            continue
        finding = match_content(file_path.name, content)
        if finding is not None:
            findings.add(finding)
    report = ScanReport(findings=tuple(sorted(findings)), skipped_count=skipped_count)
    _LOGGER.info(
        "scan_completed",
        root=str(root_directory),
        findings=len(report.findings),
        skipped=report.skipped_count,
    )
    return report


def match_content(file_name: str, content: str) -> ScanFinding | None:
    """Return the first suspicious pattern found in ``content``."""
    lowered = content.lower()
    for pattern, description in SUSPICIOUS_PATTERNS:
        if pattern in lowered:
            return ScanFinding(file_name=file_name, description=description)
    return None


def _candidate_files(root_directory: Path) -> list[Path]:
    try:
        entries = list(root_directory.iterdir())
    except OSError:
        return []
    candidates = []
    for entry in entries:
        if is_untracked_name(entry.name) or entry.is_symlink():
            continue
        if entry.suffix.lower() in SCANNED_EXTENSIONS and entry.is_file():
            candidates.append(entry)
    return candidates
