"""Shared typed models.

This module defines immutable data models used by the integrity, scan,
acquisition, and registry layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from types import MappingProxyType
from typing import Literal, Mapping

from core.constants import DEFAULT_CHECKOUT_REVISION, DEFAULT_TRUST_MODE

TrustMode = Literal["paranoid", "normal", "yolo"]
AcquisitionStatus = Literal["acquired", "cancelled"]


@dataclass(frozen=True)
class Fingerprint:
    """Deterministic integrity fingerprint of one directory tree.

    Attributes:
        source_url: Remote URL the tree was acquired from.
        revision_id: Checked-out revision, or ``unknown``.
        file_digests: Read-only mapping of relative POSIX path to hex digest
            for each tracked file or symlink.
        aggregate_digest: Digest over the sorted ``(path, digest)`` pairs.
        computed_at: UTC timestamp of computation.
        skipped_paths: Files that could not be read during the walk.
            Transient, never persisted.
    """

    source_url: str
    revision_id: str
    file_digests: Mapping[str, str]
    aggregate_digest: str
    computed_at: datetime
    skipped_paths: tuple[str, ...] = field(default=(), compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "file_digests", MappingProxyType(dict(self.file_digests)))

    @property
    def file_count(self) -> int:
        """Number of tracked files."""
        return len(self.file_digests)


@dataclass(frozen=True)
class VerificationReport:
    """Diff of a directory tree against an expected fingerprint.

    Attributes:
        verified_count: Files whose digest matches the expectation.
        changed_paths: Files present in both with different digests.
        missing_paths: Expected files absent from the tree.
        unexpected_paths: Present files absent from the expectation.
        skipped_paths: Present files that could not be read.
        expected_revision: Revision recorded in the fingerprint.
        current_revision: Revision of the tree, when obtainable.
    """

    verified_count: int
    changed_paths: tuple[str, ...]
    missing_paths: tuple[str, ...]
    unexpected_paths: tuple[str, ...]
    skipped_paths: tuple[str, ...]
    expected_revision: str
    current_revision: str | None

    @property
    def issue_count(self) -> int:
        """Count content mismatches of every kind."""
        return len(self.changed_paths) + len(self.missing_paths) + len(self.unexpected_paths)

    @property
    def matched(self) -> bool:
        """Whether content matches exactly. Revision drift does not count."""
        return self.issue_count == 0

    @property
    def revision_drift(self) -> bool:
        """Whether the current revision differs from the recorded one."""
        return self.current_revision is not None and self.current_revision != self.expected_revision


@dataclass(frozen=True, order=True)
class ScanFinding:
    """One heuristic match against the suspicious-pattern table."""

    file_name: str
    description: str

    def render(self) -> str:
        """Render as ``file: description``."""
        return f"{self.file_name}: {self.description}"


@dataclass(frozen=True)
class ScanReport:
    """Sorted, deduplicated scan findings plus unreadable file count."""

    findings: tuple[ScanFinding, ...]
    skipped_count: int = 0

    @property
    def has_findings(self) -> bool:
        """Whether any finding was recorded."""
        return bool(self.findings)


@dataclass(frozen=True)
class AcquiredRepository:
    """Registry record of one completed acquisition.

    Attributes:
        name: Repository name derived from the source URL.
        source_url: Canonical remote URL.
        local_path: Where the tree was released to the user.
        revision_id: Checked-out revision, when obtainable.
        integrity_verified: True only when a known fingerprint matched.
        isolation_workspace_path: Workspace used for the isolated stages.
    """

    name: str
    source_url: str
    local_path: str
    revision_id: str | None
    integrity_verified: bool
    isolation_workspace_path: str | None


@dataclass(frozen=True)
class ResolvedSource:
    """Canonical URL and repository name for one source identifier."""

    url: str
    name: str


@dataclass(frozen=True)
class AcquisitionRequest:
    """Acquire command options.

    Attributes:
        source: URL or ``owner/name`` shorthand.
        destination_dir: Directory the tree is materialized into.
        verify_checksum: Require a registered fingerprint before fetching.
        trust_mode: Prompting policy for this invocation.
        revision: Revision checked out in the isolated checkout stage.
    """

    source: str
    destination_dir: Path
    verify_checksum: bool = False
    trust_mode: TrustMode = DEFAULT_TRUST_MODE
    revision: str = DEFAULT_CHECKOUT_REVISION


@dataclass(frozen=True)
class AcquisitionResult:
    """Outcome of one acquisition run.

    Attributes:
        status: ``acquired`` or ``cancelled`` (user declined a prompt).
        source: Resolved source of the run.
        repository: Registry record, set only when acquired.
        verification: Verification report when a fingerprint was known.
        scan: Scan report when the scan ran.
        cancelled_at: Decision point at which the user declined.
    """

    status: AcquisitionStatus
    source: ResolvedSource
    repository: AcquiredRepository | None = None
    verification: VerificationReport | None = None
    scan: ScanReport | None = None
    cancelled_at: str | None = None


@dataclass(frozen=True)
class SearchHit:
    """One repository returned by the search API."""

    full_name: str
    html_url: str
    description: str | None
    stargazers_count: int
