"""Trusted acquisition pipeline.

This module runs pre-flight checks, the isolated fetch and checkout
stages, verification, scanning, and materialization, asking the trust
policy at every gate. Any fatal branch removes the workspace.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from acquire.materialize import materialize_tree, prepare_workspace, remove_workspace
from acquire.source_resolver import resolve_source
from acquire.stages import run_checkout_stage, run_fetch_stage, validate_revision
from core.config import GitfetchConfig
from core.errors import NoFingerprintOnRequiredVerifyError
from core.logging_config import get_logger
from core.trust_policy import DecisionPoint, TrustContext, decide
from core.types import (
    AcquiredRepository,
    AcquisitionRequest,
    AcquisitionResult,
    Fingerprint,
    ResolvedSource,
    ScanReport,
    VerificationReport,
)
from integrity.verification import verify_fingerprint
from sandbox.git_probe import read_revision_id
from sandbox.isolation import IsolatedExecutor
from scan.heuristic_scanner import scan_repository
from store.registry import RegistryState

_LOGGER = get_logger(__name__)

ConfirmFn = Callable[[str], bool]
RevisionReader = Callable[[Path], str | None]


class _Cancelled(Exception):
    """Internal signal that the user declined a prompt."""

    def __init__(self, decision_point: DecisionPoint) -> None:
        super().__init__(decision_point)
        self.decision_point = decision_point


class AcquisitionPipeline:
    """Orchestrates one trusted acquisition per ``acquire`` call."""

    def __init__(
        self,
        config: GitfetchConfig,
        executor: IsolatedExecutor,
        registry: RegistryState,
        confirm: ConfirmFn,
        revision_reader: RevisionReader = read_revision_id,
    ) -> None:
        self._config = config
        self._executor = executor
        self._registry = registry
        self._confirm = confirm
        self._read_revision = revision_reader

    def acquire(self, request: AcquisitionRequest) -> AcquisitionResult:
        """Acquire one source into the user's destination directory.

        The registry state is mutated in memory; persisting it is the
        caller's responsibility.

        Args:
            request: Source, trust mode, and verification options.

        Returns:
            Acquired or cancelled result.

        Raises:
            IsolationUnavailableError: If isolation is missing (pre-flight).
            GitfetchSourceError: If the source cannot be resolved.
            NoFingerprintOnRequiredVerifyError: If verification is required
                but no fingerprint is registered.
            FetchFailedError: If the isolated fetch stage fails.
            CheckoutFailedError: If the isolated checkout stage fails.
        """
        self._executor.ensure_available()
        source = resolve_source(request.source, self._config.github_url)
        validate_revision(request.revision)
        expected = self._registry.get_fingerprint(source.url)
        _LOGGER.info(
            "acquisition_started",
            source_url=source.url,
            trust_mode=request.trust_mode,
            fingerprint_known=expected is not None,
        )
        preflight = decide(
            request.trust_mode,
            TrustContext(
                decision_point="preflight",
                fingerprint_known=expected is not None,
                fingerprint_required=request.verify_checksum,
            ),
        )
        if preflight.action == "abort":
            raise NoFingerprintOnRequiredVerifyError(
                f"{preflight.message}: no fingerprint registered for {source.url}."
            )
        try:
            self._gate(
                request,
                TrustContext(decision_point="before_fetch", fingerprint_known=expected is not None),
            )
        except _Cancelled as cancelled:
            return self._cancelled(source, cancelled.decision_point)
        workspace = prepare_workspace(self._config.workspace_root, source.name)
        try:
            return self._acquire_in_workspace(request, source, expected, workspace)
        except _Cancelled as cancelled:
            remove_workspace(workspace)
            return self._cancelled(source, cancelled.decision_point)
        except BaseException:
            remove_workspace(workspace)
            raise

    def _acquire_in_workspace(
        self,
        request: AcquisitionRequest,
        source: ResolvedSource,
        expected: Fingerprint | None,
        workspace: Path,
    ) -> AcquisitionResult:
        timeout_seconds = self._config.sandbox_timeout_seconds
        repository_dir = run_fetch_stage(self._executor, workspace, source, timeout_seconds)
        run_checkout_stage(self._executor, repository_dir, request.revision, timeout_seconds)
        revision_id = self._read_revision(repository_dir)
        verification = self._verify(request, repository_dir, expected, revision_id)
        scan = self._scan(request, repository_dir)
        local_path = self._release(request, repository_dir)
        record = AcquiredRepository(
            name=source.name,
            source_url=source.url,
            local_path=str(local_path),
            revision_id=revision_id,
            integrity_verified=verification is not None and verification.matched,
            isolation_workspace_path=str(workspace),
        )
        self._registry.append_repository(record)
        _LOGGER.info(
            "acquisition_completed",
            source_url=source.url,
            local_path=record.local_path,
            integrity_verified=record.integrity_verified,
        )
        return AcquisitionResult(
            status="acquired",
            source=source,
            repository=record,
            verification=verification,
            scan=scan,
        )

    def _verify(
        self,
        request: AcquisitionRequest,
        repository_dir: Path,
        expected: Fingerprint | None,
        revision_id: str | None,
    ) -> VerificationReport | None:
        if expected is None:
            return None
        report = verify_fingerprint(repository_dir, expected, current_revision=revision_id)
        self._gate(
            request,
            TrustContext(
                decision_point="after_verification",
                fingerprint_known=True,
                verification_passed=report.matched,
            ),
        )
        return report

    def _scan(self, request: AcquisitionRequest, repository_dir: Path) -> ScanReport:
        report = scan_repository(repository_dir)
        for finding in report.findings:
            _LOGGER.warning("suspicious_pattern", finding=finding.render())
        self._gate(
            request,
            TrustContext(decision_point="after_scan", finding_count=len(report.findings)),
        )
        return report

    def _release(self, request: AcquisitionRequest, repository_dir: Path) -> Path:
        try:
            self._gate(request, TrustContext(decision_point="before_materialize"))
        except _Cancelled:
            return repository_dir
        return materialize_tree(repository_dir, request.destination_dir)

    def _gate(self, request: AcquisitionRequest, context: TrustContext) -> None:
        decision = decide(request.trust_mode, context)
        if decision.action == "proceed":
            return
        if decision.action == "prompt" and self._confirm(decision.message or ""):
            return
        raise _Cancelled(context.decision_point)

    def _cancelled(
        self,
        source: ResolvedSource,
        decision_point: DecisionPoint,
    ) -> AcquisitionResult:
        _LOGGER.info("acquisition_cancelled", source_url=source.url, decision_point=decision_point)
        return AcquisitionResult(status="cancelled", source=source, cancelled_at=decision_point)
