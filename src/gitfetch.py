"""Public SDK surface for Gitfetch.

This module provides a stable import path for library users.
It re-exports the pipeline, integrity helpers, and typed models.
"""

from __future__ import annotations

from acquire.pipeline import AcquisitionPipeline
from core.config import GitfetchConfig
from core.trust_policy import TrustContext, TrustDecision, decide
from core.types import (
    AcquiredRepository,
    AcquisitionRequest,
    AcquisitionResult,
    Fingerprint,
    ScanFinding,
    ScanReport,
    TrustMode,
    VerificationReport,
)
from integrity.fingerprint import compute_fingerprint
from integrity.verification import verify_fingerprint
from sandbox.isolation import BubblewrapExecutor, ExecutionResult, IsolatedExecutor
from scan.heuristic_scanner import scan_repository
from store.registry import RegistryState, RegistryStore

__all__ = [
    "AcquiredRepository",
    "AcquisitionPipeline",
    "AcquisitionRequest",
    "AcquisitionResult",
    "BubblewrapExecutor",
    "ExecutionResult",
    "Fingerprint",
    "GitfetchConfig",
    "IsolatedExecutor",
    "RegistryState",
    "RegistryStore",
    "ScanFinding",
    "ScanReport",
    "TrustContext",
    "TrustDecision",
    "TrustMode",
    "VerificationReport",
    "compute_fingerprint",
    "decide",
    "scan_repository",
    "verify_fingerprint",
]
