"""Gitfetch exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class GitfetchError(Exception):
    """Base exception for all Gitfetch failures."""


class GitfetchConfigError(GitfetchError):
    """Raised for invalid runtime configuration."""


class GitfetchSourceError(GitfetchError):
    """Raised when a source identifier cannot be resolved to a URL."""


class IsolationUnavailableError(GitfetchError):
    """Raised when the isolation mechanism is not installed."""


class StageExecutionError(GitfetchError):
    """Raised when an isolated stage exits non-zero or times out."""

    def __init__(self, stage: str, reason: str) -> None:
        super().__init__(f"Stage '{stage}' failed: {reason}")
        self.stage = stage
        self.reason = reason


class FetchFailedError(StageExecutionError):
    """Raised when the network-enabled fetch stage fails."""

    def __init__(self, reason: str) -> None:
        super().__init__("fetch", reason)


class CheckoutFailedError(StageExecutionError):
    """Raised when the network-isolated checkout stage fails."""

    def __init__(self, reason: str) -> None:
        super().__init__("checkout", reason)


class NoFingerprintOnRequiredVerifyError(GitfetchError):
    """Raised when checksum verification is required but none is registered."""


class GitfetchIntegrityError(GitfetchError):
    """Raised when a fingerprint root cannot be read."""


class GitfetchRegistryError(GitfetchError):
    """Raised for registry file read, write, and format failures."""


class GitfetchSearchError(GitfetchError):
    """Raised when the repository search request fails."""
