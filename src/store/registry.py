"""Acquisition and fingerprint registry persistence.

The registry is one JSON document loaded whole, mutated in memory, and
written back whole by the caller. Concurrent writers are last-writer-wins.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from core.errors import GitfetchRegistryError
from core.types import AcquiredRepository, Fingerprint
from store.registry_io import (
    fingerprint_from_payload,
    fingerprint_to_payload,
    read_json_file,
    repository_from_payload,
    repository_to_payload,
    write_json_file,
)


@dataclass
class RegistryState:
    """In-memory registry contents for one load-mutate-save transaction."""

    installed_repos: list[AcquiredRepository] = field(default_factory=list)
    checksum_registry: dict[str, Fingerprint] = field(default_factory=dict)

    def get_fingerprint(self, source_url: str) -> Fingerprint | None:
        """Return the registered fingerprint for ``source_url``, if any."""
        return self.checksum_registry.get(source_url)

    def has_fingerprint(self, source_url: str) -> bool:
        """Whether a fingerprint is registered for ``source_url``."""
        return source_url in self.checksum_registry

    def put_fingerprint(self, source_url: str, fingerprint: Fingerprint) -> None:
        """Register or replace the fingerprint for ``source_url``."""
        self.checksum_registry[source_url] = fingerprint

    def append_repository(self, record: AcquiredRepository) -> None:
        """Record one completed acquisition. Existing records are never changed."""
        self.installed_repos.append(record)

    def list_repositories(self) -> tuple[AcquiredRepository, ...]:
        """Recorded acquisitions in insertion order."""
        return tuple(self.installed_repos)


class RegistryStore:
    """Filesystem-backed registry document."""

    def __init__(self, config_path: Path) -> None:
        self._config_path = config_path.expanduser()

    @property
    def path(self) -> Path:
        """Location of the registry document."""
        return self._config_path

    def load(self) -> RegistryState:
        """Load the full registry; a missing file yields an empty registry.

        Raises:
            GitfetchRegistryError: If the document is unreadable or malformed.
        """
        payload = read_json_file(
            self._config_path,
            default_value={"installed_repos": [], "checksum_registry": {}},
        )
        if not isinstance(payload, dict):
            raise GitfetchRegistryError(
                f"Invalid registry at {self._config_path}: expected JSON object."
            )
        repos_payload = payload.get("installed_repos", [])
        checksums_payload = payload.get("checksum_registry", {})
        if not isinstance(repos_payload, list) or not isinstance(checksums_payload, dict):
            raise GitfetchRegistryError(
                f"Invalid registry at {self._config_path}: "
                "expected installed_repos list and checksum_registry object."
            )
        return RegistryState(
            installed_repos=[
                repository_from_payload(item, self._config_path) for item in repos_payload
            ],
            checksum_registry={
                str(url): fingerprint_from_payload(item, self._config_path)
                for url, item in checksums_payload.items()
            },
        )

    def save(self, state: RegistryState) -> None:
        """Write the full registry back to disk.

        Raises:
            GitfetchRegistryError: If the document cannot be written.
        """
        write_json_file(
            self._config_path,
            {
                "installed_repos": [
                    repository_to_payload(record) for record in state.installed_repos
                ],
                "checksum_registry": {
                    url: fingerprint_to_payload(fingerprint)
                    for url, fingerprint in state.checksum_registry.items()
                },
            },
        )
