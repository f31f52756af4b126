"""Unit tests for registry persistence."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from core.errors import GitfetchRegistryError
from core.types import AcquiredRepository, Fingerprint
from store.registry import RegistryState, RegistryStore


def _fingerprint() -> Fingerprint:
    return Fingerprint(
        source_url="https://github.com/octo/hello",
        revision_id="abc123",
        file_digests={"b.txt": "22", "a.txt": "11"},
        aggregate_digest="ff",
        computed_at=datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        skipped_paths=("locked.bin",),
    )


def _record(name: str = "hello") -> AcquiredRepository:
    return AcquiredRepository(
        name=name,
        source_url=f"https://github.com/octo/{name}",
        local_path=f"/work/{name}",
        revision_id="abc123",
        integrity_verified=True,
        isolation_workspace_path=f"/data/workspace/{name}",
    )


def test_missing_registry_loads_empty(tmp_path) -> None:
    """A first run without a registry file starts from an empty state."""
    state = RegistryStore(tmp_path / "config.json").load()

    assert state.list_repositories() == () and state.checksum_registry == {}


def test_save_then_load_restores_records_and_fingerprints(tmp_path) -> None:
    """Saved registries reload with equal records and fingerprints."""
    store = RegistryStore(tmp_path / "nested" / "config.json")
    state = RegistryState()
    state.append_repository(_record("hello"))
    state.append_repository(_record("world"))
    state.put_fingerprint(_fingerprint().source_url, _fingerprint())

    store.save(state)
    loaded = store.load()

    assert loaded.list_repositories() == (_record("hello"), _record("world"))
    assert loaded.get_fingerprint(_fingerprint().source_url) == _fingerprint()
    assert loaded.get_fingerprint(_fingerprint().source_url).skipped_paths == ()


def test_saved_document_uses_registry_keys(tmp_path) -> None:
    """The document keeps installed_repos and checksum_registry top-level keys."""
    store = RegistryStore(tmp_path / "config.json")
    state = RegistryState()
    state.put_fingerprint("https://x/y", _fingerprint())

    store.save(state)
    payload = json.loads(store.path.read_text(encoding="utf-8"))

    assert set(payload) == {"installed_repos", "checksum_registry"}
    assert list(payload["checksum_registry"]["https://x/y"]["file_digests"]) == ["a.txt", "b.txt"]


def test_put_fingerprint_replaces_existing_entry() -> None:
    """Registering twice for one URL keeps only the newest fingerprint."""
    state = RegistryState()
    state.put_fingerprint("u", _fingerprint())
    newer = Fingerprint("u", "def456", {}, "00", datetime.now(timezone.utc))

    state.put_fingerprint("u", newer)

    assert state.get_fingerprint("u") == newer and state.has_fingerprint("u")


@pytest.mark.parametrize(
    "document",
    [
        "{not json",
        "[]",
        '{"installed_repos": {}, "checksum_registry": {}}',
        '{"installed_repos": [{}]}',
    ],
)
def test_malformed_registry_raises(tmp_path, document: str) -> None:
    """Corrupt documents fail loudly instead of being silently reset."""
    path = tmp_path / "config.json"
    path.write_text(document, encoding="utf-8")

    with pytest.raises(GitfetchRegistryError):
        RegistryStore(path).load()
