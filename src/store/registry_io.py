"""JSON I/O and payload codecs for the registry document."""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Any

from core.errors import GitfetchRegistryError
from core.types import AcquiredRepository, Fingerprint


def read_json_file(payload_path: Path, default_value: object | None = None) -> object:
    """Read JSON payload from disk with optional default when missing."""
    if default_value is not None and not payload_path.exists():
        return default_value
    try:
        return json.loads(payload_path.read_text(encoding="utf-8"))
    except FileNotFoundError as error:
        raise GitfetchRegistryError(f"Missing registry file at {payload_path}.") from error
    except json.JSONDecodeError as error:
        raise GitfetchRegistryError(
            f"Failed to parse JSON at {payload_path}: {error.msg}. "
            "Fix or remove the registry file."
        ) from error
    except OSError as error:
        raise GitfetchRegistryError(
            f"Failed to read registry file {payload_path}: {error}."
        ) from error


def write_json_file(payload_path: Path, payload: object) -> None:
    """Write one JSON payload to disk with traceable errors."""
    try:
        payload_path.parent.mkdir(parents=True, exist_ok=True)
        payload_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    except OSError as error:
        raise GitfetchRegistryError(
            f"Failed to write registry file {payload_path}: {error}."
        ) from error


def fingerprint_to_payload(fingerprint: Fingerprint) -> dict[str, Any]:
    """Serialize a fingerprint; skipped paths are not persisted."""
    return {
        "source_url": fingerprint.source_url,
        "revision_id": fingerprint.revision_id,
        "file_digests": dict(sorted(fingerprint.file_digests.items())),
        "aggregate_digest": fingerprint.aggregate_digest,
        "computed_at": fingerprint.computed_at.isoformat(),
    }


def fingerprint_from_payload(payload: object, source: Path) -> Fingerprint:
    """Deserialize one fingerprint payload.

    Raises:
        GitfetchRegistryError: If required fields are missing or malformed.
    """
    try:
        if not isinstance(payload, dict) or not isinstance(payload["file_digests"], dict):
            raise TypeError("expected object with file_digests mapping")
        return Fingerprint(
            source_url=str(payload["source_url"]),
            revision_id=str(payload["revision_id"]),
            file_digests={
                str(path): str(digest) for path, digest in payload["file_digests"].items()
            },
            aggregate_digest=str(payload["aggregate_digest"]),
            computed_at=datetime.fromisoformat(str(payload["computed_at"])),
        )
    except (KeyError, TypeError, ValueError) as error:
        raise GitfetchRegistryError(f"Invalid fingerprint entry in {source}: {error}.") from error


def repository_to_payload(record: AcquiredRepository) -> dict[str, Any]:
    """Serialize an acquired-repository record."""
    return asdict(record)


def repository_from_payload(payload: object, source: Path) -> AcquiredRepository:
    """Deserialize one acquired-repository record.

    Raises:
        GitfetchRegistryError: If required fields are missing or malformed.
    """
    try:
        if not isinstance(payload, dict):
            raise TypeError("expected object")
        return AcquiredRepository(
            name=str(payload["name"]),
            source_url=str(payload["source_url"]),
            local_path=str(payload["local_path"]),
            revision_id=_optional_str(payload.get("revision_id")),
            integrity_verified=bool(payload["integrity_verified"]),
            isolation_workspace_path=_optional_str(payload.get("isolation_workspace_path")),
        )
    except (KeyError, TypeError) as error:
        raise GitfetchRegistryError(f"Invalid repository entry in {source}: {error}.") from error


def _optional_str(value: object) -> str | None:
    return str(value) if value else None
