"""Deterministic directory-tree fingerprints.

This module hashes every tracked file under a root and folds the sorted
``(relative_path, digest)`` pairs into one aggregate digest, so two trees
with identical content always agree regardless of walk order.
"""

from __future__ import annotations

import hashlib
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Mapping

from core.constants import (
    HASH_ALGORITHM,
    HIDDEN_NAME_PREFIX,
    IGNORED_DIRECTORY_NAMES,
    READ_BUFFER_SIZE,
    SYMLINK_DIGEST_PREFIX,
    UNKNOWN_VALUE,
)
from core.errors import GitfetchIntegrityError
from core.logging_config import get_logger
from core.types import Fingerprint
from sandbox.git_probe import read_remote_url, read_revision_id

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class TreeDigests:
    """Per-file digests of one walk plus files that could not be read."""

    file_digests: dict[str, str]
    skipped_paths: tuple[str, ...]


def compute_fingerprint(
    root_directory: Path,
    source_url: str | None = None,
    revision_id: str | None = None,
) -> Fingerprint:
    """Compute the integrity fingerprint of a directory tree.

    A missing root yields an empty fingerprint so partial acquisitions can
    still be recorded.

    Args:
        root_directory: Tree to fingerprint.
        source_url: Known source URL; probed from git metadata when omitted.
        revision_id: Known revision; probed from git metadata when omitted.

    Returns:
        Immutable fingerprint of the tree.

    Raises:
        GitfetchIntegrityError: If the root exists but cannot be listed.
    """
    root = root_directory.expanduser()
    tree = collect_file_digests(root)
    if source_url is None:
        source_url = read_remote_url(root) or UNKNOWN_VALUE
    if revision_id is None:
        revision_id = read_revision_id(root) or UNKNOWN_VALUE
    if tree.skipped_paths:
        _LOGGER.warning(
            "fingerprint_skipped_files",
            root=str(root),
            skipped_count=len(tree.skipped_paths),
        )
    return Fingerprint(
        source_url=source_url,
        revision_id=revision_id,
        file_digests=tree.file_digests,
        aggregate_digest=aggregate_digest(tree.file_digests),
        computed_at=datetime.now(timezone.utc),
        skipped_paths=tree.skipped_paths,
    )


def collect_file_digests(root_directory: Path) -> TreeDigests:
    """Walk a tree and digest every tracked regular file and symlink.

    Symlinks are recorded by their target string and never followed.
    Hidden entries and dependency/build directories are not tracked. Files
    and subdirectories that cannot be read are reported as skipped.

    Raises:
        GitfetchIntegrityError: If the root exists but cannot be listed.
    """
    file_digests: dict[str, str] = {}
    skipped_paths: list[str] = []
    if not root_directory.exists():
        return TreeDigests(file_digests=file_digests, skipped_paths=())
    try:
        root_entries = _list_directory(root_directory)
    except OSError as error:
        raise GitfetchIntegrityError(
            f"Failed to read fingerprint root {root_directory}: {error}."
        ) from error
    pending: list[tuple[str, list[os.DirEntry[str]]]] = [("", root_entries)]
    while pending:
        prefix, entries = pending.pop()
        for entry in entries:
            if is_untracked_name(entry.name):
                continue
            relative_path = f"{prefix}{entry.name}"
            try:
                if entry.is_symlink():
                    file_digests[relative_path] = hash_symlink(Path(entry.path))
                elif entry.is_dir(follow_symlinks=False):
                    pending.append((f"{relative_path}/", _list_directory(Path(entry.path))))
                elif entry.is_file(follow_symlinks=False):
                    file_digests[relative_path] = hash_file(Path(entry.path))
            except OSError:
                skipped_paths.append(relative_path)
    return TreeDigests(file_digests=file_digests, skipped_paths=tuple(sorted(skipped_paths)))


def is_untracked_name(name: str) -> bool:
    """Whether a directory entry name is excluded from tracking."""
    return name.startswith(HIDDEN_NAME_PREFIX) or name in IGNORED_DIRECTORY_NAMES


def hash_file(file_path: Path) -> str:
    """Stream one file through the configured digest.

    Args:
        file_path: File to hash.

    Returns:
        Hex digest string.
    """
    hasher = hashlib.new(HASH_ALGORITHM)
    with file_path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(READ_BUFFER_SIZE), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


def hash_symlink(link_path: Path) -> str:
    """Digest a symbolic link by its target string, without following it."""
    hasher = hashlib.new(HASH_ALGORITHM)
    hasher.update(SYMLINK_DIGEST_PREFIX)
    hasher.update(os.fsencode(os.readlink(link_path)))
    return hasher.hexdigest()


def aggregate_digest(file_digests: Mapping[str, str]) -> str:
    """Fold per-file digests into one digest in byte-wise path order."""
    hasher = hashlib.new(HASH_ALGORITHM)
    for relative_path, digest in _sorted_entries(file_digests.items()):
        hasher.update(_path_bytes(relative_path))
        hasher.update(digest.encode("ascii"))
    return hasher.hexdigest()


def _sorted_entries(entries: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
    return sorted(entries, key=lambda entry: _path_bytes(entry[0]))


def _path_bytes(relative_path: str) -> bytes:
    return relative_path.encode("utf-8", "surrogateescape")


def _list_directory(directory: Path) -> list[os.DirEntry[str]]:
    with os.scandir(directory) as iterator:
        return list(iterator)
