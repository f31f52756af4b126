"""Workspace preparation, cleanup, and release to the working directory."""

from __future__ import annotations

import shutil
from pathlib import Path

from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


def prepare_workspace(workspace_root: Path, name: str) -> Path:
    """Create an empty per-repository workspace, replacing a stale one."""
    workspace = workspace_root / name
    if workspace.exists():
        shutil.rmtree(workspace)
    workspace.mkdir(parents=True)
    return workspace


def remove_workspace(workspace: Path) -> None:
    """Remove a workspace and everything under it, if present."""
    shutil.rmtree(workspace, ignore_errors=True)
    _LOGGER.info("workspace_removed", workspace=str(workspace))


def materialize_tree(repository_dir: Path, destination_dir: Path) -> Path:
    """Copy a checked-out tree into ``destination_dir``.

    Falls back to the workspace copy when the target already exists or the
    copy fails.

    Returns:
        Path the user should use for the acquired tree.
    """
    target = destination_dir / repository_dir.name
    if target.exists():
        _LOGGER.warning(
            "materialize_target_exists",
            target=str(target),
            fallback=str(repository_dir),
        )
        return repository_dir
    try:
        shutil.copytree(repository_dir, target, symlinks=True)
    except (OSError, shutil.Error) as error:
        _LOGGER.warning(
            "materialize_failed",
            target=str(target),
            fallback=str(repository_dir),
            error=str(error),
        )
        shutil.rmtree(target, ignore_errors=True)
        return repository_dir
    _LOGGER.info("materialized", target=str(target))
    return target
