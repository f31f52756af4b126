"""Read-only git metadata probes for checked-out trees.

These run on the host, so every call disables hooks and fsmonitor and
pins the discovery ceiling to the inspected tree's parent.
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path

from core.constants import GIT_CONFIG_OVERRIDES, GIT_EXECUTABLE, GIT_PROBE_TIMEOUT_SECONDS
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


def read_revision_id(repo_path: Path) -> str | None:
    """Return the commit id checked out at ``repo_path``, if any."""
    return _run_probe(repo_path, ["rev-parse", "HEAD"])


def read_remote_url(repo_path: Path) -> str | None:
    """Return the ``origin`` remote URL of ``repo_path``, if any."""
    return _run_probe(repo_path, ["config", "--get", "remote.origin.url"])


def build_git_config_env() -> dict[str, str]:
    """Environment entries that override git configuration per invocation."""
    env = {"GIT_CONFIG_COUNT": str(len(GIT_CONFIG_OVERRIDES))}
    for index, (key, value) in enumerate(GIT_CONFIG_OVERRIDES):
        env[f"GIT_CONFIG_KEY_{index}"] = key
        env[f"GIT_CONFIG_VALUE_{index}"] = value
    return env


def _run_probe(repo_path: Path, git_arguments: list[str]) -> str | None:
    resolved = repo_path.expanduser().resolve()
    if not resolved.is_dir():
        return None
    env = dict(os.environ)
    env.update(build_git_config_env())
    env["GIT_CEILING_DIRECTORIES"] = str(resolved.parent)
    env["GIT_TERMINAL_PROMPT"] = "0"
    try:
        completed = subprocess.run(
            [GIT_EXECUTABLE, "-C", str(resolved), *git_arguments],
            env=env,
            capture_output=True,
            text=True,
            check=False,
            timeout=GIT_PROBE_TIMEOUT_SECONDS,
        )
    except FileNotFoundError:
        _LOGGER.warning("git_probe_unavailable", executable=GIT_EXECUTABLE)
        return None
    except subprocess.TimeoutExpired:
        _LOGGER.warning("git_probe_timed_out", path=str(resolved), command=git_arguments[0])
        return None
    if completed.returncode != 0:
        return None
    value = completed.stdout.strip()
    return value or None
