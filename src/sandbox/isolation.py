"""Bubblewrap isolation profile and executor.

Every version-control invocation runs inside a fresh profile: read-only
host system mounts, one writable workspace, isolated pid/uts/cgroup
namespaces, no capabilities, a cleared environment with hooks disabled,
and optionally no network namespace access.
"""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Sequence

from core.constants import (
    GIT_EXECUTABLE,
    SANDBOX_DEVICE_BINDS,
    SANDBOX_EXECUTABLE,
    SANDBOX_OPTIONAL_RO_BINDS,
    SANDBOX_PATH,
    SANDBOX_REQUIRED_RO_BINDS,
    SANDBOX_WORKSPACE_MOUNT,
)
from core.errors import IsolationUnavailableError
from core.logging_config import get_logger
from sandbox.git_probe import build_git_config_env

_LOGGER = get_logger(__name__)
_OUTPUT_TAIL_CHARS = 2000

_INSTALL_HINT = (
    "Install bubblewrap for sandboxing: "
    "Ubuntu/Debian 'sudo apt install bubblewrap', "
    "Arch 'sudo pacman -S bubblewrap', "
    "Fedora/RHEL 'sudo dnf install bubblewrap'."
)


@dataclass(frozen=True)
class IsolationProfile:
    """Restrictions applied to one isolated invocation.

    Attributes:
        workspace: Host directory bound read-write at the workspace mount.
        allow_network: Whether the network namespace is shared with the host.
        timeout_seconds: Wall-clock limit for the whole invocation.
    """

    workspace: Path
    allow_network: bool
    timeout_seconds: int


@dataclass(frozen=True)
class ExecutionResult:
    """Exit status and output tail of one isolated invocation."""

    returncode: int
    stderr: str = ""
    timed_out: bool = False

    @property
    def succeeded(self) -> bool:
        """Whether the wrapped tool exited zero within the timeout."""
        return self.returncode == 0 and not self.timed_out

    def failure_reason(self) -> str:
        """Human readable reason for a failed invocation."""
        if self.timed_out:
            return "timed out"
        detail = self.stderr.strip().splitlines()[-1] if self.stderr.strip() else ""
        reason = f"exit code {self.returncode}"
        return f"{reason}: {detail}" if detail else reason


class IsolatedExecutor(Protocol):
    """Capability for running the version-control tool in isolation."""

    def ensure_available(self) -> None:
        """Fail with IsolationUnavailableError when isolation is missing."""

    def run_isolated(
        self,
        workspace_directory: Path,
        tool_arguments: Sequence[str],
        allow_network: bool,
        timeout_seconds: int,
    ) -> ExecutionResult:
        """Run the tool with ``tool_arguments`` inside a fresh profile."""


def build_isolation_command(
    profile: IsolationProfile,
    tool_arguments: Sequence[str],
) -> list[str]:
    """Build the bubblewrap argument vector for one invocation.

    Args:
        profile: Mount, namespace, and network restrictions.
        tool_arguments: Arguments passed to the version-control tool.

    Returns:
        Full argument vector starting with the bubblewrap executable.
    """
    command = [SANDBOX_EXECUTABLE]
    for mount in SANDBOX_REQUIRED_RO_BINDS:
        command.extend(["--ro-bind", mount, mount])
    for mount in SANDBOX_OPTIONAL_RO_BINDS:
        command.extend(["--ro-bind-try", mount, mount])
    command.extend(["--proc", "/proc"])
    for device in SANDBOX_DEVICE_BINDS:
        command.extend(["--dev-bind", device, device])
    command.extend(["--tmpfs", "/tmp"])
    command.extend(["--bind", str(profile.workspace), SANDBOX_WORKSPACE_MOUNT])
    command.extend(["--chdir", SANDBOX_WORKSPACE_MOUNT])
    command.extend(
        [
            "--unshare-pid",
            "--unshare-uts",
            "--unshare-cgroup",
            "--die-with-parent",
            "--cap-drop",
            "ALL",
        ]
    )
    if not profile.allow_network:
        command.append("--unshare-net")
    command.append("--clearenv")
    for key, value in _sandbox_environment().items():
        command.extend(["--setenv", key, value])
    command.append(GIT_EXECUTABLE)
    command.extend(tool_arguments)
    return command


class BubblewrapExecutor:
    """Runs the version-control tool under bubblewrap."""

    def ensure_available(self) -> None:
        """Check that bubblewrap is on PATH.

        Raises:
            IsolationUnavailableError: If bubblewrap is not installed.
        """
        if shutil.which(SANDBOX_EXECUTABLE) is None:
            raise IsolationUnavailableError(
                f"Bubblewrap ('{SANDBOX_EXECUTABLE}') not found. {_INSTALL_HINT}"
            )

    def run_isolated(
        self,
        workspace_directory: Path,
        tool_arguments: Sequence[str],
        allow_network: bool,
        timeout_seconds: int,
    ) -> ExecutionResult:
        """Run one isolated invocation to completion or timeout.

        Raises:
            IsolationUnavailableError: If bubblewrap vanished since pre-flight.
        """
        profile = IsolationProfile(
            workspace=workspace_directory.resolve(),
            allow_network=allow_network,
            timeout_seconds=timeout_seconds,
        )
        command = build_isolation_command(profile, tool_arguments)
        _LOGGER.info(
            "isolated_invocation_started",
            workspace=str(profile.workspace),
            allow_network=allow_network,
            tool_arguments=list(tool_arguments),
        )
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                check=False,
                timeout=profile.timeout_seconds,
            )
        except FileNotFoundError as error:
            raise IsolationUnavailableError(
                f"Failed to execute '{SANDBOX_EXECUTABLE}': {error}. {_INSTALL_HINT}"
            ) from error
        except subprocess.TimeoutExpired as error:
            return ExecutionResult(
                returncode=124,
                stderr=_tail(error.stderr),
                timed_out=True,
            )
        return ExecutionResult(returncode=completed.returncode, stderr=_tail(completed.stderr))


def _sandbox_environment() -> dict[str, str]:
    env = {
        "PATH": SANDBOX_PATH,
        "HOME": SANDBOX_WORKSPACE_MOUNT,
        "GIT_TERMINAL_PROMPT": "0",
    }
    env.update(build_git_config_env())
    return env


def _tail(output: str | bytes | None) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        output = output.decode("utf-8", "replace")
    return output[-_OUTPUT_TAIL_CHARS:]
