"""Unit tests for the bubblewrap isolation profile and executor."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from core.errors import IsolationUnavailableError
from sandbox.isolation import (
    BubblewrapExecutor,
    ExecutionResult,
    IsolationProfile,
    build_isolation_command,
)


def _command(tmp_path: Path, allow_network: bool) -> list[str]:
    profile = IsolationProfile(workspace=tmp_path, allow_network=allow_network, timeout_seconds=9)
    return build_isolation_command(profile, ["checkout", "--force", "HEAD"])


def _pairs(command: list[str], flag: str) -> list[tuple[str, str]]:
    return [
        (command[index + 1], command[index + 2])
        for index, item in enumerate(command)
        if item == flag
    ]


def test_host_system_mounts_are_read_only(tmp_path) -> None:
    """System directories are bound read-only; only the workspace is writable."""
    command = _command(tmp_path, allow_network=False)

    bound = _pairs(command, "--ro-bind") + _pairs(command, "--ro-bind-try")
    read_only = {source for source, _ in bound}
    writable = _pairs(command, "--bind")

    assert {"/usr", "/etc", "/bin", "/lib"} <= read_only
    assert writable == [(str(tmp_path), "/workspace")]


def test_namespaces_are_isolated_and_capabilities_dropped(tmp_path) -> None:
    """Pid, uts, and cgroup namespaces are unshared and all capabilities dropped."""
    command = _command(tmp_path, allow_network=True)

    namespaces = {"--unshare-pid", "--unshare-uts", "--unshare-cgroup", "--die-with-parent"}
    assert namespaces <= set(command)
    assert command[command.index("--cap-drop") + 1] == "ALL"


def test_network_is_unshared_only_when_disallowed(tmp_path) -> None:
    """The network namespace is removed exactly when network is not allowed."""
    assert "--unshare-net" in _command(tmp_path, allow_network=False)
    assert "--unshare-net" not in _command(tmp_path, allow_network=True)


def test_environment_is_cleared_and_hooks_disabled(tmp_path) -> None:
    """The environment is rebuilt from scratch with hooks pointed at /dev/null."""
    command = _command(tmp_path, allow_network=False)
    env = dict(_pairs(command, "--setenv"))
    overrides = {
        env[f"GIT_CONFIG_KEY_{index}"]: env[f"GIT_CONFIG_VALUE_{index}"]
        for index in range(int(env["GIT_CONFIG_COUNT"]))
    }

    assert command.index("--clearenv") < command.index("--setenv")
    assert env["HOME"] == "/workspace" and env["PATH"] == "/usr/bin:/bin"
    assert overrides["core.hooksPath"] == "/dev/null"


def test_wrapped_command_comes_last(tmp_path) -> None:
    """The version-control tool and its arguments terminate the vector."""
    command = _command(tmp_path, allow_network=False)

    assert command[0] == "bwrap" and command[-4:] == ["git", "checkout", "--force", "HEAD"]


def test_ensure_available_raises_when_bwrap_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    """A missing bubblewrap binary is a distinct pre-flight error."""
    monkeypatch.setattr("sandbox.isolation.shutil.which", lambda name: None)

    with pytest.raises(IsolationUnavailableError):
        BubblewrapExecutor().ensure_available()


def test_run_isolated_passes_timeout_and_reports_exit_code(
    tmp_path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """The executor enforces the timeout and maps the exit status."""
    captured: dict[str, object] = {}

    def _fake_run(command, **kwargs):
        captured["command"] = command
        captured["timeout"] = kwargs["timeout"]
        return subprocess.CompletedProcess(command, 128, stdout="", stderr="fatal: boom\n")

    monkeypatch.setattr("sandbox.isolation.subprocess.run", _fake_run)

    result = BubblewrapExecutor().run_isolated(tmp_path, ["clone", "x"], True, 42)

    assert captured["timeout"] == 42
    assert result == ExecutionResult(returncode=128, stderr="fatal: boom\n")
    assert result.failure_reason() == "exit code 128: fatal: boom"


def test_run_isolated_treats_timeout_as_failure(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Timeout expiry is a failed result rather than a hang or crash."""

    def _fake_run(command, **kwargs):
        raise subprocess.TimeoutExpired(command, kwargs["timeout"])

    monkeypatch.setattr("sandbox.isolation.subprocess.run", _fake_run)

    result = BubblewrapExecutor().run_isolated(tmp_path, ["clone", "x"], True, 1)

    assert result.timed_out and not result.succeeded and result.failure_reason() == "timed out"


def test_run_isolated_raises_when_bwrap_cannot_execute(
    tmp_path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """A vanished bubblewrap binary never falls back to an unsandboxed run."""

    def _fake_run(command, **kwargs):
        raise FileNotFoundError(2, "No such file", command[0])

    monkeypatch.setattr("sandbox.isolation.subprocess.run", _fake_run)

    with pytest.raises(IsolationUnavailableError):
        BubblewrapExecutor().run_isolated(tmp_path, ["clone", "x"], True, 1)
