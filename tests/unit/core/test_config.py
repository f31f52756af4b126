"""Unit tests for core config parsing."""

from __future__ import annotations

import pytest

from core.config import GitfetchConfig
from core.errors import GitfetchConfigError


def test_from_env_reads_home_and_config_path(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Config should resolve data root and registry path from environment."""
    monkeypatch.setenv("GITFETCH_HOME", str(tmp_path / "home"))
    monkeypatch.setenv("GITFETCH_CONFIG_PATH", str(tmp_path / "registry.json"))

    config = GitfetchConfig.from_env()

    assert config.workspace_root == tmp_path / "home" / "workspace"
    assert config.config_path.name == "registry.json"


def test_from_env_defaults_timeout_and_github_url(monkeypatch: pytest.MonkeyPatch) -> None:
    """Unset variables should fall back to documented defaults."""
    monkeypatch.delenv("GITFETCH_SANDBOX_TIMEOUT", raising=False)
    monkeypatch.setenv("GITFETCH_GITHUB_URL", "https://git.example.com/")

    config = GitfetchConfig.from_env()

    assert config.sandbox_timeout_seconds == 300 and config.github_url == "https://git.example.com"


@pytest.mark.parametrize("raw_timeout", ["soon", "0", "-5"])
def test_from_env_raises_for_invalid_timeout(
    monkeypatch: pytest.MonkeyPatch,
    raw_timeout: str,
) -> None:
    """Config should fail for non-numeric or non-positive timeouts."""
    monkeypatch.setenv("GITFETCH_SANDBOX_TIMEOUT", raw_timeout)

    with pytest.raises(GitfetchConfigError):
        GitfetchConfig.from_env()
