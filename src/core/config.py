"""Runtime configuration model for Gitfetch.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_DATA_ROOT,
    DEFAULT_GITHUB_API_URL,
    DEFAULT_GITHUB_URL,
    DEFAULT_SANDBOX_TIMEOUT_SECONDS,
    WORKSPACE_DIR_NAME,
)
from core.errors import GitfetchConfigError


@dataclass(frozen=True)
class GitfetchConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory holding isolation workspaces.
        config_path: JSON file storing the acquisition and checksum registry.
        sandbox_timeout_seconds: Wall-clock limit for one isolated stage.
        github_url: Base URL used to expand ``owner/name`` shorthand.
        github_api_url: Base URL of the repository search API.
    """

    data_root: Path
    config_path: Path
    sandbox_timeout_seconds: int
    github_url: str
    github_api_url: str

    @property
    def workspace_root(self) -> Path:
        """Directory under which per-repository workspaces are created."""
        return self.data_root / WORKSPACE_DIR_NAME

    @classmethod
    def from_env(cls) -> "GitfetchConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            GitfetchConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("GITFETCH_HOME", str(DEFAULT_DATA_ROOT))
        config_path_value = os.getenv("GITFETCH_CONFIG_PATH", str(DEFAULT_CONFIG_PATH))
        timeout_value = os.getenv(
            "GITFETCH_SANDBOX_TIMEOUT", str(DEFAULT_SANDBOX_TIMEOUT_SECONDS)
        )
        github_url = os.getenv("GITFETCH_GITHUB_URL", DEFAULT_GITHUB_URL)
        github_api_url = os.getenv("GITFETCH_GITHUB_API_URL", DEFAULT_GITHUB_API_URL)
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            config_path=Path(config_path_value).expanduser().resolve(),
            sandbox_timeout_seconds=_parse_timeout(timeout_value),
            github_url=github_url.rstrip("/"),
            github_api_url=github_api_url.rstrip("/"),
        )


def _parse_timeout(raw_value: str) -> int:
    """Parse the sandbox timeout environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed positive number of seconds.

    Raises:
        GitfetchConfigError: If value is not a positive integer.
    """
    try:
        timeout_seconds = int(raw_value)
    except ValueError as error:
        raise GitfetchConfigError(
            "Invalid GITFETCH_SANDBOX_TIMEOUT value: "
            f"expected integer, got '{raw_value}'. "
            "Set GITFETCH_SANDBOX_TIMEOUT to a number of seconds."
        ) from error
    if timeout_seconds <= 0:
        raise GitfetchConfigError(
            "Invalid GITFETCH_SANDBOX_TIMEOUT value: "
            f"expected a positive integer, got {timeout_seconds}."
        )
    return timeout_seconds
