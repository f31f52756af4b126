"""Two-stage isolated fetch and checkout protocol.

The fetch stage may reach the network but never materializes a working
tree; the checkout stage materializes the tree with no network access.
No single stage both reaches the network and runs repository content.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from core.errors import CheckoutFailedError, FetchFailedError, GitfetchSourceError
from core.logging_config import get_logger
from core.types import ResolvedSource
from sandbox.isolation import IsolatedExecutor

_LOGGER = get_logger(__name__)

StageName = Literal["fetch", "checkout"]


def fetch_arguments(source: ResolvedSource) -> list[str]:
    """Tool arguments of the fetch stage."""
    return ["clone", "--no-checkout", "--", source.url, source.name]


def validate_revision(revision: str) -> str:
    """Reject revisions the tool could parse as an option.

    Raises:
        GitfetchSourceError: If the revision is empty or starts with a dash.
    """
    if not revision or revision.startswith("-"):
        raise GitfetchSourceError(f"Invalid revision '{revision}'.")
    return revision


def checkout_arguments(revision: str) -> list[str]:
    """Tool arguments of the checkout stage."""
    return ["checkout", "--force", validate_revision(revision)]


def run_fetch_stage(
    executor: IsolatedExecutor,
    workspace: Path,
    source: ResolvedSource,
    timeout_seconds: int,
) -> Path:
    """Clone without checkout into ``workspace`` with network enabled.

    Returns:
        Path of the cloned repository inside the workspace.

    Raises:
        FetchFailedError: If the tool fails or the timeout fires.
    """
    _log_stage_start("fetch", workspace, allow_network=True)
    result = executor.run_isolated(
        workspace,
        fetch_arguments(source),
        allow_network=True,
        timeout_seconds=timeout_seconds,
    )
    if not result.succeeded:
        raise FetchFailedError(result.failure_reason())
    _LOGGER.info("stage_completed", stage="fetch", workspace=str(workspace))
    return workspace / source.name


def run_checkout_stage(
    executor: IsolatedExecutor,
    repository_dir: Path,
    revision: str,
    timeout_seconds: int,
) -> None:
    """Force checkout ``revision`` inside ``repository_dir`` with no network.

    Raises:
        CheckoutFailedError: If the tool fails or the timeout fires.
    """
    arguments = checkout_arguments(revision)
    _log_stage_start("checkout", repository_dir, allow_network=False)
    result = executor.run_isolated(
        repository_dir,
        arguments,
        allow_network=False,
        timeout_seconds=timeout_seconds,
    )
    if not result.succeeded:
        raise CheckoutFailedError(result.failure_reason())
    _LOGGER.info("stage_completed", stage="checkout", workspace=str(repository_dir))


def _log_stage_start(stage: StageName, workspace: Path, allow_network: bool) -> None:
    _LOGGER.info(
        "stage_started",
        stage=stage,
        workspace=str(workspace),
        allow_network=allow_network,
    )
