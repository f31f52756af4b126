"""Trust-mode decision table.

This module maps a trust mode and the facts known at one decision point
onto proceed, prompt, or abort. It performs no I/O and holds no state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, cast

from core.errors import GitfetchConfigError
from core.types import TrustMode

DecisionPoint = Literal[
    "preflight",
    "before_fetch",
    "after_verification",
    "after_scan",
    "before_materialize",
]
TrustAction = Literal["proceed", "prompt", "abort"]
SUPPORTED_TRUST_MODES: tuple[TrustMode, ...] = ("paranoid", "normal", "yolo")

_PROMPT_MESSAGES: dict[DecisionPoint, str] = {
    "before_fetch": "WARNING: Clone from untrusted source?\nProceed? (yes/no)",
    "after_verification": "Verification failed. Proceed? (yes/no)",
    "after_scan": "Suspicious code detected. Proceed? (yes/no)",
    "before_materialize": "Copy to current directory? (yes/no)",
}


@dataclass(frozen=True)
class TrustContext:
    """Facts available at one decision point.

    Attributes:
        decision_point: Which pipeline gate is being evaluated.
        fingerprint_known: Whether the registry holds a fingerprint for the source.
        fingerprint_required: Whether the caller demanded checksum verification.
        verification_passed: Verification outcome, or None when none ran.
        finding_count: Number of scan findings.
    """

    decision_point: DecisionPoint
    fingerprint_known: bool = False
    fingerprint_required: bool = False
    verification_passed: bool | None = None
    finding_count: int = 0


@dataclass(frozen=True)
class TrustDecision:
    """Action to take at a decision point, with the prompt text if any."""

    action: TrustAction
    message: str | None = None


PROCEED = TrustDecision(action="proceed")


def parse_trust_mode(raw_value: str) -> TrustMode:
    """Validate a user supplied trust mode name.

    Raises:
        GitfetchConfigError: If the name is not a supported mode.
    """
    normalized = raw_value.strip().lower()
    if normalized not in SUPPORTED_TRUST_MODES:
        raise GitfetchConfigError(
            f"Unsupported trust mode '{raw_value}'. "
            f"Use one of: {', '.join(SUPPORTED_TRUST_MODES)}."
        )
    return cast(TrustMode, normalized)


def decide(trust_mode: TrustMode, context: TrustContext) -> TrustDecision:
    """Decide what the pipeline does at one decision point.

    Args:
        trust_mode: Prompting policy for the invocation.
        context: Facts known at the decision point.

    Returns:
        Proceed, a prompt carrying its message, or abort.
    """
    point = context.decision_point
    if point == "preflight":
        if context.fingerprint_required and not context.fingerprint_known:
            return TrustDecision(
                action="abort",
                message="No checksum registry found (--verify-checksum specified)",
            )
        return PROCEED
    if point == "before_fetch":
        return _prompt_if(point, _should_prompt_before_fetch(trust_mode, context))
    if point == "after_verification":
        failed = context.verification_passed is False
        return _prompt_if(point, failed and trust_mode != "yolo")
    if point == "after_scan":
        return _prompt_if(point, context.finding_count > 0 and trust_mode == "paranoid")
    if point == "before_materialize":
        return _prompt_if(point, trust_mode == "paranoid")
    raise GitfetchConfigError(f"Unknown decision point '{point}'.")


def _should_prompt_before_fetch(trust_mode: TrustMode, context: TrustContext) -> bool:
    if trust_mode == "paranoid":
        return True
    if trust_mode == "yolo":
        return False
    return not context.fingerprint_known


def _prompt_if(point: DecisionPoint, condition: bool) -> TrustDecision:
    if not condition:
        return PROCEED
    return TrustDecision(action="prompt", message=_PROMPT_MESSAGES[point])
