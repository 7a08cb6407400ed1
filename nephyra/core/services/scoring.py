"""
Scoring engine — rank kernel candidates for a given context.

``score_candidate`` is a pure function: it starts at zero and applies a
fixed table of additive rules in order. Positive rules add a reason;
negative rules set the warning. The warning is overwritten, not
accumulated, so only the last triggered one is reported.

``rank_candidates`` sorts by score, highest first. Python's sort is
stable, so equal scores keep catalog order (installed first, then
enumeration order).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from nephyra.core.models.context import Context, GpuType
from nephyra.core.models.kernel import KernelCandidate, ScoredCandidate, Variant

logger = logging.getLogger(__name__)

# Weights
PROBLEMATIC_PENALTY = -10
ZEN_ON_NON_NVIDIA_PENALTY = -4
EEVDF_BONUS = 6
LTS_BONUS = 4
RT_AUDIO_BONUS = 5
RT_PENALTY = -2
HARDENED_SECURITY_BONUS = 4
HARDENED_PENALTY = -2
STANDARD_BONUS = 2
NVIDIA_VARIANT_PENALTY = -6
AUDIO_HARDWARE_RT_BONUS = 2

_NON_NVIDIA_GPUS = frozenset({GpuType.INTEGRATED, GpuType.AMD, GpuType.INTEL})
_NVIDIA_UNSAFE_VARIANTS = frozenset({Variant.ZEN, Variant.REALTIME, Variant.HARDENED})

DEFAULT_REASON = "no special advantage for this context"

HEADERS_NOTE = (
    "\n  Note: development use detected; install the matching kernel headers"
    "\n  package (<kernel>-headers) to build out-of-tree modules."
)


def score_candidate(candidate: KernelCandidate, context: Context) -> ScoredCandidate:
    """Score one candidate against the fused context."""
    score = 0
    reasons: list[str] = []
    warning: str | None = None
    variant = candidate.variant
    non_nvidia_gpu = context.gpu_type in _NON_NVIDIA_GPUS

    # 1. user denylist
    if any(bad and bad in candidate.name for bad in context.problematic_kernels):
        score += PROBLEMATIC_PENALTY
        warning = "previously marked problematic"

    # 2.
    if variant == Variant.ZEN and non_nvidia_gpu:
        score += ZEN_ON_NON_NVIDIA_PENALTY
        warning = "Zen causes overheating on AMD/Intel GPUs and laptops; prefer EEVDF/LTO variant"

    # 3.
    if (
        "eevdf" in candidate.haystack()
        and context.has_use_case("dev", "gaming", "desktop")
        and non_nvidia_gpu
    ):
        score += EEVDF_BONUS
        reasons.append("EEVDF recommended for desktop/gaming/dev on AMD/Intel")

    # 4.
    if variant == Variant.LTS and context.has_use_case("server", "battery"):
        score += LTS_BONUS
        reasons.append("LTS preferred for server/battery stability")

    # 5.
    if variant == Variant.REALTIME:
        if context.has_use_case("audio"):
            score += RT_AUDIO_BONUS
            reasons.append("RT best for audio/production")
        else:
            score += RT_PENALTY
            warning = "RT not recommended without audio/production need"

    # 6.
    if variant == Variant.HARDENED:
        if context.has_use_case("security"):
            score += HARDENED_SECURITY_BONUS
            reasons.append("Hardened best for security-focused systems")
        else:
            score += HARDENED_PENALTY
            warning = "Hardened not recommended without security need"

    # 7.
    if variant == Variant.STANDARD and context.has_use_case("desktop", "server"):
        score += STANDARD_BONUS
        reasons.append("Standard is a safe default")

    # 8.
    if context.has_nvidia_driver and variant in _NVIDIA_UNSAFE_VARIANTS:
        score += NVIDIA_VARIANT_PENALTY
        warning = "avoid Zen/RT/Hardened with NVIDIA; use LTS/Standard"

    # 9. stacks with rule 5
    if context.has_audio_hardware and variant == Variant.REALTIME:
        score += AUDIO_HARDWARE_RT_BONUS

    # 10.
    needs_headers = context.has_use_case("dev")

    explanation = "; ".join(reasons) if reasons else DEFAULT_REASON
    if warning:
        explanation += f" WARNING: {warning}"
    if needs_headers:
        explanation += HEADERS_NOTE

    return ScoredCandidate(candidate=candidate, score=score, explanation=explanation)


def rank_candidates(
    candidates: Iterable[KernelCandidate],
    context: Context,
) -> list[ScoredCandidate]:
    """Score every candidate and sort by score, highest first (stable)."""
    scored = [score_candidate(c, context) for c in candidates]
    ranked = sorted(scored, key=lambda s: s.score, reverse=True)
    for s in ranked:
        logger.debug("%+d %s", s.score, s.name)
    return ranked
