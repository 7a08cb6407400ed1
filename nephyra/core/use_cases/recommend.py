"""
Recommend use case — the full kernel recommendation run.

Loads preferences, detects the live context, fuses the two, builds the
kernel catalog, scores and ranks every candidate, renders the top-N,
and saves the (possibly seeded) preferences back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from nephyra.adapters.system import SystemProbe
from nephyra.core.config.loader import Settings
from nephyra.core.models.context import Context, DetectedContext
from nephyra.core.models.kernel import ScoredCandidate
from nephyra.core.models.recommendation import Recommendation
from nephyra.core.services.context_detect import detect_context
from nephyra.core.services.kernel_catalog import load_catalog
from nephyra.core.services.preferences import PreferenceStore
from nephyra.core.services.recommend_render import select_recommendations
from nephyra.core.services.scoring import rank_candidates

logger = logging.getLogger(__name__)


@dataclass
class ContextResult:
    """Result of building the fused context."""

    context: Context
    detected: DetectedContext
    store: PreferenceStore
    preferences_saved: bool = False

    def to_dict(self) -> dict:
        return {
            "context": self.context.to_dict(),
            "detected": self.detected.model_dump(mode="json"),
            "preferences_path": str(self.store.path),
            "preferences_saved": self.preferences_saved,
        }


@dataclass
class RecommendResult:
    """Result of the recommend use case."""

    context: Context
    ranked: list[ScoredCandidate] = field(default_factory=list)
    recommendations: list[Recommendation] = field(default_factory=list)
    preferences_saved: bool = False

    @property
    def candidate_count(self) -> int:
        return len(self.ranked)

    def to_dict(self) -> dict:
        return {
            "context": self.context.to_dict(),
            "candidates": self.candidate_count,
            "recommendations": [r.to_dict() for r in self.recommendations],
            "preferences_saved": self.preferences_saved,
        }


def build_context(
    settings: Settings,
    probe: SystemProbe,
    save: bool = True,
) -> ContextResult:
    """Load preferences, detect, and merge.

    Args:
        settings: Runtime settings (preference file location).
        probe: System probe to detect with.
        save: Whether to write seeded preferences back.
    """
    store = PreferenceStore.open(settings.preferences_path)
    detected = detect_context(probe)
    context = store.merge(detected)

    result = ContextResult(context=context, detected=detected, store=store)
    if save:
        result.preferences_saved = store.save()
    return result


def run_recommend(
    settings: Settings,
    probe: SystemProbe,
    save: bool = True,
    enhance: bool | None = None,
    top_n: int | None = None,
) -> RecommendResult:
    """Produce a ranked, explained kernel recommendation.

    Args:
        settings: Runtime settings.
        probe: System probe.
        save: Whether to persist preferences at the end of the run.
        enhance: Override ``settings.enhance``.
        top_n: Override ``settings.top_n``.

    Returns:
        RecommendResult. Probe, parse and persistence failures only
        shrink the result; they never raise.
    """
    ctx = build_context(settings, probe, save=False)
    context = ctx.context

    catalog = load_catalog(
        probe,
        settings.modules_dir,
        context.package_manager,
        enhance=settings.enhance if enhance is None else enhance,
    )

    ranked = rank_candidates(catalog, context)
    recommendations = select_recommendations(
        ranked,
        context,
        top_n=settings.top_n if top_n is None else top_n,
    )
    if recommendations:
        top = recommendations[0]
        logger.info("Top recommendation: %s (score %d)", top.candidate.name, top.score)

    result = RecommendResult(context=context, ranked=ranked, recommendations=recommendations)
    if save:
        result.preferences_saved = ctx.store.save()
    return result
