"""Next-best-action recommendations for a module's checklist.

Ranks the unchecked checklist items of one module by blending five
components, each capped by its weight:

- urgency (30): the matching feature blocks other features
- success probability (25): pattern success rate and module track record
- impact (20): how many features the matching feature unblocks
- recency (15): evaluator recommendation priority
- readiness (10): the matching feature has all dependencies implemented

All inputs are plain data supplied by the caller; nothing is read from or
written to shared state.
"""

import logging
from dataclasses import dataclass, field

from execution.blocker_evaluator import compute_blockers
from execution.dependency_resolver import build_dependency_map, get_dependents
from execution.feature_catalog import (
    STATUS_IMPLEMENTED,
    FeatureCatalog,
    get_default_catalog,
    get_status,
)
from execution.module_registry import ChecklistItem, ModuleRegistry, get_default_registry

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Scoring weights
# ---------------------------------------------------------------------------

WEIGHT_URGENCY = 30
WEIGHT_SUCCESS_PROB = 25
WEIGHT_IMPACT = 20
WEIGHT_RECENCY = 15
WEIGHT_READINESS = 10

URGENCY_PER_DEPENDENT = 6
IMPACT_PER_DEPENDENT = 4
CRITICAL_URGENCY_FLOOR = 0.8
PATTERN_SHARE = 0.7
MODULE_TRACK_RECORD_SHARE = 0.3
NO_PATTERN_SHARE = 0.5
UNMATCHED_READINESS_SHARE = 0.5
UNKNOWN_READINESS_SHARE = 0.7
NEUTRAL_SUCCESS_RATE = 0.5
PATTERN_SESSION_CAP = 10

PRIORITY_SCORES = {
    "critical": 1.0,
    "high": 0.75,
    "medium": 0.5,
    "low": 0.25,
}

# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------


@dataclass
class ImplementationPattern:
    """A reusable implementation approach with a measured success record."""

    id: str
    title: str
    module_id: str
    tags: list[str] = field(default_factory=list)
    approach: str = ""
    success_rate: float = 0.0
    session_count: int = 0
    pitfalls: list[str] = field(default_factory=list)


@dataclass
class EvaluatorRecommendation:
    module_id: str
    title: str
    priority: str = "medium"


@dataclass
class TaskHistoryEntry:
    module_id: str
    prompt: str
    status: str


@dataclass
class ScoreBreakdown:
    urgency: float = 0
    success_prob: float = 0
    impact: float = 0
    recency: float = 0
    readiness: float = 0

    def total(self) -> float:
        return self.urgency + self.success_prob + self.impact + self.recency + self.readiness


@dataclass
class NBARecommendation:
    item: ChecklistItem
    module_id: str
    score: int
    reason: str
    breakdown: ScoreBreakdown
    success_probability: float
    pattern: ImplementationPattern | None = None
    pitfalls: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


def _first_word(text: str) -> str:
    return text.lower().split(" ")[0]


def _labels_match(label: str, other: str) -> bool:
    """Loose match: either text contains the other's first word."""
    return _first_word(other) in label.lower() or _first_word(label) in other.lower()


def _module_success_rate(history: list[TaskHistoryEntry]) -> float:
    completed = sum(1 for h in history if h.status == "completed")
    failed = sum(1 for h in history if h.status == "failed")
    if completed + failed == 0:
        return NEUTRAL_SUCCESS_RATE
    return completed / (completed + failed)


def _best_pattern(patterns: list[ImplementationPattern]) -> ImplementationPattern:
    best = patterns[0]
    for p in patterns[1:]:
        if (p.success_rate * min(p.session_count, PATTERN_SESSION_CAP)
                > best.success_rate * min(best.session_count, PATTERN_SESSION_CAP)):
            best = p
    return best


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


def compute_nba(
    module_id: str,
    checklist_progress: dict[str, bool],
    feature_status_map: dict[str, str] | None = None,
    *,
    patterns=(),
    evaluator_recommendations=(),
    task_history=(),
    catalog: FeatureCatalog | None = None,
    registry: ModuleRegistry | None = None,
) -> list[NBARecommendation]:
    """Rank a module's unchecked checklist items.

    Args:
        module_id: Module whose checklist is scored.
        checklist_progress: Checklist item id -> checked, for this module.
        feature_status_map: Optional feature key -> status for blocker awareness.
        patterns: ImplementationPattern records (any module; filtered here).
        evaluator_recommendations: EvaluatorRecommendation records.
        task_history: TaskHistoryEntry records.
        catalog: Feature catalog (defaults to the static catalog).
        registry: Module registry (defaults to the static registry).

    Returns:
        Recommendations sorted by score descending. Empty for an unknown
        module, a module without a checklist, or a fully checked one.
    """
    if catalog is None:
        catalog = get_default_catalog()
    if registry is None:
        registry = get_default_registry()

    checklist = registry.checklist(module_id)
    if not checklist:
        return []

    uncompleted = [item for item in checklist if not checklist_progress.get(item.id)]
    if not uncompleted:
        return []

    status_map = feature_status_map or {}
    dep_map = build_dependency_map(catalog)
    blocker_map = compute_blockers(dep_map, status_map)
    module_features = catalog.features(module_id)

    eval_recs = [r for r in evaluator_recommendations if r.module_id == module_id]
    module_patterns = [p for p in patterns if p.module_id == module_id]
    history = [h for h in task_history if h.module_id == module_id]
    failed_prompts = [h.prompt for h in history if h.status == "failed"]
    module_rate = _module_success_rate(history)

    recommendations = []
    for item in uncompleted:
        breakdown = ScoreBreakdown()
        reasons = []
        pitfalls = []
        matched_pattern = None

        feature = next(
            (f for f in module_features if _labels_match(item.label, f.name)),
            None,
        )

        if feature is not None:
            feature_key = str(feature.key)
            dependent_count = len(get_dependents(dep_map, feature_key))

            if dependent_count > 0 and get_status(status_map, feature_key) != STATUS_IMPLEMENTED:
                breakdown.urgency = min(dependent_count * URGENCY_PER_DEPENDENT, WEIGHT_URGENCY)
                plural = "s" if dependent_count > 1 else ""
                reasons.append(f"Unblocks {dependent_count} dependent feature{plural}")

            info = blocker_map.get(feature_key)
            if info is None:
                breakdown.readiness = WEIGHT_READINESS * UNKNOWN_READINESS_SHARE
            elif not info.is_blocked:
                breakdown.readiness = WEIGHT_READINESS
                reasons.append("All dependencies satisfied")
            else:
                breakdown.readiness = 0
                names = [b.feature_name for b in info.blockers[:2]]
                reasons.append(f"Blocked by: {', '.join(names)}")

            breakdown.impact = min(dependent_count * IMPACT_PER_DEPENDENT, WEIGHT_IMPACT)
        else:
            breakdown.readiness = WEIGHT_READINESS * UNMATCHED_READINESS_SHARE

        eval_rec = next((r for r in eval_recs if _labels_match(item.label, r.title)), None)
        if eval_rec is not None:
            priority_score = PRIORITY_SCORES.get(eval_rec.priority, 0)
            breakdown.recency = round(WEIGHT_RECENCY * priority_score)
            if eval_rec.priority == "critical":
                breakdown.urgency = max(breakdown.urgency, WEIGHT_URGENCY * CRITICAL_URGENCY_FLOOR)
            reasons.append(f"Evaluator: {eval_rec.priority} priority")

        label_lower = item.label.lower()
        matching_patterns = [
            p for p in module_patterns
            if _first_word(p.title) in label_lower
            or any(t.lower() in label_lower for t in p.tags)
        ]
        if matching_patterns:
            matched_pattern = _best_pattern(matching_patterns)
            pattern_score = matched_pattern.success_rate * WEIGHT_SUCCESS_PROB * PATTERN_SHARE
            module_score = module_rate * WEIGHT_SUCCESS_PROB * MODULE_TRACK_RECORD_SHARE
            breakdown.success_prob = round(pattern_score + module_score)
            pitfalls.extend(matched_pattern.pitfalls)
            reasons.append(
                f"{round(matched_pattern.success_rate * 100)}% success rate "
                f"({matched_pattern.approach} approach, {matched_pattern.session_count} sessions)"
            )
        else:
            breakdown.success_prob = round(module_rate * WEIGHT_SUCCESS_PROB * NO_PATTERN_SHARE)

        first = _first_word(item.label)
        if any(first in prompt.lower() for prompt in failed_prompts):
            pitfalls.append("Previous failure on similar task")

        recommendations.append(NBARecommendation(
            item=item,
            module_id=module_id,
            score=round(breakdown.total()),
            reason=reasons[0] if reasons else "Next uncompleted item",
            breakdown=breakdown,
            success_probability=(
                matched_pattern.success_rate if matched_pattern else module_rate
            ),
            pattern=matched_pattern,
            pitfalls=list(dict.fromkeys(pitfalls)),
        ))

    recommendations.sort(key=lambda r: r.score, reverse=True)
    logger.debug(
        "Ranked %d checklist items for module '%s'", len(recommendations), module_id,
    )
    return recommendations


def get_top_recommendation(
    module_id: str,
    checklist_progress: dict[str, bool],
    feature_status_map: dict[str, str] | None = None,
    **kwargs,
) -> NBARecommendation | None:
    """The single best next action for a module, or None."""
    recs = compute_nba(module_id, checklist_progress, feature_status_map, **kwargs)
    return recs[0] if recs else None
