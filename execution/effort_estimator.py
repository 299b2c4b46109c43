"""Heuristic effort estimation for catalog features.

Accumulates a score from independent signals (dependency counts, category,
description keywords, description length) and maps it to one of four
effort levels with a fixed minute estimate. Purely data-driven.
"""

from dataclasses import dataclass

from execution.feature_catalog import Feature, FeatureCatalog, get_default_catalog

# ---------------------------------------------------------------------------
# Levels
# ---------------------------------------------------------------------------

EFFORT_TRIVIAL = "trivial"
EFFORT_SMALL = "small"
EFFORT_MEDIUM = "medium"
EFFORT_LARGE = "large"

EFFORT_LEVELS = (EFFORT_TRIVIAL, EFFORT_SMALL, EFFORT_MEDIUM, EFFORT_LARGE)

EFFORT_MINUTES = {
    EFFORT_TRIVIAL: 15,
    EFFORT_SMALL: 30,
    EFFORT_MEDIUM: 60,
    EFFORT_LARGE: 120,
}

# ---------------------------------------------------------------------------
# Heuristic signals
# ---------------------------------------------------------------------------

HIGH_EFFORT_CATEGORIES = frozenset({
    "Replication", "Serialization", "Streaming", "Procedural",
    "PostProcess", "Coordination", "Migration", "Automation",
    "Optimization", "Performance",
})

LOW_EFFORT_CATEGORIES = frozenset({
    "Data", "Config", "Tags", "Actions", "Debug",
    "Design", "Settings",
})

COMPLEXITY_KEYWORDS = [
    "multi-phase", "replicated", "serializ", "procedural",
    "async", "thread", "pipeline", "framework", "subsystem",
]

SIMPLE_KEYWORDS = [
    "configure", "setup", "data asset", "enum", "settings",
    "placeholder", "basic", "simple",
]

LONG_DESCRIPTION_CHARS = 80


@dataclass(frozen=True)
class EffortEstimate:
    """Coarse effort level, minute estimate, and the heuristic trace behind it."""

    level: str
    minutes: int
    reason: str


def effort_rank(level: str) -> int:
    """Ordinal of an effort level (trivial=0 ... large=3).

    Raises:
        ValueError: If the level is unknown.
    """
    try:
        return EFFORT_LEVELS.index(level)
    except ValueError:
        raise ValueError(
            f"Unknown effort level '{level}', expected one of {', '.join(EFFORT_LEVELS)}"
        ) from None


def _level_for_score(score: int) -> str:
    if score <= 0:
        return EFFORT_TRIVIAL
    if score <= 2:
        return EFFORT_SMALL
    if score <= 4:
        return EFFORT_MEDIUM
    return EFFORT_LARGE


def estimate_from_definition(feature: Feature) -> EffortEstimate:
    """Estimate effort from a feature's declared attributes."""
    score = 0
    reasons = []

    # More deps = more integration work
    dep_count = len(feature.depends_on)
    if dep_count >= 3:
        score += 2
        reasons.append(f"{dep_count} deps")
    elif dep_count >= 1:
        score += 1

    cross_count = len(feature.cross_module_refs)
    if cross_count >= 2:
        score += 2
        reasons.append("cross-module")
    elif cross_count == 1:
        score += 1

    if feature.category in HIGH_EFFORT_CATEGORIES:
        score += 2
        reasons.append(feature.category)
    elif feature.category in LOW_EFFORT_CATEGORIES:
        score -= 1
        reasons.append(f"simple {feature.category}")

    desc_lower = feature.description.lower()
    for kw in COMPLEXITY_KEYWORDS:
        if kw in desc_lower:
            score += 1
            reasons.append(kw)
            break
    for kw in SIMPLE_KEYWORDS:
        if kw in desc_lower:
            score -= 1
            reasons.append("simple")
            break

    # Description length as a proxy for scope
    if len(feature.description) > LONG_DESCRIPTION_CHARS:
        score += 1

    level = _level_for_score(score)
    return EffortEstimate(
        level=level,
        minutes=EFFORT_MINUTES[level],
        reason=", ".join(reasons) if reasons else "baseline",
    )


def estimate_effort(
    module_id: str,
    feature_name: str,
    catalog: FeatureCatalog | None = None,
) -> EffortEstimate:
    """Estimate effort for a catalog feature.

    Unknown modules or features get a medium/60-minute default instead of
    an error.
    """
    if catalog is None:
        catalog = get_default_catalog()
    if not catalog.features(module_id):
        return EffortEstimate(EFFORT_MEDIUM, EFFORT_MINUTES[EFFORT_MEDIUM], "Unknown module")

    feature = catalog.get(module_id, feature_name)
    if feature is None:
        return EffortEstimate(EFFORT_MEDIUM, EFFORT_MINUTES[EFFORT_MEDIUM], "Unknown feature")

    return estimate_from_definition(feature)


def estimate_total_minutes(
    features: list[tuple[str, str]],
    catalog: FeatureCatalog | None = None,
) -> int:
    """Sum effort minutes over (module_id, feature_name) pairs."""
    if catalog is None:
        catalog = get_default_catalog()
    return sum(
        estimate_effort(module_id, feature_name, catalog).minutes
        for module_id, feature_name in features
    )


def format_effort_time(minutes: int) -> str:
    """Format minutes as "45m", "2h" or "1h 30m"."""
    if minutes < 60:
        return f"{minutes}m"
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m" if mins > 0 else f"{hours}h"
