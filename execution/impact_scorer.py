"""Impact scoring: how much work does implementing a feature unlock?

For each unimplemented feature, simulate implementing it and cascade
through the reverse dependency graph. A dependent becomes unblocked once
all of its direct dependencies are in the running implemented set, and
then cascades further.

Direct unblocks are weighted double:

    score = 2 * direct_unblocks + transitive_unblocks
"""

import logging
from collections import deque
from dataclasses import dataclass

from execution.dependency_resolver import (
    DependencyInfo,
    build_dependency_map,
    build_reverse_dependency_map,
)
from execution.feature_catalog import FeatureCatalog

logger = logging.getLogger(__name__)

DIRECT_UNBLOCK_WEIGHT = 2


@dataclass(frozen=True)
class ImpactScore:
    direct_unblocks: int = 0
    transitive_unblocks: int = 0
    score: int = 0
    direct_dependents: tuple[str, ...] = ()


EMPTY_IMPACT = ImpactScore()


def _cascade(
    feature_key: str,
    reverse_map: dict[str, list[str]],
    dep_map: dict[str, DependencyInfo],
    implemented_keys: set[str],
) -> tuple[list[str], set[str]]:
    """BFS unlock cascade seeded with implemented_keys plus feature_key."""
    now_implemented = set(implemented_keys)
    now_implemented.add(feature_key)
    transitive: set[str] = set()
    direct: list[str] = []
    queue = deque([feature_key])

    while queue:
        current = queue.popleft()
        for dependent in reverse_map.get(current, []):
            if dependent in transitive or dependent in now_implemented:
                continue

            info = dep_map.get(dependent)
            if info is None:
                continue

            if all(dep.key in now_implemented for dep in info.deps):
                transitive.add(dependent)
                now_implemented.add(dependent)
                queue.append(dependent)
                if current == feature_key:
                    direct.append(dependent)

    return direct, transitive


def compute_impact_scores(
    catalog: FeatureCatalog,
    implemented_keys: set[str],
    dep_map: dict[str, DependencyInfo] | None = None,
) -> dict[str, ImpactScore]:
    """Compute impact scores for every unimplemented feature.

    Args:
        catalog: The feature catalog.
        implemented_keys: Keys already implemented in the current snapshot.
        dep_map: Optional precomputed dependency map for this catalog.

    Returns:
        Dict of feature key -> ImpactScore. Implemented features are absent.
    """
    dep_map = dep_map if dep_map is not None else build_dependency_map(catalog)
    reverse_map = build_reverse_dependency_map(catalog)
    scores = {}

    for feat in catalog.all_features():
        key = str(feat.key)
        if key in implemented_keys:
            continue

        direct, transitive = _cascade(key, reverse_map, dep_map, implemented_keys)
        scores[key] = ImpactScore(
            direct_unblocks=len(direct),
            transitive_unblocks=len(transitive),
            score=len(direct) * DIRECT_UNBLOCK_WEIGHT + len(transitive),
            direct_dependents=tuple(direct),
        )

    logger.debug(
        "Scored impact for %d unimplemented features (%d implemented)",
        len(scores), len(implemented_keys),
    )
    return scores
