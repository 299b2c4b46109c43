"""Implementation plan generation.

Composes dependency resolution, impact scoring and effort estimation into
a topologically valid, impact-prioritized list of every unimplemented
feature:

1. Partition the catalog into implemented / unimplemented.
2. Score impact against the implemented set.
3. Kahn's algorithm over the unimplemented subgraph. Edges into
   implemented features are already satisfied. Within a layer, higher
   impact first, then key alphabetically.
4. Attach catalog metadata, effort and readiness to each item.
5. Apply filters as a post-pass that never re-orders.
"""

import logging
from dataclasses import dataclass, field

from execution.dependency_resolver import DependencyInfo, build_dependency_map
from execution.effort_estimator import EffortEstimate, effort_rank, estimate_from_definition
from execution.feature_catalog import (
    STATUS_IMPLEMENTED,
    FeatureCatalog,
    get_default_catalog,
    get_status,
)
from execution.impact_scorer import EMPTY_IMPACT, ImpactScore, compute_impact_scores
from execution.module_registry import ModuleRegistry, get_default_registry

logger = logging.getLogger(__name__)


@dataclass
class PlanFilter:
    module_id: str | None = None
    max_effort: str | None = None
    min_impact: int | None = None


@dataclass
class PlanItem:
    """One unimplemented feature in plan order.

    `depth` is the topological layer (0 = nothing unimplemented upstream).
    `is_ready` is true only when every dependency is already implemented.
    """

    key: str
    module_id: str
    feature_name: str
    category: str
    description: str
    depth: int
    impact: ImpactScore
    effort: EffortEstimate
    depends_on: list[str]
    is_ready: bool
    status: str


@dataclass
class ImplementationPlan:
    items: list[PlanItem] = field(default_factory=list)
    total_features: int = 0
    implemented_count: int = 0
    remaining_count: int = 0
    total_effort_minutes: int = 0
    unresolved_keys: list[str] = field(default_factory=list)


def _topological_sort(
    unimplemented: list[str],
    dep_map: dict[str, DependencyInfo],
    impact_scores: dict[str, ImpactScore],
) -> list[tuple[str, int]]:
    """Layered Kahn's algorithm restricted to the unimplemented subgraph."""
    pending = set(unimplemented)
    in_degree = {key: 0 for key in unimplemented}
    adjacency: dict[str, list[str]] = {key: [] for key in unimplemented}

    for key in unimplemented:
        info = dep_map.get(key)
        if info is None:
            continue
        for dep in info.deps:
            if dep.key in pending:
                in_degree[key] += 1
                adjacency[dep.key].append(key)

    def layer_order(key):
        return (-impact_scores.get(key, EMPTY_IMPACT).score, key)

    result = []
    current_level = [key for key in unimplemented if in_degree[key] == 0]
    depth = 0

    while current_level:
        current_level.sort(key=layer_order)
        result.extend((key, depth) for key in current_level)

        next_level = []
        for key in current_level:
            for dependent in adjacency[key]:
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    next_level.append(dependent)

        current_level = next_level
        depth += 1

    return result


def _apply_filter(items: list[PlanItem], plan_filter: PlanFilter) -> list[PlanItem]:
    if plan_filter.module_id:
        items = [item for item in items if item.module_id == plan_filter.module_id]
    if plan_filter.min_impact is not None:
        items = [item for item in items if item.impact.score >= plan_filter.min_impact]
    if plan_filter.max_effort:
        max_rank = effort_rank(plan_filter.max_effort)
        items = [item for item in items if effort_rank(item.effort.level) <= max_rank]
    return items


def generate_plan(
    status_map: dict[str, str],
    plan_filter: PlanFilter | None = None,
    catalog: FeatureCatalog | None = None,
) -> ImplementationPlan:
    """Generate a dependency-respecting, impact-ordered implementation plan.

    Args:
        status_map: Feature key -> status snapshot. Missing keys are unknown.
        plan_filter: Optional module / max effort / min impact filter.
        catalog: Feature catalog (defaults to the static catalog).

    Returns:
        ImplementationPlan. Aggregate counts cover the whole catalog;
        total_effort_minutes covers the returned items only.

    Raises:
        ValueError: If plan_filter.max_effort is not a known effort level.
    """
    if catalog is None:
        catalog = get_default_catalog()
    if plan_filter and plan_filter.max_effort:
        effort_rank(plan_filter.max_effort)

    dep_map = build_dependency_map(catalog)
    features = catalog.all_features()

    implemented_keys = set()
    unimplemented = []
    for feat in features:
        key = str(feat.key)
        if get_status(status_map, key) == STATUS_IMPLEMENTED:
            implemented_keys.add(key)
        else:
            unimplemented.append(key)

    impact_scores = compute_impact_scores(catalog, implemented_keys, dep_map)
    ordered = _topological_sort(unimplemented, dep_map, impact_scores)

    placed = {key for key, _ in ordered}
    unresolved = sorted(key for key in unimplemented if key not in placed)
    if unresolved:
        logger.warning(
            "Left %d features out of the plan due to dependency cycles: %s",
            len(unresolved), ", ".join(unresolved),
        )

    items = []
    for key, depth in ordered:
        feat = catalog.get_by_key(key)
        deps = [dep.key for dep in dep_map[key].deps]
        items.append(PlanItem(
            key=key,
            module_id=feat.module_id,
            feature_name=feat.name,
            category=feat.category,
            description=feat.description,
            depth=depth,
            impact=impact_scores.get(key, EMPTY_IMPACT),
            effort=estimate_from_definition(feat),
            depends_on=deps,
            is_ready=all(d in implemented_keys for d in deps),
            status=get_status(status_map, key),
        ))

    if plan_filter:
        items = _apply_filter(items, plan_filter)

    plan = ImplementationPlan(
        items=items,
        total_features=len(features),
        implemented_count=len(implemented_keys),
        remaining_count=len(unimplemented),
        total_effort_minutes=sum(item.effort.minutes for item in items),
        unresolved_keys=unresolved,
    )
    logger.debug(
        "Generated plan: %d items, %d/%d implemented, %d minutes",
        len(plan.items), plan.implemented_count, plan.total_features,
        plan.total_effort_minutes,
    )
    return plan


def get_module_label(module_id: str, registry: ModuleRegistry | None = None) -> str:
    """Display label for a module, falling back to its id."""
    if registry is None:
        registry = get_default_registry()
    return registry.label(module_id)
