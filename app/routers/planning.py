"""Dependency, blocker, impact, effort and plan routes.

Every request carries its own status snapshot; nothing is stored.
"""

from dataclasses import asdict

from fastapi import APIRouter, Depends

from app.dependencies import get_catalog
from app.models.planning import PlanRequest, StatusSnapshotRequest
from execution.blocker_evaluator import compute_blockers
from execution.dependency_resolver import ResolvedDependency, build_dependency_map
from execution.effort_estimator import estimate_effort, format_effort_time
from execution.feature_catalog import STATUS_IMPLEMENTED, FeatureCatalog
from execution.impact_scorer import compute_impact_scores
from execution.plan_generator import PlanFilter, generate_plan

router = APIRouter()


def _dependency_to_dict(dep: ResolvedDependency) -> dict:
    return {"key": dep.key, "module_id": dep.module_id, "feature_name": dep.feature_name}


@router.get("/modules/{module_id}/dependencies")
async def module_dependencies(module_id: str, catalog: FeatureCatalog = Depends(get_catalog)):
    """Direct deps, transitive chain and depth for each feature of a module."""
    dep_map = build_dependency_map(catalog)
    results = []
    for feat in catalog.features(module_id):
        info = dep_map[str(feat.key)]
        results.append({
            "key": str(feat.key),
            "feature_name": feat.name,
            "category": feat.category,
            "deps": [_dependency_to_dict(d) for d in info.deps],
            "chain": [_dependency_to_dict(d) for d in info.chain],
            "depth": info.depth,
        })
    return {"module_id": module_id, "features": results}


@router.post("/blockers")
async def blockers(body: StatusSnapshotRequest, catalog: FeatureCatalog = Depends(get_catalog)):
    """Blocked state of every feature under the given snapshot."""
    blocker_map = compute_blockers(build_dependency_map(catalog), body.statuses)
    return {
        key: {
            "is_blocked": info.is_blocked,
            "blockers": [_dependency_to_dict(b) for b in info.blockers],
        }
        for key, info in blocker_map.items()
    }


@router.post("/impact")
async def impact(body: StatusSnapshotRequest, catalog: FeatureCatalog = Depends(get_catalog)):
    """Impact score of every unimplemented feature under the given snapshot."""
    implemented = {
        key for key, status in body.statuses.items() if status == STATUS_IMPLEMENTED
    }
    scores = compute_impact_scores(catalog, implemented)
    return {key: asdict(score) for key, score in scores.items()}


@router.get("/effort/{module_id}/{feature_name:path}")
async def effort(module_id: str, feature_name: str, catalog: FeatureCatalog = Depends(get_catalog)):
    """Effort estimate for one feature (medium default for unknowns)."""
    estimate = estimate_effort(module_id, feature_name, catalog)
    return {**asdict(estimate), "formatted": format_effort_time(estimate.minutes)}


@router.post("/plan")
async def plan(body: PlanRequest, catalog: FeatureCatalog = Depends(get_catalog)):
    """Topologically ordered, impact-prioritized implementation plan."""
    plan_filter = PlanFilter(
        module_id=body.module_id,
        max_effort=body.max_effort,
        min_impact=body.min_impact,
    )
    result = generate_plan(body.statuses, plan_filter, catalog)
    return asdict(result)
