"""Module listing, next-best-action and next-module routes."""

from dataclasses import asdict

from fastapi import APIRouter, Depends

from app.dependencies import get_catalog, get_registry
from app.models.planning import ModuleProgressRequest, RecommendationRequest
from execution.feature_catalog import FeatureCatalog
from execution.module_registry import (
    ModuleRegistry,
    get_recommended_next_modules,
    get_unmet_prerequisites,
)
from execution.nba_engine import (
    EvaluatorRecommendation,
    ImplementationPattern,
    TaskHistoryEntry,
    compute_nba,
)

router = APIRouter()


def _run_nba(module_id, body, catalog, registry):
    return compute_nba(
        module_id,
        body.checklist,
        body.statuses,
        patterns=[ImplementationPattern(**p.model_dump()) for p in body.patterns],
        evaluator_recommendations=[
            EvaluatorRecommendation(**r.model_dump()) for r in body.evaluator_recommendations
        ],
        task_history=[TaskHistoryEntry(**h.model_dump()) for h in body.task_history],
        catalog=catalog,
        registry=registry,
    )


@router.get("/modules")
async def list_modules(
    catalog: FeatureCatalog = Depends(get_catalog),
    registry: ModuleRegistry = Depends(get_registry),
):
    """All modules with labels, prerequisites and sizes."""
    return [
        {
            "module_id": module_id,
            "label": registry.label(module_id),
            "prerequisites": list(registry.prerequisites(module_id)),
            "checklist_size": len(registry.checklist(module_id)),
            "feature_count": len(catalog.features(module_id)),
        }
        for module_id in registry.module_ids()
    ]


@router.post("/modules/{module_id}/recommendations")
async def recommendations(
    module_id: str,
    body: RecommendationRequest,
    catalog: FeatureCatalog = Depends(get_catalog),
    registry: ModuleRegistry = Depends(get_registry),
):
    """Ranked next-best-action list for a module's unchecked items."""
    return [asdict(rec) for rec in _run_nba(module_id, body, catalog, registry)]


@router.post("/modules/{module_id}/recommendations/top")
async def top_recommendation(
    module_id: str,
    body: RecommendationRequest,
    catalog: FeatureCatalog = Depends(get_catalog),
    registry: ModuleRegistry = Depends(get_registry),
):
    """The single best next action, or null."""
    recs = _run_nba(module_id, body, catalog, registry)
    return asdict(recs[0]) if recs else None


@router.post("/modules/{module_id}/next-modules")
async def next_modules(
    module_id: str,
    body: ModuleProgressRequest,
    registry: ModuleRegistry = Depends(get_registry),
):
    """Modules to start next, plus this module's unmet prerequisites."""
    sizes = body.sizes if body.sizes is not None else registry.checklist_sizes()
    return {
        "recommended": [
            asdict(r) for r in get_recommended_next_modules(module_id, body.progress, sizes, registry)
        ],
        "unmet_prerequisites": [
            asdict(p) for p in get_unmet_prerequisites(module_id, body.progress, sizes, registry)
        ],
    }
