"""FastAPI application for the feature implementation planner."""

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from app.dependencies import get_catalog, get_registry
from app.routers import planning, recommendations
from config.settings import LOG_LEVEL
from execution.feature_catalog import CatalogError, FeatureCatalog
from execution.module_registry import ModuleRegistry

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Feature Implementation Planner")

app.include_router(planning.router)
app.include_router(recommendations.router)


@app.get("/health")
async def health(
    catalog: FeatureCatalog = Depends(get_catalog),
    registry: ModuleRegistry = Depends(get_registry),
):
    return {
        "status": "ok",
        "features": len(catalog),
        "modules": len(registry.module_ids()),
    }


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """Caller-input errors raised by the engine become 400 responses."""
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError):
    logger.error("Catalog data error: %s", exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})
