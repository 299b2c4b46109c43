"""Shared dependencies for the FastAPI web layer."""

from execution.feature_catalog import FeatureCatalog, get_default_catalog
from execution.module_registry import ModuleRegistry, get_default_registry


def get_catalog() -> FeatureCatalog:
    """The static feature catalog (overridable in tests)."""
    return get_default_catalog()


def get_registry() -> ModuleRegistry:
    """The static module registry (overridable in tests)."""
    return get_default_registry()
