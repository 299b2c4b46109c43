"""Test fixtures for the web layer."""

import pytest
from fastapi.testclient import TestClient

from app.dependencies import get_catalog, get_registry
from app.main import app


@pytest.fixture
def client(sample_catalog, sample_registry):
    """TestClient backed by the small sample catalog and registry."""
    app.dependency_overrides[get_catalog] = lambda: sample_catalog
    app.dependency_overrides[get_registry] = lambda: sample_registry
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def real_client():
    """TestClient backed by the shipped catalog data."""
    return TestClient(app)
