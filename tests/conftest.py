"""Shared test fixtures for the feature planner test suite."""

import pytest

from execution.feature_catalog import FeatureCatalog
from execution.module_registry import ModuleRegistry

SAMPLE_FEATURES = {
    "core": [
        {
            "name": "Base",
            "category": "Data",
            "description": "Basic data asset",
            "depends_on": [],
        },
        {
            "name": "Mover",
            "category": "Movement",
            "description": "Moves things",
            "depends_on": ["Base"],
        },
        {
            "name": "Sprint",
            "category": "Movement",
            "description": "Sprint on shift",
            "depends_on": ["Mover", "Base"],
        },
    ],
    "combat": [
        {
            "name": "Hitbox",
            "category": "Collision",
            "description": "Overlap detection",
            "depends_on": ["core::Mover"],
        },
        {
            "name": "Damage",
            "category": "Combat",
            "description": "Damage pipeline",
            "depends_on": ["Hitbox", "core::Base"],
        },
    ],
}

SAMPLE_MODULES = {
    "core": {
        "label": "Core",
        "description": "Core gameplay",
        "category": "engine",
        "prerequisites": [],
        "checklist": [
            {"id": "c-1", "label": "Mover component", "description": "Movement component"},
            {"id": "c-2", "label": "Sprint system", "description": "Hold to sprint"},
            {"id": "c-3", "label": "Polish pass", "description": "Feel tuning"},
        ],
    },
    "combat": {
        "label": "Combat",
        "description": "Hits and damage",
        "category": "gameplay",
        "prerequisites": ["core"],
        "checklist": [
            {"id": "cb-1", "label": "Hitbox setup", "description": ""},
            {"id": "cb-2", "label": "Damage numbers", "description": ""},
        ],
    },
    "loot": {
        "label": "Loot",
        "description": "Drops",
        "category": "gameplay",
        "prerequisites": ["core", "combat"],
        "checklist": [
            {"id": "l-1", "label": "Drop tables", "description": ""},
        ],
    },
    "empty": {
        "label": "Empty",
        "prerequisites": [],
        "checklist": [],
    },
}


@pytest.fixture(autouse=True)
def set_test_environment(monkeypatch):
    """Ensure all tests run with ENVIRONMENT=test."""
    monkeypatch.setenv("ENVIRONMENT", "test")


@pytest.fixture
def sample_features_data():
    """Return raw catalog data for the two-module sample."""
    return {
        module_id: [dict(feat, depends_on=list(feat["depends_on"])) for feat in features]
        for module_id, features in SAMPLE_FEATURES.items()
    }


@pytest.fixture
def sample_modules_data():
    """Return raw registry data matching the sample catalog."""
    return {
        module_id: {
            **raw,
            "prerequisites": list(raw["prerequisites"]),
            "checklist": [dict(item) for item in raw["checklist"]],
        }
        for module_id, raw in SAMPLE_MODULES.items()
    }


@pytest.fixture
def sample_catalog(sample_features_data):
    """core: Base <- Mover <- Sprint; combat: Hitbox (needs core::Mover) <- Damage."""
    return FeatureCatalog.from_dict(sample_features_data)


@pytest.fixture
def sample_registry(sample_modules_data):
    return ModuleRegistry.from_dict(sample_modules_data)


@pytest.fixture
def cyclic_catalog():
    """A <-> B cycle plus an independent C."""
    return FeatureCatalog.from_dict({
        "mod": [
            {"name": "A", "category": "Logic", "description": "", "depends_on": ["B"]},
            {"name": "B", "category": "Logic", "description": "", "depends_on": ["A"]},
            {"name": "C", "category": "Logic", "description": "", "depends_on": []},
        ],
    })
