"""Central configuration loader for the feature implementation planner."""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Base paths
PROJECT_ROOT = Path(__file__).parent.parent
CATALOG_DIR = PROJECT_ROOT / "config" / "catalog"
SCHEMAS_DIR = PROJECT_ROOT / "config" / "schemas"

# Environment
ENVIRONMENT = os.getenv("ENVIRONMENT", "dev")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Catalog data files (static for the program lifetime)
FEATURES_FILE = Path(os.getenv("FEATURES_FILE", str(CATALOG_DIR / "features.json")))
MODULES_FILE = Path(os.getenv("MODULES_FILE", str(CATALOG_DIR / "modules.json")))

# Schema file paths
FEATURE_CATALOG_SCHEMA = SCHEMAS_DIR / "feature_catalog.schema.json"
MODULE_REGISTRY_SCHEMA = SCHEMAS_DIR / "module_registry.schema.json"

# Separator between module id and feature name in a fully-qualified key
KEY_SEPARATOR = "::"

# Module-level prerequisite thresholds (checklist completion percentages)
PREREQ_COMPLETE_PERCENT = 50
MAX_NEXT_MODULES = 3
