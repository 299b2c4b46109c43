"""Schema validation for catalog data files.

Validates the feature catalog and module registry against their
JSON Schema definitions. All validation is deterministic.
"""

import json
from pathlib import Path

from jsonschema import Draft202012Validator, ValidationError

from config.settings import FEATURE_CATALOG_SCHEMA, MODULE_REGISTRY_SCHEMA


def load_schema(schema_path: str | Path) -> dict:
    """Load a JSON Schema file.

    Args:
        schema_path: Path to the schema file.

    Returns:
        The schema dictionary.

    Raises:
        FileNotFoundError: If the schema file does not exist.
    """
    path = Path(schema_path)
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def validate_against_schema(data, schema_path: str | Path) -> bool:
    """Validate data against a JSON Schema.

    Args:
        data: The data to validate.
        schema_path: Path to the JSON Schema file.

    Returns:
        True if validation passes.

    Raises:
        ValidationError: If validation fails (first error only).
    """
    schema = load_schema(schema_path)
    validator = Draft202012Validator(schema)
    validator.validate(data)
    return True


def get_validation_errors(data, schema_path: str | Path) -> list[str]:
    """Return all validation errors for the given data.

    Returns:
        List of human-readable error messages. Empty if valid.
    """
    schema = load_schema(schema_path)
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    return [
        f"{'.'.join(str(p) for p in error.absolute_path) or 'root'}: {error.message}"
        for error in errors
    ]


def validate_feature_catalog(data: dict) -> bool:
    """Validate raw feature catalog data.

    Raises:
        ValidationError: If validation fails.
    """
    return validate_against_schema(data, FEATURE_CATALOG_SCHEMA)


def validate_module_registry(data: dict) -> bool:
    """Validate raw module registry data.

    Raises:
        ValidationError: If validation fails.
    """
    return validate_against_schema(data, MODULE_REGISTRY_SCHEMA)


def is_valid_feature_catalog(data: dict) -> bool:
    """Check raw catalog data without raising exceptions."""
    try:
        validate_feature_catalog(data)
        return True
    except ValidationError:
        return False
