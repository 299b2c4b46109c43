"""Unit tests for execution/schema_validator.py."""

import pytest
from jsonschema import ValidationError

from config.settings import FEATURE_CATALOG_SCHEMA, MODULE_REGISTRY_SCHEMA
from execution.schema_validator import (
    get_validation_errors,
    is_valid_feature_catalog,
    load_schema,
    validate_against_schema,
    validate_feature_catalog,
    validate_module_registry,
)


class TestLoadSchema:
    def test_load_valid_schema(self):
        schema = load_schema(FEATURE_CATALOG_SCHEMA)
        assert schema["type"] == "object"

    def test_load_missing_schema(self):
        with pytest.raises(FileNotFoundError):
            load_schema("nonexistent_schema.json")


class TestValidateFeatureCatalog:
    def test_valid_catalog_passes(self, sample_features_data):
        assert validate_feature_catalog(sample_features_data) is True

    def test_depends_on_is_optional(self):
        data = {"mod": [{"name": "A", "category": "Logic", "description": ""}]}
        assert validate_feature_catalog(data) is True

    def test_missing_category(self, sample_features_data):
        del sample_features_data["core"][0]["category"]
        with pytest.raises(ValidationError):
            validate_feature_catalog(sample_features_data)

    def test_empty_name_rejected(self, sample_features_data):
        sample_features_data["core"][0]["name"] = ""
        with pytest.raises(ValidationError):
            validate_feature_catalog(sample_features_data)

    def test_invalid_module_id(self, sample_features_data):
        sample_features_data["Has Spaces"] = []
        with pytest.raises(ValidationError):
            validate_feature_catalog(sample_features_data)

    def test_additional_properties_rejected(self, sample_features_data):
        sample_features_data["core"][0]["priority"] = "high"
        with pytest.raises(ValidationError):
            validate_feature_catalog(sample_features_data)

    def test_is_valid_does_not_raise(self):
        assert is_valid_feature_catalog({"mod": "not a list"}) is False


class TestValidateModuleRegistry:
    def test_valid_registry_passes(self, sample_modules_data):
        assert validate_module_registry(sample_modules_data) is True

    def test_missing_label(self, sample_modules_data):
        del sample_modules_data["core"]["label"]
        with pytest.raises(ValidationError):
            validate_module_registry(sample_modules_data)

    def test_checklist_item_needs_id(self, sample_modules_data):
        del sample_modules_data["core"]["checklist"][0]["id"]
        with pytest.raises(ValidationError):
            validate_module_registry(sample_modules_data)


class TestGetValidationErrors:
    def test_valid_data_has_no_errors(self, sample_modules_data):
        assert get_validation_errors(sample_modules_data, MODULE_REGISTRY_SCHEMA) == []

    def test_reports_path(self, sample_features_data):
        del sample_features_data["core"][1]["category"]
        errors = get_validation_errors(sample_features_data, FEATURE_CATALOG_SCHEMA)
        assert len(errors) == 1
        assert errors[0].startswith("core.1:")

    def test_validate_against_schema_returns_true(self, sample_features_data):
        assert validate_against_schema(sample_features_data, FEATURE_CATALOG_SCHEMA) is True
