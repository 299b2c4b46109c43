"""Static feature catalog for the implementation planner.

Every feature belongs to a module and is identified by the pair
(module id, feature name), serialized as "<module_id>::<feature_name>".
Dependencies are authored as bare names (same module) or as qualified
keys (another module's feature).

The catalog is loaded once from config/catalog/features.json, validated
against its JSON Schema, and never mutated afterwards.
"""

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from jsonschema import ValidationError

from config import settings
from execution.schema_validator import validate_feature_catalog

logger = logging.getLogger(__name__)

# ---------- Status constants ----------

STATUS_IMPLEMENTED = "implemented"
STATUS_IMPROVED = "improved"
STATUS_PARTIAL = "partial"
STATUS_MISSING = "missing"
STATUS_UNKNOWN = "unknown"

FEATURE_STATUSES = (
    STATUS_IMPLEMENTED,
    STATUS_IMPROVED,
    STATUS_PARTIAL,
    STATUS_MISSING,
    STATUS_UNKNOWN,
)


class CatalogError(Exception):
    """Raised when catalog data cannot be read or fails validation."""


@dataclass(frozen=True, order=True)
class FeatureKey:
    """Fully-qualified feature identity."""

    module_id: str
    feature_name: str

    def __str__(self) -> str:
        return f"{self.module_id}{settings.KEY_SEPARATOR}{self.feature_name}"

    @classmethod
    def parse(cls, value: str) -> "FeatureKey":
        """Parse "<module_id>::<feature_name>", splitting on the first separator.

        Raises:
            ValueError: If the value has no separator.
        """
        module_id, sep, feature_name = value.partition(settings.KEY_SEPARATOR)
        if not sep:
            raise ValueError(f"Not a fully-qualified feature key: '{value}'")
        return cls(module_id, feature_name)

    @classmethod
    def resolve(cls, ref: str, context_module_id: str) -> "FeatureKey":
        """Resolve a dependency reference relative to its owning module.

        A bare name means "same module"; a qualified reference is used as-is.
        """
        if settings.KEY_SEPARATOR in ref:
            return cls.parse(ref)
        return cls(context_module_id, ref)


@dataclass(frozen=True)
class Feature:
    """One catalog entry. `depends_on` holds references as authored."""

    module_id: str
    name: str
    category: str
    description: str
    depends_on: tuple[str, ...] = ()

    @property
    def key(self) -> FeatureKey:
        return FeatureKey(self.module_id, self.name)

    @property
    def cross_module_refs(self) -> tuple[str, ...]:
        return tuple(ref for ref in self.depends_on if settings.KEY_SEPARATOR in ref)


class FeatureCatalog:
    """Read-only collection of features grouped by module."""

    def __init__(self, modules: dict[str, tuple[Feature, ...]]):
        self._modules = dict(modules)
        self._by_key = {
            str(feat.key): feat
            for features in self._modules.values()
            for feat in features
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FeatureCatalog":
        """Build a catalog from {module_id: [{name, category, description, depends_on}]}."""
        modules = {}
        for module_id, raw_features in data.items():
            features = []
            seen = set()
            for raw in raw_features:
                name = raw["name"]
                if name in seen:
                    logger.warning(
                        "Duplicate feature '%s' in module '%s', keeping first definition",
                        name, module_id,
                    )
                    continue
                seen.add(name)
                features.append(Feature(
                    module_id=module_id,
                    name=name,
                    category=raw.get("category", ""),
                    description=raw.get("description", ""),
                    depends_on=tuple(raw.get("depends_on", [])),
                ))
            modules[module_id] = tuple(features)
        return cls(modules)

    def module_ids(self) -> list[str]:
        return list(self._modules)

    def features(self, module_id: str) -> tuple[Feature, ...]:
        """Features of a module in authored order; empty for unknown modules."""
        return self._modules.get(module_id, ())

    def get(self, module_id: str, feature_name: str) -> Feature | None:
        return self._by_key.get(str(FeatureKey(module_id, feature_name)))

    def get_by_key(self, key: str | FeatureKey) -> Feature | None:
        return self._by_key.get(str(key))

    def all_features(self) -> list[Feature]:
        return [feat for features in self._modules.values() for feat in features]

    def keys(self) -> list[str]:
        return list(self._by_key)

    def __contains__(self, key) -> bool:
        return str(key) in self._by_key

    def __len__(self) -> int:
        return len(self._by_key)


def load_catalog(path: str | Path | None = None) -> FeatureCatalog:
    """Load and validate the feature catalog JSON file.

    Args:
        path: Catalog file path (defaults to settings.FEATURES_FILE).

    Returns:
        The validated FeatureCatalog.

    Raises:
        CatalogError: If the file is unreadable, not JSON, or fails validation.
    """
    path = Path(path or settings.FEATURES_FILE)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogError(f"Cannot read feature catalog {path}: {e}") from e

    try:
        validate_feature_catalog(data)
    except ValidationError as e:
        raise CatalogError(f"Invalid feature catalog {path}: {e.message}") from e

    catalog = FeatureCatalog.from_dict(data)
    logger.info(
        "Loaded feature catalog: %d features across %d modules",
        len(catalog), len(catalog.module_ids()),
    )
    return catalog


@lru_cache(maxsize=1)
def get_default_catalog() -> FeatureCatalog:
    """Return the process-wide catalog. The catalog is static, so it is loaded once."""
    return load_catalog()


def get_status(status_map: dict[str, str], key: str | FeatureKey) -> str:
    """Look up a feature status; a missing entry counts as unknown."""
    return status_map.get(str(key), STATUS_UNKNOWN)


def get_catalog_by_category(catalog: FeatureCatalog, module_id: str | None = None) -> list[dict]:
    """Group catalog features into category sections.

    Returns:
        List of dicts: [{"name": "Category", "features": [...]}, ...]
    """
    features = catalog.features(module_id) if module_id else catalog.all_features()
    categories = {}
    order = []
    for feat in features:
        if feat.category not in categories:
            categories[feat.category] = []
            order.append(feat.category)
        categories[feat.category].append(feat)
    return [{"name": cat, "features": categories[cat]} for cat in order]
