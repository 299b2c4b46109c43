"""Module registry: labels, checklists, and module-level prerequisites.

Module prerequisites are independent of feature-level dependencies.
They are measured by checklist completion percentage rather than by
per-feature implementation status.
"""

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from jsonschema import ValidationError

from config import settings
from execution.feature_catalog import CatalogError
from execution.schema_validator import validate_module_registry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChecklistItem:
    id: str
    label: str
    description: str = ""


@dataclass(frozen=True)
class ModuleDefinition:
    id: str
    label: str
    description: str = ""
    category: str = ""
    prerequisites: tuple[str, ...] = ()
    checklist: tuple[ChecklistItem, ...] = ()


@dataclass
class ModulePrereqStatus:
    module_id: str
    label: str
    progress: int


@dataclass
class RecommendedNextModule:
    module_id: str
    label: str
    reason: str


class ModuleRegistry:
    """Read-only lookup over module definitions."""

    def __init__(self, modules: dict[str, ModuleDefinition]):
        self._modules = dict(modules)

    @classmethod
    def from_dict(cls, data: dict) -> "ModuleRegistry":
        modules = {}
        for module_id, raw in data.items():
            modules[module_id] = ModuleDefinition(
                id=module_id,
                label=raw["label"],
                description=raw.get("description", ""),
                category=raw.get("category", ""),
                prerequisites=tuple(raw.get("prerequisites", [])),
                checklist=tuple(
                    ChecklistItem(
                        id=item["id"],
                        label=item.get("label", ""),
                        description=item.get("description", ""),
                    )
                    for item in raw.get("checklist", [])
                ),
            )
        return cls(modules)

    def get(self, module_id: str) -> ModuleDefinition | None:
        return self._modules.get(module_id)

    def module_ids(self) -> list[str]:
        return list(self._modules)

    def checklist(self, module_id: str) -> tuple[ChecklistItem, ...]:
        mod = self._modules.get(module_id)
        return mod.checklist if mod else ()

    def prerequisites(self, module_id: str) -> tuple[str, ...]:
        mod = self._modules.get(module_id)
        return mod.prerequisites if mod else ()

    def dependents(self, module_id: str) -> list[str]:
        """Modules that list `module_id` as a prerequisite."""
        return [
            mod.id for mod in self._modules.values()
            if module_id in mod.prerequisites
        ]

    def label(self, module_id: str) -> str:
        mod = self._modules.get(module_id)
        return mod.label if mod else module_id

    def checklist_sizes(self) -> dict[str, int]:
        return {mod.id: len(mod.checklist) for mod in self._modules.values()}


def load_registry(path: str | Path | None = None) -> ModuleRegistry:
    """Load and validate the module registry JSON file.

    Raises:
        CatalogError: If the file is unreadable, not JSON, or fails validation.
    """
    path = Path(path or settings.MODULES_FILE)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogError(f"Cannot read module registry {path}: {e}") from e

    try:
        validate_module_registry(data)
    except ValidationError as e:
        raise CatalogError(f"Invalid module registry {path}: {e.message}") from e

    registry = ModuleRegistry.from_dict(data)
    logger.info("Loaded module registry: %d modules", len(registry.module_ids()))
    return registry


@lru_cache(maxsize=1)
def get_default_registry() -> ModuleRegistry:
    """Return the process-wide module registry."""
    return load_registry()


def module_progress(
    module_id: str,
    checklist_progress: dict[str, dict[str, bool]],
    checklist_sizes: dict[str, int],
) -> int:
    """Rounded checklist completion percentage for a module (0-100)."""
    progress = checklist_progress.get(module_id)
    total = checklist_sizes.get(module_id, 0)
    if not progress or total == 0:
        return 0
    done = sum(1 for checked in progress.values() if checked)
    return round(done / total * 100)


def get_unmet_prerequisites(
    module_id: str,
    checklist_progress: dict[str, dict[str, bool]],
    checklist_sizes: dict[str, int],
    registry: ModuleRegistry | None = None,
) -> list[ModulePrereqStatus]:
    """Prerequisites of a module that are below the completion threshold."""
    if registry is None:
        registry = get_default_registry()
    unmet = []
    for prereq_id in registry.prerequisites(module_id):
        pct = module_progress(prereq_id, checklist_progress, checklist_sizes)
        if pct < settings.PREREQ_COMPLETE_PERCENT:
            unmet.append(ModulePrereqStatus(
                module_id=prereq_id,
                label=registry.label(prereq_id),
                progress=pct,
            ))
    return unmet


def get_recommended_next_modules(
    current_module_id: str,
    checklist_progress: dict[str, dict[str, bool]],
    checklist_sizes: dict[str, int],
    registry: ModuleRegistry | None = None,
) -> list[RecommendedNextModule]:
    """Suggest modules to start once the current one is substantially done.

    Strategy:
    1. Nothing is suggested until the current module reaches the threshold.
    2. Candidates are modules that list the current module as a prerequisite
       and are themselves still below the threshold.
    3. A candidate qualifies only if every one of its prerequisites is at or
       above the threshold.
    4. Modules with more prerequisites come first; at most MAX_NEXT_MODULES.
    """
    if registry is None:
        registry = get_default_registry()
    threshold = settings.PREREQ_COMPLETE_PERCENT

    if module_progress(current_module_id, checklist_progress, checklist_sizes) < threshold:
        return []

    results = []
    for dep_id in registry.dependents(current_module_id):
        if module_progress(dep_id, checklist_progress, checklist_sizes) >= threshold:
            continue

        prereqs = registry.prerequisites(dep_id)
        all_met = all(
            module_progress(p, checklist_progress, checklist_sizes) >= threshold
            for p in prereqs
        )
        if not all_met:
            continue

        if len(prereqs) == 1:
            reason = "Ready — builds on this module"
        else:
            reason = f"Ready — all {len(prereqs)} prerequisites met"
        results.append(RecommendedNextModule(
            module_id=dep_id, label=registry.label(dep_id), reason=reason,
        ))

    results.sort(key=lambda r: len(registry.prerequisites(r.module_id)), reverse=True)
    return results[: settings.MAX_NEXT_MODULES]
