"""Dependency resolution over the feature catalog.

Resolves authored dependency references into fully-qualified keys and
computes, per feature, the direct dependency list, the transitive chain,
and the same-module dependency depth.

Chain and depth only follow edges inside the feature's own module.
Cross-module dependencies appear in `deps` (and therefore in `chain`) but
their own dependencies are not followed.

All traversals carry a visited set, so cyclic catalogs terminate.
"""

from dataclasses import dataclass

from execution.feature_catalog import FeatureCatalog, FeatureKey


@dataclass(frozen=True)
class ResolvedDependency:
    """A dependency reference resolved to a concrete feature key."""

    module_id: str
    feature_name: str

    @property
    def key(self) -> str:
        return str(FeatureKey(self.module_id, self.feature_name))


@dataclass(frozen=True)
class DependencyInfo:
    """Resolved dependencies of one feature.

    `chain` is a de-duplicated superset of `deps`. `depth` counts the
    longest path through same-module dependencies.
    """

    deps: tuple[ResolvedDependency, ...] = ()
    chain: tuple[ResolvedDependency, ...] = ()
    depth: int = 0


def resolve_dependency(ref: str, context_module_id: str) -> ResolvedDependency:
    """Resolve "featureName" or "moduleId::featureName" from a module's point of view."""
    key = FeatureKey.resolve(ref, context_module_id)
    return ResolvedDependency(key.module_id, key.feature_name)


def _resolve_direct(catalog: FeatureCatalog) -> dict[str, tuple[ResolvedDependency, ...]]:
    direct = {}
    for feat in catalog.all_features():
        deps = []
        seen = set()
        for ref in feat.depends_on:
            dep = resolve_dependency(ref, feat.module_id)
            if dep.key in seen:
                continue
            seen.add(dep.key)
            deps.append(dep)
        direct[str(feat.key)] = tuple(deps)
    return direct


def _same_module_chain(
    key: str,
    module_id: str,
    direct: dict[str, tuple[ResolvedDependency, ...]],
) -> tuple[ResolvedDependency, ...]:
    """Depth-first transitive closure restricted to `module_id`."""
    chain = list(direct.get(key, ()))
    visited = {key} | {dep.key for dep in chain}
    stack = [dep for dep in reversed(chain) if dep.module_id == module_id]

    while stack:
        current = stack.pop()
        upstream = [
            dep for dep in direct.get(current.key, ())
            if dep.key not in visited
        ]
        for dep in upstream:
            visited.add(dep.key)
            chain.append(dep)
        stack.extend(dep for dep in reversed(upstream) if dep.module_id == module_id)

    return tuple(chain)


def _same_module_depth(
    key: str,
    module_id: str,
    direct: dict[str, tuple[ResolvedDependency, ...]],
    visiting: set[str],
    memo: dict[str, int],
) -> int:
    if key in memo:
        return memo[key]
    if key in visiting:
        # Cycle: contributes no extra depth
        return 0

    visiting.add(key)
    depth = 0
    for dep in direct.get(key, ()):
        if dep.module_id != module_id or dep.key not in direct:
            continue
        depth = max(depth, 1 + _same_module_depth(dep.key, module_id, direct, visiting, memo))
    visiting.discard(key)
    memo[key] = depth
    return depth


def build_dependency_map(catalog: FeatureCatalog) -> dict[str, DependencyInfo]:
    """Build dependency info for every feature in the catalog.

    Returns a new dict on every call; the values are immutable, so callers
    may share or memoize the result for a given catalog.
    """
    direct = _resolve_direct(catalog)
    memo: dict[str, int] = {}
    dep_map = {}
    for feat in catalog.all_features():
        key = str(feat.key)
        dep_map[key] = DependencyInfo(
            deps=direct[key],
            chain=_same_module_chain(key, feat.module_id, direct),
            depth=_same_module_depth(key, feat.module_id, direct, set(), memo),
        )
    return dep_map


def build_reverse_dependency_map(catalog: FeatureCatalog) -> dict[str, list[str]]:
    """For each feature key, the keys of features that directly depend on it.

    Every catalog key is present; dangling dependency keys are included too.
    """
    reverse: dict[str, list[str]] = {}
    for key, deps in _resolve_direct(catalog).items():
        reverse.setdefault(key, [])
        for dep in deps:
            reverse.setdefault(dep.key, []).append(key)
    return reverse


def get_dependents(dep_map: dict[str, DependencyInfo], key: str) -> list[str]:
    """Keys of features whose direct dependencies include `key`."""
    return [
        other for other, info in dep_map.items()
        if any(dep.key == key for dep in info.deps)
    ]
