"""Status-aware blocker evaluation.

Given a dependency map and a status snapshot, flags which features are
blocked and by what. The dependency map is only read; every call returns
a fresh mapping, so evaluations under different snapshots never interfere.
"""

from dataclasses import dataclass

from execution.dependency_resolver import DependencyInfo, ResolvedDependency
from execution.feature_catalog import STATUS_IMPLEMENTED, get_status


@dataclass(frozen=True)
class BlockerInfo:
    """Blocked state of one feature under a specific status snapshot."""

    is_blocked: bool = False
    blockers: tuple[ResolvedDependency, ...] = ()


def compute_blockers(
    dep_map: dict[str, DependencyInfo],
    status_map: dict[str, str],
) -> dict[str, BlockerInfo]:
    """Compute blockers for every feature in `dep_map`.

    A feature is blocked iff one of its direct dependencies is not
    implemented. Features without dependencies are never blocked.

    Args:
        dep_map: Output of build_dependency_map().
        status_map: Feature key -> status. Missing keys count as unknown.

    Returns:
        New dict of feature key -> BlockerInfo.
    """
    result = {}
    for key, info in dep_map.items():
        blockers = tuple(
            dep for dep in info.deps
            if get_status(status_map, dep.key) != STATUS_IMPLEMENTED
        )
        result[key] = BlockerInfo(is_blocked=bool(blockers), blockers=blockers)
    return result


def blocked_keys(blocker_map: dict[str, BlockerInfo]) -> list[str]:
    """Sorted keys of blocked features."""
    return sorted(key for key, info in blocker_map.items() if info.is_blocked)
