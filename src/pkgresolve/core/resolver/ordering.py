"""Install ordering: dependencies before the packages that need them."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pkgresolve.core.identity import normalize_id
from pkgresolve.core.resolver.package import PresentPackage

logger = logging.getLogger(__name__)


def topological_sort(nodes: Sequence[PresentPackage]) -> list[PresentPackage]:
    """Order *nodes* so that every package follows the packages it depends on.

    Kahn's algorithm. Only edges onto ids present in *nodes* count. Ready
    nodes are emitted in their input order, so equal inputs always produce
    the same output. If a dependency cycle leaves nothing ready, the earliest
    remaining node is emitted to break it and a warning is logged.
    """
    present = {normalize_id(n.id) for n in nodes}
    # pending[i]: ids node i still waits for
    pending: list[set[str]] = [
        {normalize_id(d.id) for d in n.dependencies} & present for n in nodes
    ]
    dependents: dict[str, list[int]] = {}
    for index, waits_for in enumerate(pending):
        for dep_id in waits_for:
            dependents.setdefault(dep_id, []).append(index)

    placed = [False] * len(nodes)
    result: list[PresentPackage] = []

    while len(result) < len(nodes):
        ready = [i for i, w in enumerate(pending) if not w and not placed[i]]
        if not ready:
            ready = [placed.index(False)]
            logger.warning(
                "Dependency cycle involving %s; ordering it before its dependencies",
                nodes[ready[0]].id,
            )
        for index in ready:
            placed[index] = True
            result.append(nodes[index])
            for dependent in dependents.get(normalize_id(nodes[index].id), []):
                pending[dependent].discard(normalize_id(nodes[index].id))

    return result
