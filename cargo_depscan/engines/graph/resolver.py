"""Path resolver — direct/transitive classification and ancestor paths per root."""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

import structlog

from cargo_depscan.engines.graph.models import DependencyGraph
from cargo_depscan.exceptions import ResolutionInvariantError

log = structlog.get_logger("cargo_depscan.engine")


class DirectPolicy(Enum):
    """How a node is classified as a direct dependency of a root.

    ADJACENCY: the node is an immediate out-neighbour of the root.
    DISCOVERY: the node's discovered path is empty (legacy reports).
    """

    ADJACENCY = "adjacency"
    DISCOVERY = "discovery"


@dataclass(frozen=True)
class Resolution:
    """Position of one node relative to one root."""

    node: int
    iid: int
    direct: bool
    path: tuple[int, ...]  # iids, root-to-node order, root and node excluded


def resolve(
    graph: DependencyGraph,
    root: int,
    policy: DirectPolicy = DirectPolicy.ADJACENCY,
) -> dict[int, Resolution]:
    """Resolve every node reachable from *root*.

    Returns a mapping of node index to :class:`Resolution`, in breadth-first
    discovery order.  The root itself is never included.

    When several shortest paths lead to a node, the predecessor dequeued
    first wins, i.e. the one whose adjacency list is iterated first.  This
    is deterministic for a given graph but depends on the graph's edge
    insertion order.
    """
    graph.package(root)  # GraphError for an index outside the graph
    size = len(graph)
    # Arena arrays owned by this call only.
    visited = [False] * size
    predecessor: list[int | None] = [None] * size
    order: list[int] = []

    visited[root] = True
    queue: deque[int] = deque([root])
    while queue:
        current = queue.popleft()
        for nxt in graph.neighbors(current):
            if visited[nxt]:
                continue
            visited[nxt] = True
            predecessor[nxt] = current
            order.append(nxt)
            queue.append(nxt)

    adjacent = set(graph.neighbors(root))
    resolved: dict[int, Resolution] = {}
    for node in order:
        path = _walk_back(graph, predecessor, root, node)
        if policy is DirectPolicy.ADJACENCY:
            direct = node in adjacent
        else:
            direct = not path
        resolved[node] = Resolution(node=node, iid=graph.iid(node), direct=direct, path=path)

    log.debug(
        "resolver.resolved",
        root=str(graph.package(root)),
        reachable=len(resolved),
        direct=sum(1 for r in resolved.values() if r.direct),
        policy=policy.value,
    )
    return resolved


def resolve_all(
    graph: DependencyGraph,
    roots: Sequence[int],
    policy: DirectPolicy = DirectPolicy.ADJACENCY,
) -> dict[int, dict[int, Resolution]]:
    """Resolve each root independently, keyed by root node index."""
    return {root: resolve(graph, root, policy) for root in roots}


def _walk_back(
    graph: DependencyGraph,
    predecessor: list[int | None],
    root: int,
    node: int,
) -> tuple[int, ...]:
    chain: list[int] = []
    current = predecessor[node]
    while current != root:
        if current is None:
            raise ResolutionInvariantError(
                f"node {node} has no recorded predecessor chain to root {root}"
            )
        chain.append(graph.iid(current))
        current = predecessor[current]
    chain.reverse()
    return tuple(chain)
