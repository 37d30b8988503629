"""Data models for the dependency graph."""

from __future__ import annotations

from dataclasses import dataclass, field

from cargo_depscan.exceptions import GraphError


@dataclass(frozen=True)
class Package:
    """A resolved package. ``source is None`` marks a local (root) package."""

    name: str
    version: str
    source: str | None = None

    @property
    def is_local(self) -> bool:
        return self.source is None

    def __str__(self) -> str:
        return f"{self.name} {self.version}"


@dataclass
class DependencyGraph:
    """Directed dependency graph stored as an arena of packages.

    A node is addressed by its index into :attr:`packages`.  Edges live in
    per-node adjacency lists whose order is the insertion order; the path
    resolver's tie-breaking depends on that order.
    """

    packages: list[Package] = field(default_factory=list)
    _adjacency: list[list[int]] = field(default_factory=list, repr=False)
    _index: dict[Package, int] = field(default_factory=dict, repr=False)

    def add_package(self, package: Package) -> int:
        """Add *package* and return its node index (idempotent)."""
        existing = self._index.get(package)
        if existing is not None:
            return existing
        node = len(self.packages)
        self.packages.append(package)
        self._adjacency.append([])
        self._index[package] = node
        return node

    def add_edge(self, source: int, target: int) -> None:
        """Record that *source* depends on *target*. Duplicate edges are ignored."""
        self._check(source)
        self._check(target)
        if target not in self._adjacency[source]:
            self._adjacency[source].append(target)

    def neighbors(self, node: int) -> list[int]:
        self._check(node)
        return self._adjacency[node]

    def package(self, node: int) -> Package:
        self._check(node)
        return self.packages[node]

    def node_of(self, package: Package) -> int | None:
        return self._index.get(package)

    def find(self, name: str, version: str, source: str | None = None) -> int | None:
        """Locate a node by identity, falling back to ``(name, version)``.

        The fallback only succeeds when exactly one node matches, so an
        ambiguous match never lands on the wrong package.
        """
        node = self._index.get(Package(name, version, source))
        if node is not None:
            return node
        candidates = [
            i for i, p in enumerate(self.packages) if p.name == name and p.version == version
        ]
        if len(candidates) == 1:
            return candidates[0]
        return None

    def roots(self) -> list[int]:
        """Local packages, in arena order."""
        return [i for i, p in enumerate(self.packages) if p.is_local]

    @staticmethod
    def iid(node: int) -> int:
        """Report handle for *node*; iids start at 1."""
        return node + 1

    def __len__(self) -> int:
        return len(self.packages)

    def _check(self, node: int) -> None:
        if not 0 <= node < len(self.packages):
            raise GraphError(f"node index {node} outside graph of {len(self.packages)} nodes")
