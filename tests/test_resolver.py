"""Tests for the dependency graph and the per-root path resolver."""

from __future__ import annotations

import pytest

from cargo_depscan.engines.graph.models import DependencyGraph, Package
from cargo_depscan.engines.graph.resolver import DirectPolicy, resolve, resolve_all
from cargo_depscan.exceptions import GraphError

REGISTRY = "registry+https://github.com/rust-lang/crates.io-index"


# ── helpers ──────────────────────────────────────────────────────────────


def _graph(names: list[str], edges: list[tuple[str, str]], local: set[str]) -> DependencyGraph:
    graph = DependencyGraph()
    for name in names:
        graph.add_package(Package(name, "1.0.0", None if name in local else REGISTRY))
    for src, dst in edges:
        graph.add_edge(_node(graph, src), _node(graph, dst))
    return graph


def _node(graph: DependencyGraph, name: str) -> int:
    node = graph.find(name, "1.0.0")
    assert node is not None
    return node


def _by_name(graph: DependencyGraph, resolved: dict) -> dict:
    return {graph.package(node).name: res for node, res in resolved.items()}


# ── DependencyGraph ──────────────────────────────────────────────────────


class TestDependencyGraph:
    def test_add_package_is_idempotent(self):
        graph = DependencyGraph()
        a = graph.add_package(Package("a", "1.0.0"))
        assert graph.add_package(Package("a", "1.0.0")) == a
        assert len(graph) == 1

    def test_iid_is_index_plus_one(self):
        graph = _graph(["a", "b"], [], {"a"})
        assert graph.iid(0) == 1
        assert graph.iid(1) == 2

    def test_roots_are_local_packages(self):
        graph = _graph(["a", "b", "c"], [], {"a", "c"})
        assert graph.roots() == [0, 2]

    def test_duplicate_edges_ignored(self):
        graph = _graph(["a", "b"], [("a", "b"), ("a", "b")], {"a"})
        assert graph.neighbors(0) == [1]

    def test_dangling_edge_rejected(self):
        graph = _graph(["a"], [], {"a"})
        with pytest.raises(GraphError):
            graph.add_edge(0, 5)

    def test_find_exact_identity(self):
        graph = DependencyGraph()
        graph.add_package(Package("serde", "1.0.0", REGISTRY))
        git = graph.add_package(Package("serde", "1.0.0", "git+https://example.com/serde"))
        assert graph.find("serde", "1.0.0", "git+https://example.com/serde") == git

    def test_find_falls_back_to_name_and_version(self):
        graph = _graph(["a", "b"], [], {"a"})
        assert graph.find("b", "1.0.0", "some-other-source") == 1

    def test_find_ambiguous_fallback_returns_none(self):
        graph = DependencyGraph()
        graph.add_package(Package("serde", "1.0.0", REGISTRY))
        graph.add_package(Package("serde", "1.0.0", "git+https://example.com/serde"))
        assert graph.find("serde", "1.0.0") is None

    def test_find_missing(self):
        graph = _graph(["a"], [], {"a"})
        assert graph.find("zzz", "1.0.0") is None


# ── resolve ──────────────────────────────────────────────────────────────


class TestResolve:
    def test_chain(self):
        """A -> B -> C: B is direct, C is transitive through B."""
        graph = _graph(["A", "B", "C"], [("A", "B"), ("B", "C")], {"A"})
        res = _by_name(graph, resolve(graph, _node(graph, "A")))

        assert res["B"].direct is True
        assert res["B"].path == ()
        assert res["C"].direct is False
        assert res["C"].path == (graph.iid(_node(graph, "B")),)

    def test_root_not_in_result(self):
        graph = _graph(["A", "B"], [("A", "B")], {"A"})
        assert _node(graph, "A") not in resolve(graph, _node(graph, "A"))

    def test_unreachable_nodes_excluded(self):
        graph = _graph(["A", "B", "X"], [("A", "B")], {"A"})
        assert set(_by_name(graph, resolve(graph, 0))) == {"B"}

    def test_diamond_visits_each_node_once(self):
        graph = _graph(
            ["A", "B", "C", "D"],
            [("A", "B"), ("A", "C"), ("B", "D"), ("C", "D")],
            {"A"},
        )
        resolved = resolve(graph, 0)
        assert sorted(resolved) == [1, 2, 3]
        # B is iterated before C, so D is discovered through B.
        assert resolved[3].path == (graph.iid(1),)

    def test_tie_break_follows_adjacency_order(self):
        graph = _graph(
            ["A", "B", "C", "D"],
            [("A", "C"), ("A", "B"), ("B", "D"), ("C", "D")],
            {"A"},
        )
        resolved = resolve(graph, 0)
        assert resolved[3].path == (graph.iid(2),)

    def test_shortest_path_wins(self):
        """A -> B -> C -> D and A -> E -> D: D goes through E (depth 2)."""
        graph = _graph(
            ["A", "B", "C", "D", "E"],
            [("A", "B"), ("B", "C"), ("C", "D"), ("A", "E"), ("E", "D")],
            {"A"},
        )
        res = _by_name(graph, resolve(graph, 0))
        assert res["D"].path == (graph.iid(_node(graph, "E")),)
        assert res["C"].path == (graph.iid(_node(graph, "B")),)

    def test_path_in_root_to_node_order(self):
        graph = _graph(
            ["A", "B", "C", "D", "E"],
            [("A", "B"), ("B", "C"), ("C", "D"), ("D", "E")],
            {"A"},
        )
        res = _by_name(graph, resolve(graph, 0))
        assert res["E"].path == (graph.iid(1), graph.iid(2), graph.iid(3))

    def test_path_never_contains_node_or_root(self):
        graph = _graph(
            ["A", "B", "C", "D"],
            [("A", "B"), ("B", "C"), ("C", "D"), ("D", "B"), ("C", "A")],
            {"A"},
        )
        root = 0
        for node, res in resolve(graph, root).items():
            assert graph.iid(node) not in res.path
            assert graph.iid(root) not in res.path

    def test_cycle_terminates(self):
        graph = _graph(["A", "B", "C"], [("A", "B"), ("B", "C"), ("C", "B")], {"A"})
        res = _by_name(graph, resolve(graph, 0))
        assert set(res) == {"B", "C"}

    def test_cycle_back_to_root(self):
        graph = _graph(["A", "B"], [("A", "B"), ("B", "A")], {"A"})
        res = _by_name(graph, resolve(graph, 0))
        assert set(res) == {"B"}

    def test_direct_is_adjacency_based(self):
        """B is both a neighbour of A and reachable through C; it stays direct."""
        graph = _graph(["A", "B", "C"], [("A", "C"), ("C", "B"), ("A", "B")], {"A"})
        res = _by_name(graph, resolve(graph, 0))
        assert res["B"].direct is True
        assert res["C"].direct is True

    def test_discovery_policy_matches_empty_path(self):
        graph = _graph(["A", "B", "C"], [("A", "B"), ("B", "C")], {"A"})
        resolved = resolve(graph, 0, DirectPolicy.DISCOVERY)
        for res in resolved.values():
            assert res.direct == (res.path == ())

    def test_idempotent(self):
        graph = _graph(
            ["A", "B", "C", "D"],
            [("A", "B"), ("A", "C"), ("B", "D"), ("C", "D")],
            {"A"},
        )
        assert resolve(graph, 0) == resolve(graph, 0)

    def test_leaf_root(self):
        graph = _graph(["A"], [], {"A"})
        assert resolve(graph, 0) == {}

    def test_discovery_order_preserved(self):
        graph = _graph(["A", "B", "C", "D"], [("A", "C"), ("A", "B"), ("C", "D")], {"A"})
        assert list(resolve(graph, 0)) == [2, 1, 3]


class TestResolveAll:
    def test_two_roots_sharing_dependency(self):
        graph = _graph(["A", "D", "E"], [("A", "E"), ("D", "E")], {"A", "D"})
        per_root = resolve_all(graph, graph.roots())

        assert set(per_root) == {0, 1}
        for root in (0, 1):
            res = per_root[root][2]
            assert res.direct is True
            assert res.path == ()
            assert res.iid == graph.iid(2)

    def test_independent_paths(self):
        graph = _graph(
            ["A", "D", "B", "E"],
            [("A", "B"), ("B", "E"), ("D", "E")],
            {"A", "D"},
        )
        per_root = resolve_all(graph, graph.roots())
        assert per_root[0][3].path == (graph.iid(2),)
        assert per_root[0][3].direct is False
        assert per_root[1][3].path == ()
        assert per_root[1][3].direct is True
        assert 2 not in per_root[1]


class TestResolveErrors:
    def test_root_outside_graph(self):
        graph = _graph(["A"], [], {"A"})
        with pytest.raises(GraphError):
            resolve(graph, 3)
