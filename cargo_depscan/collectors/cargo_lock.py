"""Loader for Cargo.lock files — builds the dependency graph."""

from __future__ import annotations

import re
import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import structlog

from cargo_depscan.engines.graph.models import DependencyGraph, Package
from cargo_depscan.exceptions import LockfileError, NoRootsError

log = structlog.get_logger("cargo_depscan.collector")

# "name", "name version" or "name version (source)"
_DEP_REF = re.compile(r"^(?P<name>\S+)(?: (?P<version>\S+))?(?: \((?P<source>.+)\))?$")


def load_lockfile(path: Path) -> DependencyGraph:
    """Read and parse *path*, raising :class:`LockfileError` on any failure."""
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise LockfileError(f"cannot read {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise LockfileError(f"{path} is not valid UTF-8: {e}") from e
    return parse_lockfile(content, label=str(path))


def parse_lockfile(content: str, label: str = "Cargo.lock") -> DependencyGraph:
    """Parse Cargo.lock text into a :class:`DependencyGraph`.

    Edges keep the order of each package's ``dependencies`` array.  Raises
    :class:`NoRootsError` when the lockfile holds no local package.
    """
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise LockfileError(f"{label} is not valid TOML: {e}") from e

    entries = data.get("package", [])
    if not isinstance(entries, list):
        raise LockfileError(f"{label}: [[package]] must be an array of tables")

    graph = DependencyGraph()
    by_name: dict[str, list[int]] = {}
    for entry in entries:
        try:
            package = Package(
                name=entry["name"],
                version=entry["version"],
                source=entry.get("source"),
            )
        except (KeyError, TypeError) as e:
            raise LockfileError(f"{label}: package entry without name/version: {entry!r}") from e
        node = graph.add_package(package)
        by_name.setdefault(package.name, []).append(node)

    for entry in entries:
        node = graph.node_of(Package(entry["name"], entry["version"], entry.get("source")))
        refs = entry.get("dependencies", [])
        if not isinstance(refs, list):
            raise LockfileError(f"{label}: dependencies of {entry['name']} must be an array")
        for ref in refs:
            target = _resolve_ref(graph, by_name, ref, label)
            graph.add_edge(node, target)  # type: ignore[arg-type]

    if not graph.roots():
        raise NoRootsError(label)

    log.debug(
        "cargo_lock.parsed",
        lockfile=label,
        packages=len(graph),
        roots=[str(graph.package(r)) for r in graph.roots()],
    )
    return graph


def _resolve_ref(
    graph: DependencyGraph, by_name: dict[str, list[int]], ref: object, label: str
) -> int:
    if not isinstance(ref, str):
        raise LockfileError(f"{label}: dependency reference must be a string, got {ref!r}")
    m = _DEP_REF.match(ref)
    if m is None:
        raise LockfileError(f"{label}: malformed dependency reference {ref!r}")

    candidates = by_name.get(m["name"], [])
    if m["version"] is not None:
        candidates = [c for c in candidates if graph.package(c).version == m["version"]]
    if m["source"] is not None:
        exact = [c for c in candidates if graph.package(c).source == m["source"]]
        if exact:
            candidates = exact
        else:
            wanted = _source_key(m["source"])
            candidates = [
                c for c in candidates if _source_key(graph.package(c).source) == wanted
            ]

    if len(candidates) != 1:
        problem = "unknown" if not candidates else "ambiguous"
        raise LockfileError(f"{label}: {problem} dependency reference {ref!r}")
    return candidates[0]


def _source_key(source: str | None) -> str | None:
    """Source id without the git revision and the default-branch query.

    Cargo writes git sources as ``git+<url>#<rev>`` on the package but
    refers to them without the revision, and v1 lockfiles may drop
    ``?branch=master``.
    """
    if source is None:
        return None
    source = source.split("#", 1)[0]
    return source.removesuffix("?branch=master")
