"""Report assembler — join resolved graph positions with normalized findings."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from cargo_depscan.engines.assembler.models import (
    DependencyFile,
    Location,
    Report,
    ReportDependency,
    ReportVulnerability,
    RootSpec,
    ScanInfo,
)
from cargo_depscan.engines.graph.models import DependencyGraph
from cargo_depscan.engines.graph.resolver import DirectPolicy, Resolution, resolve_all
from cargo_depscan.engines.normalizer.models import Finding

log = structlog.get_logger("cargo_depscan.engine")

DEFAULT_FILE = "Cargo.lock"


def assemble(
    graph: DependencyGraph,
    roots: Sequence[RootSpec],
    findings: Sequence[Finding],
    *,
    package_manager: str = "cargo",
    scan: ScanInfo | None = None,
    direct_policy: DirectPolicy = DirectPolicy.ADJACENCY,
    default_file: str = DEFAULT_FILE,
) -> Report:
    """Build a :class:`Report` from the graph, its roots and the findings.

    Every root yields one :class:`DependencyFile` listing each reachable
    package once.  A finding is emitted once per root that reaches its
    package, located in that root's file.  A finding whose package no root
    reaches is still emitted, with name and version only.
    """
    resolutions = resolve_all(graph, [r.node for r in roots], direct_policy)

    dependency_files = [
        DependencyFile(
            path=root.path,
            package_manager=package_manager,
            dependencies=tuple(
                _report_dependency(graph, res) for res in resolutions[root.node].values()
            ),
        )
        for root in roots
    ]

    fallback_file = roots[0].path if roots else default_file
    vulnerabilities: list[ReportVulnerability] = []
    for finding in findings:
        pkg = finding.package
        node = graph.find(pkg.name, pkg.version, pkg.source)

        located = False
        if node is not None:
            for root in roots:
                res = resolutions[root.node].get(node)
                if res is None:
                    continue
                location = Location(file=root.path, dependency=_report_dependency(graph, res))
                vulnerabilities.append(ReportVulnerability(finding=finding, location=location))
                located = True

        if not located:
            log.debug(
                "assembler.unreachable_package",
                finding=finding.id,
                package=str(pkg),
                in_graph=node is not None,
            )
            location = Location(
                file=fallback_file,
                dependency=ReportDependency(name=pkg.name, version=pkg.version),
            )
            vulnerabilities.append(ReportVulnerability(finding=finding, location=location))

    return Report(vulnerabilities=vulnerabilities, dependency_files=dependency_files, scan=scan)


def _report_dependency(graph: DependencyGraph, res: Resolution) -> ReportDependency:
    package = graph.package(res.node)
    return ReportDependency(
        name=package.name,
        version=package.version,
        iid=res.iid,
        direct=res.direct,
        path=res.path,
    )
