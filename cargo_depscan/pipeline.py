"""Report pipeline — lockfile → advisories → normalize → resolve → assemble."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

from cargo_depscan import __version__
from cargo_depscan.collectors.cargo_audit import read_audit_report, run_cargo_audit
from cargo_depscan.collectors.cargo_lock import load_lockfile
from cargo_depscan.config import Settings
from cargo_depscan.engines.assembler.assembler import assemble
from cargo_depscan.engines.assembler.models import Report, RootSpec, ScanInfo, ToolInfo, Vendor
from cargo_depscan.engines.assembler.schema import PROFILES, serialize
from cargo_depscan.engines.graph.models import DependencyGraph
from cargo_depscan.engines.normalizer.models import Vulnerability
from cargo_depscan.engines.normalizer.normalizer import DEFAULT_SCANNER, normalize_all
from cargo_depscan.exceptions import NoRootsError
from cargo_depscan.progress import ProgressTracker

log = structlog.get_logger("cargo_depscan.pipeline")

ANALYZER = ToolInfo(
    id="cargo_depscan",
    name="cargo-depscan",
    version=__version__,
    vendor=Vendor(name="cargo-depscan"),
)
SCANNER = ToolInfo(
    id=DEFAULT_SCANNER.id,
    name=DEFAULT_SCANNER.name,
    version="unknown",
    vendor=Vendor(name="RustSec"),
)

AdvisoryFetcher = Callable[[Settings], list[Vulnerability]]


@dataclass
class PipelineOutput:
    report: Report
    document: dict[str, Any]
    progress: ProgressTracker


def fetch_advisories(settings: Settings) -> list[Vulnerability]:
    """Read a saved cargo-audit report, or run cargo-audit when none is given."""
    if settings.audit_json is not None:
        return read_audit_report(settings.audit_json)
    return run_cargo_audit(settings.audit_command, Path(settings.lockfile))


def root_specs(graph: DependencyGraph, label: str) -> list[RootSpec]:
    """One root per local package; all of them report under the lockfile path."""
    roots = graph.roots()
    if not roots:
        raise NoRootsError(label)
    return [RootSpec(node=node, path=label) for node in roots]


def run_pipeline(
    settings: Settings,
    fetcher: AdvisoryFetcher = fetch_advisories,
    progress: ProgressTracker | None = None,
) -> PipelineOutput:
    """Run every stage; any exception aborts before a document exists.

    Phases: ``lockfile``, ``fetch``, ``normalize``, ``assemble``,
    ``serialize``.  The ``fetch`` phase timestamps become the scan block's
    start and end time.
    """
    progress = progress or ProgressTracker()

    with progress.phase("lockfile"):
        graph = load_lockfile(Path(settings.lockfile))
        roots = root_specs(graph, settings.lockfile)
        progress.complete_phase(
            "lockfile", detail=f"{len(graph)} packages, {len(roots)} root(s)"
        )

    with progress.phase("fetch"):
        vulns = fetcher(settings)
        progress.complete_phase("fetch", detail=f"{len(vulns)} vulnerabilities")

    with progress.phase("normalize"):
        findings = normalize_all(vulns)

    scan = None
    if PROFILES[settings.schema].scan_block:
        started, finished = progress.window("fetch")
        scan = ScanInfo(analyzer=ANALYZER, scanner=SCANNER, start_time=started, end_time=finished)

    with progress.phase("assemble"):
        report = assemble(
            graph,
            roots,
            findings,
            package_manager=settings.package_manager,
            scan=scan,
            direct_policy=settings.direct_policy,
        )

    with progress.phase("serialize"):
        document = serialize(report, settings.schema)

    log.debug("pipeline.phases", **progress.get_summary())
    log.info(
        "pipeline.complete",
        schema=settings.schema.value,
        vulnerabilities=len(report.vulnerabilities),
        dependency_files=len(report.dependency_files),
    )
    return PipelineOutput(report=report, document=document, progress=progress)
