"""Data models for the assembled security report."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from cargo_depscan.engines.normalizer.models import Finding

SCAN_TYPE = "dependency_scanning"


@dataclass(frozen=True)
class RootSpec:
    """A traversal root and the label of the dependency file it reports under."""

    node: int
    path: str


@dataclass(frozen=True)
class ReportDependency:
    """A package as it appears in a report.

    Graph fields stay ``None`` for a package that is not reachable from any
    root; they are then left out of the document.
    """

    name: str
    version: str
    iid: int | None = None
    direct: bool | None = None
    path: tuple[int, ...] | None = None


@dataclass(frozen=True)
class DependencyFile:
    path: str
    package_manager: str
    dependencies: tuple[ReportDependency, ...] = ()


@dataclass(frozen=True)
class Location:
    file: str
    dependency: ReportDependency


@dataclass(frozen=True)
class ReportVulnerability:
    """A finding joined to one position in the graph."""

    finding: Finding
    location: Location


@dataclass(frozen=True)
class Vendor:
    name: str


@dataclass(frozen=True)
class ToolInfo:
    id: str
    name: str
    version: str | None = None
    vendor: Vendor | None = None


@dataclass(frozen=True)
class ScanInfo:
    """Scan metadata; start/end bracket the advisory fetch."""

    analyzer: ToolInfo
    scanner: ToolInfo
    start_time: datetime
    end_time: datetime
    status: str = "success"
    type: str = SCAN_TYPE


@dataclass
class Report:
    vulnerabilities: list[ReportVulnerability] = field(default_factory=list)
    dependency_files: list[DependencyFile] = field(default_factory=list)
    scan: ScanInfo | None = None
