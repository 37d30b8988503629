"""cargo-depscan: GitLab dependency scanning reports from cargo-audit results."""

__version__ = "0.1.0"

from cargo_depscan.engines.assembler import (
    DependencyFile,
    Report,
    ReportDependency,
    RootSpec,
    ScanInfo,
    SchemaVersion,
    assemble,
    serialize,
)
from cargo_depscan.engines.graph import (
    DependencyGraph,
    DirectPolicy,
    Package,
    Resolution,
    resolve,
    resolve_all,
)
from cargo_depscan.engines.normalizer import (
    Advisory,
    AdvisorySeverity,
    Finding,
    Severity,
    Vulnerability,
    normalize,
    normalize_all,
)

__all__ = [
    "Advisory",
    "AdvisorySeverity",
    "DependencyFile",
    "DependencyGraph",
    "DirectPolicy",
    "Finding",
    "Package",
    "Report",
    "ReportDependency",
    "Resolution",
    "RootSpec",
    "ScanInfo",
    "SchemaVersion",
    "Severity",
    "Vulnerability",
    "assemble",
    "normalize",
    "normalize_all",
    "resolve",
    "resolve_all",
    "serialize",
]
