"""Report assembler — per-root dependency files, located findings, schema output."""

from cargo_depscan.engines.assembler.assembler import DEFAULT_FILE, assemble
from cargo_depscan.engines.assembler.models import (
    DependencyFile,
    Location,
    Report,
    ReportDependency,
    ReportVulnerability,
    RootSpec,
    ScanInfo,
    ToolInfo,
    Vendor,
)
from cargo_depscan.engines.assembler.schema import PROFILES, SchemaVersion, serialize

__all__ = [
    "DEFAULT_FILE",
    "PROFILES",
    "DependencyFile",
    "Location",
    "Report",
    "ReportDependency",
    "ReportVulnerability",
    "RootSpec",
    "ScanInfo",
    "SchemaVersion",
    "ToolInfo",
    "Vendor",
    "assemble",
    "serialize",
]
