"""Per-version serializers for the GitLab dependency scanning report.

All schema generations share one :class:`Report`; a :class:`SchemaProfile`
decides which optional blocks a version carries.  Absent values are
omitted from the output, never written as ``null``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from cargo_depscan.engines.assembler.models import (
    DependencyFile,
    Report,
    ReportDependency,
    ReportVulnerability,
    ScanInfo,
    ToolInfo,
)
from cargo_depscan.exceptions import SchemaError

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"


class SchemaVersion(Enum):
    V2 = "2.0"
    V14 = "14.1.2"
    V15 = "15.0.6"


@dataclass(frozen=True)
class SchemaProfile:
    version: SchemaVersion
    scan_block: bool  # generation B
    legacy_fields: bool  # category / message / cve


PROFILES: dict[SchemaVersion, SchemaProfile] = {
    SchemaVersion.V2: SchemaProfile(SchemaVersion.V2, scan_block=False, legacy_fields=True),
    SchemaVersion.V14: SchemaProfile(SchemaVersion.V14, scan_block=True, legacy_fields=True),
    SchemaVersion.V15: SchemaProfile(SchemaVersion.V15, scan_block=True, legacy_fields=False),
}


def serialize(report: Report, schema: SchemaVersion | str = SchemaVersion.V15) -> dict[str, Any]:
    """Render *report* as a JSON-ready dict for *schema*."""
    profile = PROFILES[_coerce(schema)]

    doc: dict[str, Any] = {
        "version": profile.version.value,
        "vulnerabilities": [_vulnerability(v, profile) for v in report.vulnerabilities],
    }
    if profile.scan_block:
        if report.scan is None:
            raise SchemaError(
                f"schema {profile.version.value} requires scan metadata, none was recorded"
            )
        doc["scan"] = _scan(report.scan)
    doc["dependency_files"] = [_dependency_file(f) for f in report.dependency_files]
    return doc


def _coerce(schema: SchemaVersion | str) -> SchemaVersion:
    if isinstance(schema, SchemaVersion):
        return schema
    try:
        return SchemaVersion(schema)
    except ValueError:
        raise SchemaError(f"unknown schema version {schema!r}") from None


def _vulnerability(entry: ReportVulnerability, profile: SchemaProfile) -> dict[str, Any]:
    f = entry.finding
    out: dict[str, Any] = {}
    _put(out, "id", f.id)
    if profile.legacy_fields:
        _put(out, "category", f.category)
    _put(out, "name", f.name)
    if profile.legacy_fields:
        _put(out, "message", f.message)
    _put(out, "description", f.description)
    if profile.legacy_fields:
        _put(out, "cve", f.cve)
    out["severity"] = f.severity.value
    _put(out, "solution", f.solution)
    out["scanner"] = {"id": f.scanner.id, "name": f.scanner.name}

    identifiers = []
    for ident in f.identifiers:
        item: dict[str, Any] = {"type": ident.type, "name": ident.name}
        _put(item, "url", ident.url)
        item["value"] = ident.value
        identifiers.append(item)
    out["identifiers"] = identifiers

    if f.links:
        links = []
        for link in f.links:
            entry_link: dict[str, Any] = {}
            _put(entry_link, "name", link.name)
            entry_link["url"] = link.url
            links.append(entry_link)
        out["links"] = links

    out["location"] = {
        "file": entry.location.file,
        "dependency": _dependency(entry.location.dependency),
    }
    return out


def _dependency(dep: ReportDependency) -> dict[str, Any]:
    out: dict[str, Any] = {"package": {"name": dep.name}, "version": dep.version}
    _put(out, "iid", dep.iid)
    _put(out, "direct", dep.direct)
    if dep.path:
        out["dependency_path"] = [{"iid": iid} for iid in dep.path]
    return out


def _dependency_file(dep_file: DependencyFile) -> dict[str, Any]:
    return {
        "path": dep_file.path,
        "package_manager": dep_file.package_manager,
        "dependencies": [_dependency(d) for d in dep_file.dependencies],
    }


def _scan(scan: ScanInfo) -> dict[str, Any]:
    return {
        "analyzer": _tool(scan.analyzer),
        "scanner": _tool(scan.scanner),
        "start_time": _timestamp(scan.start_time),
        "end_time": _timestamp(scan.end_time),
        "status": scan.status,
        "type": scan.type,
    }


def _tool(tool: ToolInfo) -> dict[str, Any]:
    out: dict[str, Any] = {"id": tool.id, "name": tool.name}
    _put(out, "version", tool.version)
    if tool.vendor is not None:
        out["vendor"] = {"name": tool.vendor.name}
    return out


def _timestamp(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(TIMESTAMP_FORMAT)


def _put(target: dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        target[key] = value
