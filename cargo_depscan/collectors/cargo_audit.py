"""cargo-audit JSON reader — turns an audit report into matched vulnerabilities."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from cargo_depscan.engines.graph.models import Package
from cargo_depscan.engines.normalizer.models import Advisory, AdvisorySeverity, Vulnerability
from cargo_depscan.exceptions import AdvisorySourceError

log = structlog.get_logger("cargo_depscan.collector")


# ── report schema ────────────────────────────────────────────────────────


class AuditVersions(BaseModel):
    patched: list[str] = Field(default_factory=list)
    unaffected: list[str] = Field(default_factory=list)


class AuditAdvisory(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    title: str
    description: str = ""
    package: str | None = None
    date: str | None = None
    url: str | None = None
    cvss: str | None = None
    severity: AdvisorySeverity | None = None
    aliases: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    references: list[str] = Field(default_factory=list)
    # Older cargo-audit releases keep version ranges on the advisory.
    patched_versions: list[str] | None = None
    unaffected_versions: list[str] | None = None

    @field_validator("severity", mode="before")
    @classmethod
    def _lower_severity(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    def to_advisory(self, versions: AuditVersions | None = None) -> Advisory:
        patched = self.patched_versions
        unaffected = self.unaffected_versions
        if versions is not None:
            patched = versions.patched
            unaffected = versions.unaffected
        return Advisory(
            id=self.id,
            title=self.title,
            description=self.description,
            severity=self.severity,
            url=self.url or None,
            package=self.package,
            date=self.date,
            cvss=self.cvss,
            patched_versions=tuple(patched) if patched is not None else None,
            unaffected_versions=tuple(unaffected) if unaffected is not None else None,
            aliases=tuple(self.aliases),
            keywords=tuple(self.keywords),
            references=tuple(self.references),
        )


class AuditPackage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    version: str
    source: str | None = None


class AuditVulnerability(BaseModel):
    advisory: AuditAdvisory
    package: AuditPackage
    versions: AuditVersions | None = None


class AuditVulnerabilities(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    found: bool = False
    count: int = 0
    entries: list[AuditVulnerability] = Field(default_factory=list, alias="list")


class AuditReport(BaseModel):
    model_config = ConfigDict(extra="ignore")

    vulnerabilities: AuditVulnerabilities = Field(default_factory=AuditVulnerabilities)


# ── loading ──────────────────────────────────────────────────────────────


def parse_audit_json(text: str, label: str = "cargo-audit output") -> list[Vulnerability]:
    """Validate cargo-audit JSON and return its matched vulnerabilities in order."""
    try:
        report = AuditReport.model_validate_json(text)
    except ValidationError as e:
        raise AdvisorySourceError(f"{label} is not a valid cargo-audit report: {e}") from e

    vulns = [
        Vulnerability(
            advisory=entry.advisory.to_advisory(entry.versions),
            package=Package(
                name=entry.package.name,
                version=entry.package.version,
                source=entry.package.source,
            ),
        )
        for entry in report.vulnerabilities.entries
    ]
    log.debug("cargo_audit.parsed", source=label, vulnerabilities=len(vulns))
    return vulns


def read_audit_report(target: str) -> list[Vulnerability]:
    """Read a saved report from *target*; ``-`` means stdin."""
    if target == "-":
        try:
            text = sys.stdin.read()
        except UnicodeDecodeError as e:
            raise AdvisorySourceError(f"stdin is not valid UTF-8: {e}") from e
        return parse_audit_json(text, label="stdin")
    path = Path(target)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise AdvisorySourceError(f"cannot read {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise AdvisorySourceError(f"{path} is not valid UTF-8: {e}") from e
    return parse_audit_json(text, label=str(path))


def run_cargo_audit(command: list[str], lockfile: Path) -> list[Vulnerability]:
    """Run cargo-audit against *lockfile* and parse its JSON output.

    cargo-audit exits non-zero when it finds vulnerabilities, so the exit
    code alone does not mean failure; only unusable output does.
    """
    cmd = [*command, "--json", "--file", str(lockfile)]
    log.info("cargo_audit.run", cmd=" ".join(cmd))
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except OSError as e:
        raise AdvisorySourceError(f"cannot run {cmd[0]!r}: {e}") from e
    except UnicodeDecodeError as e:
        raise AdvisorySourceError(f"cargo-audit output is not valid UTF-8: {e}") from e

    if not proc.stdout.strip():
        raise AdvisorySourceError(
            f"cargo-audit failed (exit {proc.returncode}): {proc.stderr.strip()}"
        )
    return parse_audit_json(proc.stdout)
