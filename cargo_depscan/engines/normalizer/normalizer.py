"""Vulnerability normalizer — pure mapping from (advisory, package) to a Finding."""

from __future__ import annotations

from collections.abc import Iterable

from cargo_depscan.engines.normalizer.models import (
    AdvisorySeverity,
    Finding,
    Identifier,
    Link,
    Scanner,
    Severity,
    Vulnerability,
)

CATEGORY = "dependency_scanning"
IDENTIFIER_TYPE = "rustsec"
ADVISORY_BASE_URL = "https://rustsec.org/advisories/"
DEFAULT_SCANNER = Scanner(id="cargo_audit", name="cargo-audit")

_SEVERITY_MAP: dict[AdvisorySeverity, Severity] = {
    AdvisorySeverity.NONE: Severity.INFO,
    AdvisorySeverity.LOW: Severity.LOW,
    AdvisorySeverity.MEDIUM: Severity.MEDIUM,
    AdvisorySeverity.HIGH: Severity.HIGH,
    AdvisorySeverity.CRITICAL: Severity.CRITICAL,
}


def map_severity(severity: AdvisorySeverity | None) -> Severity:
    """Map an advisory severity to the report vocabulary; absent means Unknown."""
    if severity is None:
        return Severity.UNKNOWN
    return _SEVERITY_MAP[severity]


def advisory_url(advisory_id: str) -> str:
    return f"{ADVISORY_BASE_URL}{advisory_id}"


def normalize(vuln: Vulnerability, scanner: Scanner = DEFAULT_SCANNER) -> Finding:
    """Build the canonical :class:`Finding` for one matched advisory.

    The advisory id is kept as the finding id so repeated runs group the
    same way.  It is not globally unique: the same advisory matched against
    two packages yields two findings with one id.
    """
    advisory = vuln.advisory
    package_name = advisory.package or vuln.package.name

    identifiers = (
        Identifier(
            type=IDENTIFIER_TYPE,
            name=advisory.id,
            value=advisory.id,
            url=advisory_url(advisory.id),
        ),
    )
    # TODO: propagate advisory.aliases (CVE/GHSA ids) as extra identifiers.

    links = (Link(url=advisory.url),) if advisory.url else None

    return Finding(
        id=advisory.id,
        category=CATEGORY,
        name=advisory.title,
        message=f"[{package_name}] {advisory.title}",
        description=advisory.description,
        cve=advisory.id,
        severity=map_severity(advisory.severity),
        solution=_solution(advisory.patched_versions),
        scanner=scanner,
        identifiers=identifiers,
        links=links,
        package=vuln.package,
    )


def normalize_all(
    vulns: Iterable[Vulnerability], scanner: Scanner = DEFAULT_SCANNER
) -> list[Finding]:
    return [normalize(v, scanner) for v in vulns]


def _solution(patched: tuple[str, ...] | None) -> str | None:
    if not patched:
        return None
    return "Upgrade to " + " or ".join(patched)
