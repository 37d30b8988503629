"""Data models for advisories and normalized findings."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from cargo_depscan.engines.graph.models import Package


class AdvisorySeverity(Enum):
    """Severity vocabulary used by advisory databases."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Severity(Enum):
    """Severity vocabulary of the security report."""

    INFO = "Info"
    UNKNOWN = "Unknown"
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


@dataclass(frozen=True)
class Advisory:
    """A published vulnerability record, as reported by cargo-audit."""

    id: str
    title: str
    description: str
    severity: AdvisorySeverity | None = None
    url: str | None = None
    package: str | None = None
    date: str | None = None
    cvss: str | None = None
    patched_versions: tuple[str, ...] | None = None
    unaffected_versions: tuple[str, ...] | None = None
    aliases: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    references: tuple[str, ...] = ()


@dataclass(frozen=True)
class Vulnerability:
    """An advisory matched against one concrete package."""

    advisory: Advisory
    package: Package


@dataclass(frozen=True)
class Scanner:
    id: str
    name: str


@dataclass(frozen=True)
class Identifier:
    type: str
    name: str
    value: str
    url: str | None = None


@dataclass(frozen=True)
class Link:
    url: str
    name: str | None = None


@dataclass(frozen=True)
class Finding:
    """Schema-agnostic normalized vulnerability.

    Carries the matched package but no graph position; the assembler adds
    iid, direct flag and dependency path per root.
    """

    id: str
    severity: Severity
    scanner: Scanner
    package: Package
    identifiers: tuple[Identifier, ...] = ()
    category: str | None = None
    name: str | None = None
    message: str | None = None
    description: str | None = None
    cve: str | None = None
    solution: str | None = None
    links: tuple[Link, ...] | None = None
