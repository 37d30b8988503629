"""Vulnerability normalizer — advisories to schema-agnostic findings."""

from cargo_depscan.engines.normalizer.models import (
    Advisory,
    AdvisorySeverity,
    Finding,
    Identifier,
    Link,
    Scanner,
    Severity,
    Vulnerability,
)
from cargo_depscan.engines.normalizer.normalizer import (
    DEFAULT_SCANNER,
    map_severity,
    normalize,
    normalize_all,
)

__all__ = [
    "DEFAULT_SCANNER",
    "Advisory",
    "AdvisorySeverity",
    "Finding",
    "Identifier",
    "Link",
    "Scanner",
    "Severity",
    "Vulnerability",
    "map_severity",
    "normalize",
    "normalize_all",
]
