"""Human-readable vulnerability summary for the diagnostic stream."""

from __future__ import annotations

from cargo_depscan.engines.assembler.models import Report
from cargo_depscan.engines.normalizer.models import Severity

_SEVERITY_ORDER = [
    Severity.CRITICAL,
    Severity.HIGH,
    Severity.MEDIUM,
    Severity.LOW,
    Severity.INFO,
    Severity.UNKNOWN,
]


def render_summary(report: Report) -> str:
    """Return a short text summary of *report*'s findings."""
    deps = sum(len(f.dependencies) for f in report.dependency_files)
    if not report.vulnerabilities:
        return f"No vulnerabilities found ({deps} dependencies scanned)."

    lines = [
        f"Found {len(report.vulnerabilities)} vulnerabilities "
        f"in {deps} dependencies ({len(report.dependency_files)} dependency file(s))",
        "",
    ]
    counts = {s: 0 for s in _SEVERITY_ORDER}
    for entry in report.vulnerabilities:
        counts[entry.finding.severity] += 1
    lines.append(
        "  " + ", ".join(f"{s.value}: {counts[s]}" for s in _SEVERITY_ORDER if counts[s])
    )
    lines.append("")

    for entry in report.vulnerabilities:
        f = entry.finding
        dep = entry.location.dependency
        kind = ""
        if dep.direct is not None:
            kind = " (direct)" if dep.direct else " (transitive)"
        lines.append(f"  {f.id}  [{f.severity.value}]  {dep.name} {dep.version}{kind}")
        if f.name:
            lines.append(f"    {f.name}")
        if f.solution:
            lines.append(f"    {f.solution}")
    return "\n".join(lines)
