"""Input collectors — Cargo.lock graph and cargo-audit results."""

from cargo_depscan.collectors.cargo_audit import (
    parse_audit_json,
    read_audit_report,
    run_cargo_audit,
)
from cargo_depscan.collectors.cargo_lock import load_lockfile, parse_lockfile

__all__ = [
    "load_lockfile",
    "parse_audit_json",
    "parse_lockfile",
    "read_audit_report",
    "run_cargo_audit",
]
