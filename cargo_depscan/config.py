"""Runtime settings — environment defaults, overridden by CLI options."""

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass, field, replace

from cargo_depscan.engines.assembler.schema import SchemaVersion
from cargo_depscan.engines.graph.resolver import DirectPolicy
from cargo_depscan.exceptions import ConfigurationError

DEFAULT_LOCKFILE = "Cargo.lock"
DEFAULT_AUDIT_BIN = "cargo audit"
PACKAGE_MANAGER = "cargo"


@dataclass(frozen=True)
class Settings:
    """Everything a single run needs to know besides its inputs."""

    lockfile: str = DEFAULT_LOCKFILE
    audit_json: str | None = None
    audit_command: list[str] = field(default_factory=lambda: shlex.split(DEFAULT_AUDIT_BIN))
    output: str | None = None
    schema: SchemaVersion = SchemaVersion.V15
    direct_policy: DirectPolicy = DirectPolicy.ADJACENCY
    package_manager: str = PACKAGE_MANAGER

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from ``CARGO_DEPSCAN_*`` environment variables.

        Supported variables:
            CARGO_DEPSCAN_LOCKFILE       — path to Cargo.lock
            CARGO_DEPSCAN_AUDIT_BIN      — cargo-audit command line
            CARGO_DEPSCAN_SCHEMA         — 2.0 | 14.1.2 | 15.0.6
            CARGO_DEPSCAN_DIRECT_POLICY  — adjacency | discovery
        """
        settings = cls()
        env = os.environ
        if env.get("CARGO_DEPSCAN_LOCKFILE"):
            settings = replace(settings, lockfile=env["CARGO_DEPSCAN_LOCKFILE"])
        if env.get("CARGO_DEPSCAN_AUDIT_BIN"):
            command = shlex.split(env["CARGO_DEPSCAN_AUDIT_BIN"])
            if not command:
                raise ConfigurationError("CARGO_DEPSCAN_AUDIT_BIN is empty")
            settings = replace(settings, audit_command=command)
        if env.get("CARGO_DEPSCAN_SCHEMA"):
            settings = replace(settings, schema=_parse_schema(env["CARGO_DEPSCAN_SCHEMA"]))
        if env.get("CARGO_DEPSCAN_DIRECT_POLICY"):
            settings = replace(
                settings, direct_policy=_parse_policy(env["CARGO_DEPSCAN_DIRECT_POLICY"])
            )
        return settings


def _parse_schema(value: str) -> SchemaVersion:
    try:
        return SchemaVersion(value)
    except ValueError:
        choices = ", ".join(v.value for v in SchemaVersion)
        raise ConfigurationError(
            f"Unknown schema version {value!r} (expected one of: {choices})"
        ) from None


def _parse_policy(value: str) -> DirectPolicy:
    try:
        return DirectPolicy(value.lower())
    except ValueError:
        choices = ", ".join(p.value for p in DirectPolicy)
        raise ConfigurationError(
            f"Unknown direct policy {value!r} (expected one of: {choices})"
        ) from None
