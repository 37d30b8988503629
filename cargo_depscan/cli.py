"""CLI entry point: cargo-depscan.

Usage:
    cargo-depscan                                   # run cargo-audit on ./Cargo.lock
    cargo-depscan --audit-json audit.json           # convert a saved report
    cargo audit --json | cargo-depscan --audit-json -
    cargo-depscan -o gl-dependency-scanning-report.json --schema 14.1.2
"""

from __future__ import annotations

import json
import shlex
import sys
from dataclasses import replace
from pathlib import Path

import click
import structlog

from cargo_depscan import __version__
from cargo_depscan.config import Settings
from cargo_depscan.core.logging import setup_logging
from cargo_depscan.engines.assembler.schema import SchemaVersion
from cargo_depscan.engines.graph.resolver import DirectPolicy
from cargo_depscan.exceptions import ConfigurationError, DepscanError
from cargo_depscan.pipeline import run_pipeline
from cargo_depscan.summary import render_summary

log = structlog.get_logger("cargo_depscan.cli")


def _settings_from_options(
    lockfile: str | None,
    audit_json: str | None,
    cargo_audit_bin: str | None,
    output: str | None,
    schema: str | None,
    direct_policy: str | None,
) -> Settings:
    """Environment defaults first, then explicit options on top."""
    settings = Settings.from_env()
    if lockfile:
        settings = replace(settings, lockfile=lockfile)
    if audit_json:
        settings = replace(settings, audit_json=audit_json)
    if cargo_audit_bin:
        command = shlex.split(cargo_audit_bin)
        if not command:
            raise ConfigurationError("--cargo-audit-bin is empty")
        settings = replace(settings, audit_command=command)
    if output:
        settings = replace(settings, output=output)
    if schema:
        settings = replace(settings, schema=SchemaVersion(schema))
    if direct_policy:
        settings = replace(settings, direct_policy=DirectPolicy(direct_policy))
    return settings


@click.command()
@click.option("--lockfile", default=None, help="Cargo.lock to read (default: Cargo.lock)")
@click.option(
    "--audit-json",
    default=None,
    help="Saved `cargo audit --json` report, '-' for stdin. Runs cargo-audit when omitted.",
)
@click.option("--cargo-audit-bin", default=None, help="cargo-audit command (default: 'cargo audit')")
@click.option("-o", "--output", default=None, help="Write the report here instead of stdout")
@click.option(
    "--schema",
    type=click.Choice([v.value for v in SchemaVersion]),
    default=None,
    help="Report schema version (default: 15.0.6)",
)
@click.option(
    "--direct-policy",
    type=click.Choice([p.value for p in DirectPolicy]),
    default=None,
    help="How direct dependencies are classified (default: adjacency)",
)
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.version_option(__version__, prog_name="cargo-depscan")
def main(
    lockfile: str | None,
    audit_json: str | None,
    cargo_audit_bin: str | None,
    output: str | None,
    schema: str | None,
    direct_policy: str | None,
    verbose: bool,
) -> None:
    """Convert cargo-audit results into a GitLab dependency scanning report."""
    try:
        setup_logging("DEBUG" if verbose else None)
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    try:
        settings = _settings_from_options(
            lockfile, audit_json, cargo_audit_bin, output, schema, direct_policy
        )
        result = run_pipeline(settings)
    except DepscanError as e:
        log.error("cargo_depscan.failed", error=str(e), kind=type(e).__name__)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    text = json.dumps(result.document, indent=2) + "\n"
    if settings.output:
        try:
            Path(settings.output).write_text(text, encoding="utf-8")
        except OSError as e:
            click.echo(f"Error: cannot write {settings.output}: {e}", err=True)
            sys.exit(1)
        click.echo(f"Report written to {settings.output}", err=True)
    else:
        click.echo(text, nl=False)

    click.echo(render_summary(result.report), err=True)


if __name__ == "__main__":
    main()
