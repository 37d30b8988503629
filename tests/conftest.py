"""Shared pytest fixtures for cargo-depscan tests."""

import json
import textwrap

import pytest

REGISTRY = "registry+https://github.com/rust-lang/crates.io-index"

# app -> log -> cfg-if ; app -> time
LOCKFILE = textwrap.dedent(
    f"""\
    version = 3

    [[package]]
    name = "app"
    version = "0.1.0"
    dependencies = [
     "log",
     "time",
    ]

    [[package]]
    name = "cfg-if"
    version = "1.0.0"
    source = "{REGISTRY}"

    [[package]]
    name = "log"
    version = "0.4.20"
    source = "{REGISTRY}"
    dependencies = [
     "cfg-if",
    ]

    [[package]]
    name = "time"
    version = "0.1.45"
    source = "{REGISTRY}"
    """
)


def audit_report(*entries: dict) -> str:
    return json.dumps({"vulnerabilities": {"found": bool(entries), "list": list(entries)}})


def audit_entry(name: str, version: str, advisory_id: str, **advisory) -> dict:
    adv = {
        "id": advisory_id,
        "package": name,
        "title": f"Vulnerability in {name}",
        "description": f"{name} is broken.",
    }
    adv.update(advisory)
    return {
        "advisory": adv,
        "package": {"name": name, "version": version, "source": REGISTRY},
    }


@pytest.fixture
def project(tmp_path):
    """A directory holding Cargo.lock and a saved cargo-audit report."""
    (tmp_path / "Cargo.lock").write_text(LOCKFILE)
    (tmp_path / "audit.json").write_text(
        audit_report(
            audit_entry(
                "cfg-if",
                "1.0.0",
                "RUSTSEC-2099-0001",
                url="https://example.com/cfg-if",
                severity="medium",
            ),
            audit_entry("time", "0.1.45", "RUSTSEC-2020-0071"),
        )
    )
    return tmp_path
