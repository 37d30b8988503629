"""Tests for the vulnerability normalizer."""

from __future__ import annotations

import pytest

from cargo_depscan.engines.graph.models import Package
from cargo_depscan.engines.normalizer.models import (
    Advisory,
    AdvisorySeverity,
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

REGISTRY = "registry+https://github.com/rust-lang/crates.io-index"


def _vuln(**overrides) -> Vulnerability:
    fields = {
        "id": "RUSTSEC-2021-0001",
        "title": "Use after free in Foo",
        "description": "Freeing a Foo twice corrupts memory.",
        "package": "foo",
    }
    fields.update(overrides)
    return Vulnerability(
        advisory=Advisory(**fields),
        package=Package("foo", "0.3.1", REGISTRY),
    )


class TestSeverityMapping:
    @pytest.mark.parametrize(
        "severity, expected",
        [
            (AdvisorySeverity.NONE, Severity.INFO),
            (AdvisorySeverity.LOW, Severity.LOW),
            (AdvisorySeverity.MEDIUM, Severity.MEDIUM),
            (AdvisorySeverity.HIGH, Severity.HIGH),
            (AdvisorySeverity.CRITICAL, Severity.CRITICAL),
        ],
    )
    def test_one_to_one(self, severity, expected):
        assert map_severity(severity) is expected

    def test_absent_is_unknown(self):
        assert map_severity(None) is Severity.UNKNOWN

    def test_total(self):
        for severity in AdvisorySeverity:
            assert isinstance(map_severity(severity), Severity)


class TestNormalize:
    def test_id_is_advisory_id(self):
        finding = normalize(_vuln())
        assert finding.id == "RUSTSEC-2021-0001"
        assert finding.cve == "RUSTSEC-2021-0001"

    def test_text_fields(self):
        finding = normalize(_vuln())
        assert finding.category == "dependency_scanning"
        assert finding.name == "Use after free in Foo"
        assert finding.message == "[foo] Use after free in Foo"
        assert finding.description == "Freeing a Foo twice corrupts memory."

    def test_message_falls_back_to_matched_package(self):
        finding = normalize(_vuln(package=None))
        assert finding.message == "[foo] Use after free in Foo"

    def test_absent_severity_is_unknown_not_high(self):
        finding = normalize(_vuln())
        assert finding.severity is Severity.UNKNOWN

    def test_severity_mapped(self):
        finding = normalize(_vuln(severity=AdvisorySeverity.CRITICAL))
        assert finding.severity is Severity.CRITICAL

    def test_single_identifier(self):
        finding = normalize(_vuln(aliases=("CVE-2021-1234", "GHSA-xxxx-yyyy-zzzz")))
        assert len(finding.identifiers) == 1
        ident = finding.identifiers[0]
        assert ident.type == "rustsec"
        assert ident.name == "RUSTSEC-2021-0001"
        assert ident.value == "RUSTSEC-2021-0001"
        assert ident.url == "https://rustsec.org/advisories/RUSTSEC-2021-0001"

    def test_link_from_primary_url(self):
        finding = normalize(
            _vuln(
                url="https://github.com/foo/foo/issues/1",
                references=("https://example.com/a", "https://example.com/b"),
            )
        )
        assert finding.links is not None
        assert [link.url for link in finding.links] == ["https://github.com/foo/foo/issues/1"]
        assert finding.links[0].name is None

    def test_no_url_no_links(self):
        assert normalize(_vuln()).links is None

    def test_solution_from_patched_versions(self):
        finding = normalize(_vuln(patched_versions=(">=0.3.2", "^0.2.9")))
        assert finding.solution == "Upgrade to >=0.3.2 or ^0.2.9"

    def test_no_patched_versions_no_solution(self):
        assert normalize(_vuln()).solution is None
        assert normalize(_vuln(patched_versions=())).solution is None

    def test_location_package_only(self):
        finding = normalize(_vuln())
        assert finding.package == Package("foo", "0.3.1", REGISTRY)

    def test_default_scanner(self):
        assert normalize(_vuln()).scanner == DEFAULT_SCANNER
        assert DEFAULT_SCANNER == Scanner(id="cargo_audit", name="cargo-audit")

    def test_custom_scanner(self):
        scanner = Scanner(id="other", name="Other")
        assert normalize(_vuln(), scanner).scanner == scanner

    def test_pure(self):
        vuln = _vuln(severity=AdvisorySeverity.HIGH, url="https://example.com")
        assert normalize(vuln) == normalize(vuln)


class TestNormalizeAll:
    def test_preserves_order(self):
        vulns = [_vuln(id="RUSTSEC-2021-0002"), _vuln(id="RUSTSEC-2020-0001")]
        assert [f.id for f in normalize_all(vulns)] == ["RUSTSEC-2021-0002", "RUSTSEC-2020-0001"]

    def test_empty(self):
        assert normalize_all([]) == []
