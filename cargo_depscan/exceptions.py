"""Custom exceptions for cargo-depscan."""

from __future__ import annotations


class DepscanError(Exception):
    """Base exception for all cargo-depscan errors."""


class CollaboratorError(DepscanError):
    """An input source (lockfile, advisory report) could not be obtained."""


class LockfileError(CollaboratorError):
    """Raised when Cargo.lock is missing, unreadable or malformed."""


class AdvisorySourceError(CollaboratorError):
    """Raised when cargo-audit fails or its JSON output is invalid."""


class ConfigurationError(DepscanError):
    """Base class for project configuration problems."""


class NoRootsError(ConfigurationError):
    """Raised when the dependency graph declares no local packages."""

    def __init__(self, source: str = "dependency graph"):
        self.source = source
        super().__init__(
            f"No project or workspace packages found in {source}. "
            "Local packages (without a source) are used as report roots."
        )


class GraphError(DepscanError):
    """Raised when an edge or node index refers outside the graph."""


class SchemaError(DepscanError):
    """Raised for an unknown schema version or a report it cannot express."""


class ResolutionInvariantError(DepscanError, AssertionError):
    """A predecessor chain is broken. Programming error, never recovered."""
