"""Dependency graph — package arena and per-root path resolution."""

from cargo_depscan.engines.graph.models import DependencyGraph, Package
from cargo_depscan.engines.graph.resolver import DirectPolicy, Resolution, resolve, resolve_all

__all__ = ["DependencyGraph", "DirectPolicy", "Package", "Resolution", "resolve", "resolve_all"]
