"""
Core functionality exports for jarkeeper.

Importing from here keeps user-facing imports short:

    from jarkeeper.core import DependencyResolver
"""

from __future__ import annotations

from jarkeeper.core.xmldoc import ParseResult
from jarkeeper.core.resolver import DependencyResolver
from jarkeeper.core.metadata import MavenMetadata, parse_metadata
from jarkeeper.core.pom import MavenPom, PomDependency, parse_pom

__all__ = [
    "DependencyResolver",
    "MavenMetadata",
    "MavenPom",
    "ParseResult",
    "PomDependency",
    "parse_metadata",
    "parse_pom",
]
