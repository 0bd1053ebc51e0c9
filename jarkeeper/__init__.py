"""
jarkeeper: Maven repository dependency resolution.

jarkeeper resolves artifacts published in Maven2-layout repositories: it
lists versions, interprets POMs (parents, properties, dependency
management, BOM imports), computes transitive closures per scope and
downloads the resulting artifacts.

Example:
    >>> from jarkeeper import Dependency, DependencyResolver, Repository, Scope
    >>> with DependencyResolver(
    ...     [Repository.MAVEN_CENTRAL], Dependency.parse("org.slf4j:slf4j-simple:2.0.5")
    ... ) as resolver:
    ...     print(resolver.get_all_dependencies(Scope.COMPILE))
"""

from __future__ import annotations

from jarkeeper.__version__ import __version__
from jarkeeper.utils.deadline import Deadline
from jarkeeper.core.resolver import DependencyResolver
from jarkeeper.models import (
    Dependency,
    DependencySet,
    Exclusion,
    Repository,
    Scope,
    VersionNumber,
)

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "jarkeeper Contributors"
__license__ = "Apache-2.0"
__description__ = "Maven repository dependency resolution for Python tooling."

__all__ = [
    "__version__",
    "Deadline",
    "Dependency",
    "DependencyResolver",
    "DependencySet",
    "Exclusion",
    "Repository",
    "Scope",
    "VersionNumber",
]
