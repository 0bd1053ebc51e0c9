"""
Unified data model exports for jarkeeper.

Users can import models directly from ``jarkeeper.models`` instead of
individual submodules.

Example:
    >>> from jarkeeper.models import Dependency, Repository, VersionNumber
"""

from __future__ import annotations

from jarkeeper.models.scope import Scope
from jarkeeper.models.version import VersionNumber
from jarkeeper.models.repository import Repository
from jarkeeper.models.dependency import Dependency, DependencySet, Exclusion

__all__ = [
    "Dependency",
    "DependencySet",
    "Exclusion",
    "Repository",
    "Scope",
    "VersionNumber",
]
