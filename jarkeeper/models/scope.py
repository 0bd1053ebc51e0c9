"""
Dependency scopes for jarkeeper.

Scopes partition a POM's declared dependencies by intended use. The enum
mixes in ``str`` so members compare equal to the plain strings found in
POM documents, and every API that accepts a scope accepts either form.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Union


class Scope(str, Enum):
    """Maven dependency scopes, plus ``standalone`` for self-contained tools."""

    COMPILE = "compile"
    PROVIDED = "provided"
    RUNTIME = "runtime"
    TEST = "test"
    SYSTEM = "system"
    IMPORT = "import"
    STANDALONE = "standalone"

    def __str__(self) -> str:
        return self.value


ScopeLike = Union[Scope, str]


def scope_names(scopes: Iterable[ScopeLike]) -> List[str]:
    """Normalize scopes to their plain string names, keeping order."""
    return [scope.value if isinstance(scope, Scope) else str(scope) for scope in scopes]
