"""
Dependency data models for jarkeeper.

This module defines the coordinate vocabulary shared by every part of the
resolver:

- :class:`Exclusion`: a ``(groupId, artifactId)`` pair that suppresses
  matching transitive candidates
- :class:`Dependency`: an immutable artifact coordinate with a version
- :class:`DependencySet`: a coordinate-keyed collection that keeps the
  highest version seen per coordinate
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Iterator, Optional, Tuple, Union

from jarkeeper.constants import DEFAULT_ARTIFACT_TYPE
from jarkeeper.models.version import VersionNumber

#: ``(group_id, artifact_id, classifier, type)``
CoordinateKey = Tuple[str, str, str, str]

_WILDCARD = "*"

_COORDINATE_PATTERN = re.compile(
    r"^(?P<group>[^:@\s]+):(?P<artifact>[^:@\s]+)"
    r"(?::(?P<version>[^:@\s]*))?"
    r"(?::(?P<classifier>[^:@\s]+))?"
    r"(?:@(?P<type>[^:@\s]+))?$"
)


@dataclass(frozen=True)
class Exclusion:
    """A ``(groupId, artifactId)`` pair excluded from transitive resolution.

    Either field may be ``"*"`` to match anything.
    """

    group_id: str
    artifact_id: str

    def matches(self, group_id: str, artifact_id: str) -> bool:
        """Return True if this exclusion suppresses the given coordinate."""
        return self.group_id in (_WILDCARD, group_id) and self.artifact_id in (
            _WILDCARD,
            artifact_id,
        )

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"


ExclusionLike = Union[Exclusion, Tuple[str, str]]


def _to_exclusions(items: Iterable[ExclusionLike]) -> FrozenSet[Exclusion]:
    return frozenset(
        item if isinstance(item, Exclusion) else Exclusion(*item) for item in items
    )


@dataclass(frozen=True)
class Dependency:
    """An immutable artifact coordinate.

    ``version`` and ``exclusions`` accept convenient inputs (a version
    string, ``(group, artifact)`` tuples) and are normalized on creation.

    Attributes:
        group_id: Maven groupId.
        artifact_id: Maven artifactId.
        version: Requested version; :data:`VersionNumber.UNKNOWN` means
            "use the latest".
        classifier: Artifact classifier, empty for the main artifact.
        type: Artifact type / file extension.
        exclusions: Transitive coordinates this dependency suppresses.
    """

    group_id: str
    artifact_id: str
    version: VersionNumber = VersionNumber.UNKNOWN
    classifier: str = ""
    type: str = DEFAULT_ARTIFACT_TYPE
    exclusions: FrozenSet[Exclusion] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not isinstance(self.version, VersionNumber):
            object.__setattr__(self, "version", VersionNumber.parse(self.version))
        object.__setattr__(self, "classifier", self.classifier or "")
        object.__setattr__(self, "type", self.type or DEFAULT_ARTIFACT_TYPE)
        if not isinstance(self.exclusions, frozenset) or not all(
            isinstance(item, Exclusion) for item in self.exclusions
        ):
            object.__setattr__(self, "exclusions", _to_exclusions(self.exclusions))

    @classmethod
    def parse(cls, coordinate: str) -> "Dependency":
        """Parse ``group:artifact[:version[:classifier]][@type]``.

        Raises:
            ValueError: If ``coordinate`` doesn't follow that format.

        Example:
            >>> str(Dependency.parse("org.slf4j:slf4j-api:2.0.5"))
            'org.slf4j:slf4j-api:2.0.5'
        """
        match = _COORDINATE_PATTERN.match(coordinate.strip())
        if not match:
            raise ValueError(f"Invalid dependency coordinate: {coordinate!r}")

        return cls(
            match.group("group"),
            match.group("artifact"),
            VersionNumber.parse(match.group("version")),
            match.group("classifier") or "",
            match.group("type") or DEFAULT_ARTIFACT_TYPE,
        )

    @property
    def key(self) -> CoordinateKey:
        """Version-independent identity of this dependency."""
        return (self.group_id, self.artifact_id, self.classifier, self.type)

    def excludes(self, group_id: str, artifact_id: str) -> bool:
        """Return True if any of this dependency's exclusions matches."""
        return any(ex.matches(group_id, artifact_id) for ex in self.exclusions)

    def with_version(self, version: Union[VersionNumber, str]) -> "Dependency":
        """Return a copy of this dependency pinned to ``version``."""
        return Dependency(
            self.group_id,
            self.artifact_id,
            version,
            self.classifier,
            self.type,
            self.exclusions,
        )

    def __str__(self) -> str:
        text = f"{self.group_id}:{self.artifact_id}"
        if self.version != VersionNumber.UNKNOWN:
            text += f":{self.version}"
        if self.classifier:
            text += f":{self.classifier}"
        if self.type != DEFAULT_ARTIFACT_TYPE:
            text += f"@{self.type}"
        return text


class DependencySet:
    """Insertion-ordered dependencies, one per coordinate, highest version wins.

    Membership (``in``) is by coordinate and ignores the version, which is
    what transitive resolution needs to avoid expanding an artifact twice.

    Example:
        >>> deps = DependencySet()
        >>> deps.add(Dependency("a", "b", "1.0"))
        True
        >>> deps.add(Dependency("a", "b", "2.0"))
        True
        >>> [str(d) for d in deps]
        ['a:b:2.0']
    """

    __slots__ = ("_entries",)

    def __init__(self, dependencies: Optional[Iterable[Dependency]] = None) -> None:
        self._entries: Dict[CoordinateKey, Dependency] = {}
        for dependency in dependencies or ():
            self.add(dependency)

    def add(self, dependency: Dependency) -> bool:
        """Add ``dependency`` unless a higher or equal version is present.

        Returns:
            True if the dependency was inserted or replaced an older one.
        """
        existing = self._entries.get(dependency.key)
        if existing is not None and dependency.version <= existing.version:
            return False

        self._entries[dependency.key] = dependency
        return True

    def __contains__(self, dependency: object) -> bool:
        if not isinstance(dependency, Dependency):
            return False
        return dependency.key in self._entries

    def __iter__(self) -> Iterator[Dependency]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DependencySet):
            return NotImplemented
        return list(self._entries.values()) == list(other._entries.values())

    def __str__(self) -> str:
        return "\n".join(str(dependency) for dependency in self)

    def __repr__(self) -> str:
        return f"DependencySet({[str(d) for d in self]!r})"
