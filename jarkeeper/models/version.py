"""
Maven version number model for jarkeeper.

Maven versions are not PEP 440 versions: they carry a free-form qualifier
(``-SNAPSHOT``, ``.Final``, ``-jre``, ``.v20230217``) whose ordering rules
are simpler than PEP 440's. :class:`VersionNumber` implements exactly the
precedence used for "latest version" and :class:`DependencySet` merges:

1. ``major``, ``minor`` and ``revision`` compare numerically (absent
   parts count as ``0``).
2. At equal numbers an empty qualifier wins, so ``1.0.0 > 1.0.0-SNAPSHOT``.
3. Otherwise qualifiers compare case-insensitively.

Parsing never raises; anything that doesn't fit the grammar becomes
:data:`VersionNumber.UNKNOWN`.
"""

from __future__ import annotations

import re
import functools
from typing import Any, ClassVar, Optional

from jarkeeper.constants import SNAPSHOT_QUALIFIER

# The numeric part is captured inside a lookahead so that it is matched
# atomically: "1.2a" must not fall back to major=1, qualifier="2a".
_VERSION_PATTERN = re.compile(
    r"^(?P<major>\d+)"
    r"(?=(?P<numbers>(?:\.\d+(?:\.\d+)?)?))(?P=numbers)"
    r"(?:(?P<separator>[.\-])(?P<qualifier>.*[^.\-]))?$"
)


@functools.total_ordering
class VersionNumber:
    """An immutable Maven version number.

    Args:
        major: Major version.
        minor: Minor version, or ``None`` when absent.
        revision: Revision, or ``None`` when absent.
        qualifier: Trailing qualifier text, without separator.
        separator: ``"-"`` or ``"."``; defaults to ``"-"``.

    Example:
        >>> VersionNumber.parse("1.2.3-SNAPSHOT")
        VersionNumber('1.2.3-SNAPSHOT')
        >>> VersionNumber.parse("1.0.0") > VersionNumber.parse("1.0.0-SNAPSHOT")
        True
    """

    __slots__ = ("_major", "_minor", "_revision", "_qualifier", "_separator")

    UNKNOWN: ClassVar["VersionNumber"]

    def __init__(
        self,
        major: int,
        minor: Optional[int] = None,
        revision: Optional[int] = None,
        qualifier: Optional[str] = None,
        separator: Optional[str] = None,
    ) -> None:
        self._major = major
        self._minor = minor
        self._revision = revision
        self._qualifier = qualifier or ""
        self._separator = separator or "-"

    @classmethod
    def parse(cls, version: Optional[str]) -> "VersionNumber":
        """Parse a version string.

        Args:
            version: Raw version text, e.g. ``"2.0.1.Final"``.

        Returns:
            The parsed version, or :data:`UNKNOWN` for ``None``, empty or
            malformed input.
        """
        if not version:
            return cls.UNKNOWN

        match = _VERSION_PATTERN.match(version)
        if not match:
            return cls.UNKNOWN

        numbers = [int(part) for part in match.group("numbers").split(".")[1:]]
        minor = numbers[0] if len(numbers) > 0 else None
        revision = numbers[1] if len(numbers) > 1 else None

        return cls(
            int(match.group("major")),
            minor,
            revision,
            match.group("qualifier"),
            match.group("separator"),
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def major(self) -> int:
        return self._major

    @property
    def minor(self) -> int:
        return self._minor or 0

    @property
    def revision(self) -> int:
        return self._revision or 0

    @property
    def qualifier(self) -> str:
        return self._qualifier

    @property
    def separator(self) -> str:
        return self._separator

    @property
    def base_version(self) -> "VersionNumber":
        """This version without its qualifier."""
        return VersionNumber(self._major, self._minor, self._revision)

    @property
    def is_snapshot(self) -> bool:
        return self._qualifier == SNAPSHOT_QUALIFIER

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def compare_to(self, other: "VersionNumber") -> int:
        """Return a negative, zero or positive number, like ``cmp``."""
        for mine, theirs in (
            (self.major, other.major),
            (self.minor, other.minor),
            (self.revision, other.revision),
        ):
            if mine != theirs:
                return mine - theirs

        if self._qualifier == other._qualifier:
            return 0
        if not self._qualifier:
            return 1
        if not other._qualifier:
            return -1

        mine_q = self._qualifier.lower()
        theirs_q = other._qualifier.lower()
        return (mine_q > theirs_q) - (mine_q < theirs_q)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, VersionNumber):
            return NotImplemented
        return self.compare_to(other) == 0

    def __lt__(self, other: "VersionNumber") -> bool:
        if not isinstance(other, VersionNumber):
            return NotImplemented
        return self.compare_to(other) < 0

    def __hash__(self) -> int:
        return hash((self.major, self.minor, self.revision, self._qualifier.lower()))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        text = str(self._major)
        if self._minor is not None or self._revision is not None:
            text += f".{self.minor}"
        if self._revision is not None:
            text += f".{self.revision}"
        if self._qualifier:
            text += f"{self._separator}{self._qualifier}"
        return text

    def __repr__(self) -> str:
        return f"VersionNumber({str(self)!r})"


VersionNumber.UNKNOWN = VersionNumber(0, 0, 0)
