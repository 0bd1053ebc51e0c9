"""
Repository model for jarkeeper.

A repository is nothing more than a base URL laid out in the Maven2
format; every document location is derived from it without any I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Iterable, List

from jarkeeper.constants import (
    MAVEN_CENTRAL_URL,
    SONATYPE_RELEASES_URL,
    SONATYPE_SNAPSHOTS_URL,
)
from jarkeeper.models.dependency import Dependency


@dataclass(frozen=True)
class Repository:
    """A Maven2-compatible repository.

    Attributes:
        url: Base URL; a trailing ``/`` is added when missing.

    Example:
        >>> Repository("https://repo/").artifact_url(Dependency("g.h", "a"))
        'https://repo/g/h/a/'
    """

    url: str

    MAVEN_CENTRAL: ClassVar["Repository"]
    SONATYPE_RELEASES: ClassVar["Repository"]
    SONATYPE_SNAPSHOTS: ClassVar["Repository"]

    def __post_init__(self) -> None:
        if not self.url.endswith("/"):
            object.__setattr__(self, "url", self.url + "/")

    def artifact_url(self, dependency: Dependency) -> str:
        """Return the base URL of ``dependency``'s artifact family."""
        group_path = dependency.group_id.replace(".", "/")
        return f"{self.url}{group_path}/{dependency.artifact_id}/"

    def __str__(self) -> str:
        return self.url


Repository.MAVEN_CENTRAL = Repository(MAVEN_CENTRAL_URL)
Repository.SONATYPE_RELEASES = Repository(SONATYPE_RELEASES_URL)
Repository.SONATYPE_SNAPSHOTS = Repository(SONATYPE_SNAPSHOTS_URL)


def repositories_from_urls(urls: Iterable[str]) -> List[Repository]:
    """Build repositories from URLs, preserving their probe order."""
    return [Repository(url) for url in urls]
