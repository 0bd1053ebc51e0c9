"""
Dependency resolution against Maven2 repositories.

:class:`DependencyResolver` is the entry point of the engine. Given an
ordered list of repositories and a dependency it can:

- check that the dependency exists and list its versions
- resolve an unspecified version to the repository's ``latest``
- fetch and interpret the dependency's POM
- compute direct and transitive dependencies for a set of scopes
- download the artifact (and its transitive closure) into a directory

Documents are fetched from the repositories in order. A 404 moves on to
the next repository; any other failure raises
:class:`~jarkeeper.exceptions.ArtifactRetrievalError` right away without
consulting the remaining repositories.

Example:
    >>> with DependencyResolver(
    ...     [Repository.MAVEN_CENTRAL],
    ...     Dependency.parse("org.slf4j:slf4j-simple:2.0.5"),
    ... ) as resolver:
    ...     for dependency in resolver.get_all_dependencies(Scope.COMPILE):
    ...         print(dependency)
"""

from __future__ import annotations

import threading
from pathlib import Path
from collections import deque
from typing import Any, Callable, Deque, List, Optional, Sequence, Tuple, TypeVar, Union

from jarkeeper.utils.http import HTTPClient
from jarkeeper.utils.deadline import Deadline
from jarkeeper.utils.logger import get_logger
from jarkeeper.models.scope import ScopeLike
from jarkeeper.models.version import VersionNumber
from jarkeeper.models.repository import Repository
from jarkeeper.core.pom import MavenPom, PomDependency, parse_pom
from jarkeeper.core.metadata import MavenMetadata, parse_metadata
from jarkeeper.models.dependency import Dependency, DependencySet
from jarkeeper.utils.filesystem import PathLike, file_digest, validate_directory
from jarkeeper.constants import CHECKSUM_SIDECARS, MAVEN_METADATA_XML
from jarkeeper.exceptions import (
    ArtifactNotFoundError,
    ArtifactRetrievalError,
    DownloadError,
    FileOperationError,
    ManifestParsingError,
    NetworkError,
    ResourceNotFoundError,
)

logger = get_logger("resolver")

T = TypeVar("T")

RepositoryLike = Union[Repository, str]


class DependencyResolver:
    """Resolve one dependency against an ordered list of repositories.

    The metadata document, the snapshot metadata document and the POM are
    each fetched at most once per resolver and kept for its lifetime.
    Those caches are filled under a lock, but a resolver is still meant to
    be used from one thread at a time; build one per concurrent resolution.

    Args:
        repositories: Repositories to probe, in order. Plain URLs are
            accepted.
        dependency: The dependency to resolve.
        client: HTTP client to use. When omitted the resolver creates one
            and closes it in :meth:`close`.
        deadline: Bounds every network call made by this resolver and by
            the resolvers it creates for parents and transitive
            dependencies.
    """

    def __init__(
        self,
        repositories: Optional[Sequence[RepositoryLike]],
        dependency: Dependency,
        *,
        client: Optional[HTTPClient] = None,
        deadline: Optional[Deadline] = None,
    ) -> None:
        self.repositories: List[Repository] = [
            repo if isinstance(repo, Repository) else Repository(repo)
            for repo in repositories or ()
        ]
        self.dependency = dependency
        self.deadline = deadline

        self._owns_client = client is None
        self.client = client if client is not None else HTTPClient()

        # Reentrant: computing the POM resolves the version, which may
        # compute the metadata.
        self._lock = threading.RLock()
        self._metadata: Optional[MavenMetadata] = None
        self._snapshot_metadata: Optional[MavenMetadata] = None
        self._pom: Optional[MavenPom] = None

    def __enter__(self) -> "DependencyResolver":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client if this resolver created it."""
        if self._owns_client:
            self.client.close()

    def __repr__(self) -> str:
        return (
            f"DependencyResolver(dependency={str(self.dependency)!r}, "
            f"repositories={[repo.url for repo in self.repositories]!r})"
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _once(self, attr: str, compute: Callable[[], T]) -> T:
        value = getattr(self, attr)
        if value is None:
            with self._lock:
                value = getattr(self, attr)
                if value is None:
                    value = compute()
                    setattr(self, attr, value)
        return value

    def _nested(self, dependency: Dependency) -> "DependencyResolver":
        """Resolver for another dependency sharing this one's client and deadline."""
        return DependencyResolver(
            self.repositories,
            dependency,
            client=self.client,
            deadline=self.deadline,
        )

    def _fetch_first(self, urls: Sequence[str]) -> Tuple[str, bytes]:
        """Return ``(url, content)`` of the first URL that isn't a 404."""
        for url in urls:
            try:
                content = self.client.get_bytes(url, deadline=self.deadline)
            except ResourceNotFoundError:
                logger.debug("Not found: %s", url)
                continue
            except NetworkError as exc:
                raise ArtifactRetrievalError(self.dependency, url, exc) from exc
            return url, content

        raise ArtifactNotFoundError(self.dependency, ", ".join(urls))

    def _fetch_metadata(self, urls: Sequence[str]) -> MavenMetadata:
        url, content = self._fetch_first(urls)
        result = parse_metadata(content)
        if not result.ok:
            raise ManifestParsingError(self.dependency, url, result.errors)
        return result.document

    def _fetch_pom(self) -> MavenPom:
        url, content = self._fetch_first(self.pom_urls())
        logger.debug("Parsing POM %s", url)
        result = parse_pom(content, source=url, pom_loader=self._load_pom)
        if not result.ok:
            raise ManifestParsingError(self.dependency, url, result.errors)
        return result.document

    def _load_pom(self, dependency: Dependency) -> MavenPom:
        return self._nested(dependency).get_maven_pom()

    # ------------------------------------------------------------------
    # Repository locations
    # ------------------------------------------------------------------

    def artifact_urls(self) -> List[str]:
        return [repo.artifact_url(self.dependency) for repo in self.repositories]

    def metadata_urls(self) -> List[str]:
        return [url + MAVEN_METADATA_XML for url in self.artifact_urls()]

    def snapshot_metadata_urls(self) -> List[str]:
        version = self.resolve_version()
        return [f"{url}{version}/{MAVEN_METADATA_XML}" for url in self.artifact_urls()]

    def file_version(self) -> VersionNumber:
        """Version used in artifact file names.

        Equal to :meth:`resolve_version`, except for snapshots where it is
        the timestamped build named by the snapshot metadata.
        """
        version = self.resolve_version()
        if version.is_snapshot:
            return self.get_snapshot_metadata().snapshot_version(version)
        return version

    def pom_urls(self) -> List[str]:
        version = self.resolve_version()
        file_version = self.file_version()
        artifact_id = self.dependency.artifact_id
        return [
            f"{url}{version}/{artifact_id}-{file_version}.pom"
            for url in self.artifact_urls()
        ]

    def get_download_urls(self) -> List[str]:
        """Return the artifact's URL in every repository, in probe order."""
        version = self.resolve_version()
        file_name = f"{self.dependency.artifact_id}-{self.file_version()}"
        if self.dependency.classifier:
            file_name += f"-{self.dependency.classifier}"
        file_name += f".{self.dependency.type}"
        return [f"{url}{version}/{file_name}" for url in self.artifact_urls()]

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def get_metadata(self) -> MavenMetadata:
        """Return the artifact-level ``maven-metadata.xml``, fetched once."""
        return self._once("_metadata", lambda: self._fetch_metadata(self.metadata_urls()))

    def get_snapshot_metadata(self) -> MavenMetadata:
        """Return the per-version snapshot metadata, fetched once."""
        return self._once(
            "_snapshot_metadata",
            lambda: self._fetch_metadata(self.snapshot_metadata_urls()),
        )

    def get_maven_pom(self) -> MavenPom:
        """Return the dependency's POM with its parent merged, fetched once."""
        return self._once("_pom", self._fetch_pom)

    # ------------------------------------------------------------------
    # Versions
    # ------------------------------------------------------------------

    def exists(self) -> bool:
        """Return True if the dependency (and requested version) is published.

        Not-found and retrieval failures yield ``False``; a cancelled or
        expired deadline still raises.
        """
        try:
            metadata = self.get_metadata()
        except (ArtifactNotFoundError, ArtifactRetrievalError) as exc:
            logger.debug("%s doesn't exist: %s", self.dependency, exc)
            return False

        if self.dependency.version != VersionNumber.UNKNOWN:
            return self.dependency.version in metadata.versions
        return True

    def resolve_version(self) -> VersionNumber:
        """Return the requested version, or the latest one when none was given."""
        if self.dependency.version != VersionNumber.UNKNOWN:
            return self.dependency.version
        return self.latest_version()

    def list_versions(self) -> List[VersionNumber]:
        return list(self.get_metadata().versions)

    def latest_version(self) -> VersionNumber:
        return self.get_metadata().latest

    def release_version(self) -> VersionNumber:
        return self.get_metadata().release

    # ------------------------------------------------------------------
    # Dependencies
    # ------------------------------------------------------------------

    def get_direct_dependencies(self, *scopes: ScopeLike) -> DependencySet:
        """Return the dependencies the POM declares for ``scopes``."""
        return DependencySet(
            declared.to_dependency()
            for declared in self.get_maven_pom().get_dependencies(*scopes)
        )

    def _is_excluded(self, candidate: PomDependency, parent: PomDependency) -> bool:
        if self.dependency.excludes(candidate.group_id, candidate.artifact_id):
            return True
        return any(node.excludes(candidate) for node in parent.lineage())

    def get_all_dependencies(self, *scopes: ScopeLike) -> DependencySet:
        """Return the transitive closure of this dependency for ``scopes``.

        The result starts with the dependency itself. Candidates are
        expanded breadth-first, and the first version of a coordinate
        reached that way is kept: a later candidate with the same
        coordinate is skipped whatever its version. A candidate is
        dropped when the root dependency or any dependency on the path
        leading to it excludes it.
        """
        result = DependencySet([self.dependency])
        queue: Deque[PomDependency] = deque(
            candidate
            for candidate in self.get_maven_pom().get_dependencies(*scopes)
            if not self.dependency.excludes(candidate.group_id, candidate.artifact_id)
        )

        while True:
            current: Optional[PomDependency] = None
            while queue:
                candidate = queue.popleft()
                if candidate.to_dependency() not in result:
                    current = candidate
                    break
            if current is None:
                break

            dependency = current.to_dependency()
            result.add(dependency)
            logger.debug("Expanding %s", dependency)

            declared = self._nested(dependency).get_maven_pom().get_dependencies(*scopes)
            queued = set(queue)
            queue.extend(
                candidate.with_parent(current)
                for candidate in declared
                if candidate not in queued and not self._is_excluded(candidate, current)
            )

        logger.info("Resolved %d dependencies for %s", len(result), self.dependency)
        return result

    # ------------------------------------------------------------------
    # Downloads
    # ------------------------------------------------------------------

    def _checksum_matches(self, url: str, destination: Path) -> bool:
        """Return True if a sidecar digest at ``url`` matches ``destination``."""
        for suffix, algorithm in CHECKSUM_SIDECARS:
            try:
                text = self.client.get_text(url + suffix, deadline=self.deadline)
            except NetworkError as exc:
                logger.debug("No %s checksum for %s: %s", algorithm, url, exc)
                continue

            tokens = text.split()
            if tokens and tokens[0].lower() == file_digest(destination, algorithm):
                return True
        return False

    def download_into_directory(self, directory: PathLike) -> Path:
        """Download the artifact into ``directory``.

        A file that is already present is kept when its SHA-256 or MD5
        digest matches the repository's checksum sidecar.

        Returns:
            The path of the downloaded (or already present) artifact.

        Raises:
            ValueError: ``directory`` is missing, not writable, or not a
                directory. Checked before any network access.
            DownloadError: Streaming from a repository failed for a reason
                other than 404. Later repositories aren't tried.
            ArtifactNotFoundError: No repository has the artifact.
        """
        target_dir = validate_directory(directory)
        urls = self.get_download_urls()

        for url in urls:
            destination = target_dir / url.rsplit("/", 1)[-1]

            if destination.exists() and self._checksum_matches(url, destination):
                logger.info("%s is up to date", destination.name)
                return destination

            logger.info("Downloading %s", url)
            try:
                self.client.download(url, destination, deadline=self.deadline)
            except ResourceNotFoundError:
                logger.debug("Not found: %s", url)
                continue
            except (NetworkError, FileOperationError) as exc:
                raise DownloadError(self.dependency, url, str(destination), exc) from exc

            return destination

        raise ArtifactNotFoundError(self.dependency, ", ".join(urls))

    def download_transitively_into_directory(
        self, directory: PathLike, *scopes: ScopeLike
    ) -> List[Path]:
        """Download the artifact and its transitive dependencies for ``scopes``."""
        paths = [self.download_into_directory(directory)]
        for dependency in self.get_all_dependencies(*scopes):
            if dependency.key == self.dependency.key:
                continue
            paths.append(self._nested(dependency).download_into_directory(directory))
        return paths
