"""
Centralized constants for jarkeeper.

This module defines immutable configuration values used across jarkeeper,
including the Maven2 repository layout, well-known repositories, network
settings and logging formats. All values are intended to be treated as
read-only.
"""

from typing import Final, Sequence, Tuple

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "jarkeeper/{version}"

# ---------------------------------------------------------------------------
# Well-known repositories
# ---------------------------------------------------------------------------

#: Maven Central.
MAVEN_CENTRAL_URL: Final[str] = "https://repo1.maven.org/maven2/"

#: Sonatype OSSRH releases.
SONATYPE_RELEASES_URL: Final[str] = (
    "https://s01.oss.sonatype.org/content/repositories/releases/"
)

#: Sonatype OSSRH snapshots.
SONATYPE_SNAPSHOTS_URL: Final[str] = (
    "https://s01.oss.sonatype.org/content/repositories/snapshots/"
)

#: Repositories used when nothing is configured.
DEFAULT_REPOSITORIES: Final[Sequence[str]] = (MAVEN_CENTRAL_URL,)

# ---------------------------------------------------------------------------
# Maven2 repository layout
# ---------------------------------------------------------------------------

#: File name of the version-listing and snapshot metadata documents.
MAVEN_METADATA_XML: Final[str] = "maven-metadata.xml"

#: Qualifier marking a snapshot version.
SNAPSHOT_QUALIFIER: Final[str] = "SNAPSHOT"

#: Artifact type used when a dependency declares none.
DEFAULT_ARTIFACT_TYPE: Final[str] = "jar"

#: Scope assigned to POM dependencies that declare none.
DEFAULT_SCOPE: Final[str] = "compile"

#: Checksum sidecars probed before re-downloading, as (suffix, hashlib name).
CHECKSUM_SIDECARS: Final[Sequence[Tuple[str, str]]] = (
    (".sha256", "sha256"),
    (".md5", "md5"),
)

# ---------------------------------------------------------------------------
# HTTP configuration
# ---------------------------------------------------------------------------

#: Default per-request network timeout in seconds.
DEFAULT_TIMEOUT: Final[float] = 30.0

#: Maximum number of retries for failed HTTP requests.
DEFAULT_MAX_RETRIES: Final[int] = 3

#: Maximum number of 429 responses honored before giving up.
MAX_RATE_LIMIT_RETRIES: Final[int] = 5

#: Chunk size used when streaming artifacts to disk.
DOWNLOAD_CHUNK_SIZE: Final[int] = 64 * 1024

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
