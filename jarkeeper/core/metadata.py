"""Parser for ``maven-metadata.xml`` documents.

Two flavors of the same document are handled:

- the artifact-level listing (``{artifact}/maven-metadata.xml``) with
  ``latest``, ``release`` and the ``versions`` list
- the per-version snapshot document (``{artifact}/{version}/maven-metadata.xml``)
  whose ``snapshot`` block names the timestamped build to download
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from jarkeeper.models.version import VersionNumber
from jarkeeper.core.xmldoc import (
    ParseResult,
    XmlSource,
    child_text,
    children,
    parse_root,
    path,
)

__all__ = ["MavenMetadata", "parse_metadata"]


@dataclass
class MavenMetadata:
    """Parsed repository metadata.

    Attributes:
        group_id: Declared groupId, if any.
        artifact_id: Declared artifactId, if any.
        version: Top-level version (set on snapshot documents).
        latest: Latest deployed version.
        release: Latest release version.
        versions: All listed versions, in document order.
        last_updated: Raw ``lastUpdated`` stamp.
        snapshot_timestamp: Timestamp of the latest snapshot build.
        snapshot_build_number: Build number of the latest snapshot build.
        local_copy: True for snapshots installed locally without a timestamp.
    """

    group_id: str = ""
    artifact_id: str = ""
    version: VersionNumber = VersionNumber.UNKNOWN
    latest: VersionNumber = VersionNumber.UNKNOWN
    release: VersionNumber = VersionNumber.UNKNOWN
    versions: List[VersionNumber] = field(default_factory=list)
    last_updated: str = ""
    snapshot_timestamp: str = ""
    snapshot_build_number: str = ""
    local_copy: bool = False

    def snapshot_version(self, requested: VersionNumber) -> VersionNumber:
        """Return the version used in a snapshot's artifact file names.

        ``1.0-SNAPSHOT`` with timestamp ``20230310.123456`` and build
        ``3`` becomes ``1.0-20230310.123456-3``. Without a snapshot block
        the requested version is used verbatim.
        """
        if self.local_copy or not self.snapshot_timestamp or not self.snapshot_build_number:
            return requested

        # Rendered through str() so absent minor and revision parts stay absent
        return VersionNumber.parse(
            f"{requested.base_version}-{self.snapshot_timestamp}-{self.snapshot_build_number}"
        )


def parse_metadata(content: XmlSource) -> ParseResult[MavenMetadata]:
    """Parse a ``maven-metadata.xml`` document.

    Values that don't parse as versions never abort the document: they
    become :data:`VersionNumber.UNKNOWN` for ``latest``/``release`` and are
    skipped in the versions list.

    Returns:
        A :class:`ParseResult`; ``errors`` is set when the document isn't
        well-formed XML or isn't a ``<metadata>`` document.
    """
    parsed = parse_root(content, "metadata")
    if not parsed.ok:
        return ParseResult.failure(*parsed.errors)

    root = parsed.document
    versioning = path(root, "versioning")

    versions: List[VersionNumber] = []
    for element in children(path(versioning, "versions"), "version"):
        version = VersionNumber.parse((element.text or "").strip())
        if version != VersionNumber.UNKNOWN:
            versions.append(version)

    latest = VersionNumber.parse(child_text(versioning, "latest"))
    if latest == VersionNumber.UNKNOWN and versions:
        latest = max(versions)

    snapshot = path(versioning, "snapshot")

    metadata = MavenMetadata(
        group_id=child_text(root, "groupId"),
        artifact_id=child_text(root, "artifactId"),
        version=VersionNumber.parse(child_text(root, "version")),
        latest=latest,
        release=VersionNumber.parse(child_text(versioning, "release")),
        versions=versions,
        last_updated=child_text(versioning, "lastUpdated"),
        snapshot_timestamp=child_text(snapshot, "timestamp"),
        snapshot_build_number=child_text(snapshot, "buildNumber"),
        local_copy=child_text(snapshot, "localCopy").lower() == "true",
    )

    return ParseResult(document=metadata)
