from __future__ import annotations

import pytest

from conftest import metadata_xml, snapshot_metadata_xml
from jarkeeper.core.metadata import parse_metadata
from jarkeeper.models import VersionNumber


@pytest.mark.unit
class TestParseMetadata:
    """Tests for the artifact-level maven-metadata.xml parser."""

    def test_parses_versions_latest_and_release(self) -> None:
        """Test the versioning block is read in document order."""
        result = parse_metadata(
            metadata_xml(
                ["1.0", "1.1", "2.0-SNAPSHOT"],
                latest="2.0-SNAPSHOT",
                release="1.1",
                group_id="g",
                artifact_id="a",
            )
        )

        assert result.ok
        metadata = result.document
        assert [str(v) for v in metadata.versions] == ["1.0", "1.1", "2.0-SNAPSHOT"]
        assert str(metadata.latest) == "2.0-SNAPSHOT"
        assert str(metadata.release) == "1.1"
        assert metadata.group_id == "g"
        assert metadata.artifact_id == "a"
        assert metadata.last_updated == "20230310123456"

    def test_unparsable_versions_are_skipped(self) -> None:
        """Test bad entries don't abort the document."""
        result = parse_metadata(metadata_xml(["1.0", "garbage", "2.0"], latest="2.0"))

        assert [str(v) for v in result.document.versions] == ["1.0", "2.0"]

    def test_bad_latest_degrades_to_highest_listed(self) -> None:
        """Test a missing or bad latest falls back to the highest version."""
        result = parse_metadata(metadata_xml(["1.0", "3.0", "2.0"], latest="oops"))

        assert str(result.document.latest) == "3.0"

    def test_missing_release_is_unknown(self) -> None:
        """Test release degrades to UNKNOWN."""
        result = parse_metadata(metadata_xml(["1.0"]))

        assert result.document.release == VersionNumber.UNKNOWN

    def test_empty_versioning(self) -> None:
        """Test a document without versioning parses to empty values."""
        result = parse_metadata("<metadata/>")

        assert result.ok
        assert result.document.versions == []
        assert result.document.latest == VersionNumber.UNKNOWN

    def test_namespaced_document(self) -> None:
        """Test metadata declaring a namespace is still understood."""
        xml = (
            '<metadata xmlns="http://maven.apache.org/METADATA/1.1.0">'
            "<versioning><latest>1.0</latest><versions><version>1.0</version>"
            "</versions></versioning></metadata>"
        )

        assert [str(v) for v in parse_metadata(xml).document.versions] == ["1.0"]

    @pytest.mark.parametrize(
        "content,message",
        [
            ("<metadata><versioning>", "Malformed XML"),
            ("<project/>", "Unexpected root element"),
        ],
    )
    def test_failure_is_reported_not_raised(self, content: str, message: str) -> None:
        """Test malformed input produces a failed ParseResult."""
        result = parse_metadata(content)

        assert not result.ok
        assert result.document is None
        assert message in result.errors[0]


@pytest.mark.unit
class TestSnapshotVersion:
    """Tests for MavenMetadata.snapshot_version."""

    @pytest.mark.parametrize(
        "requested,expected",
        [
            ("1.0-SNAPSHOT", "1.0-20230310.123456-3"),
            ("1-SNAPSHOT", "1-20230310.123456-3"),
            ("2.4.1-SNAPSHOT", "2.4.1-20230310.123456-3"),
        ],
    )
    def test_timestamped_version(self, requested: str, expected: str) -> None:
        """Test the snapshot block replaces the qualifier and keeps the published spelling."""
        metadata = parse_metadata(
            snapshot_metadata_xml(requested, "20230310.123456", "3")
        ).document

        resolved = metadata.snapshot_version(VersionNumber.parse(requested))

        assert str(resolved) == expected
        assert resolved.base_version == VersionNumber.parse(requested).base_version

    def test_without_snapshot_block_returns_requested(self) -> None:
        """Test locally deployed snapshots keep their version."""
        metadata = parse_metadata("<metadata><versioning/></metadata>").document
        requested = VersionNumber.parse("1.0-SNAPSHOT")

        assert metadata.snapshot_version(requested) is requested

    def test_local_copy_returns_requested(self) -> None:
        """Test localCopy=true disables timestamp substitution."""
        metadata = parse_metadata(
            "<metadata><versioning><snapshot><timestamp>1</timestamp>"
            "<buildNumber>1</buildNumber><localCopy>true</localCopy>"
            "</snapshot></versioning></metadata>"
        ).document

        assert str(metadata.snapshot_version(VersionNumber.parse("2.1-SNAPSHOT"))) == "2.1-SNAPSHOT"
