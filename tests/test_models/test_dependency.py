from __future__ import annotations

import pytest

from jarkeeper.models import Dependency, DependencySet, Exclusion, VersionNumber


@pytest.mark.unit
class TestExclusion:
    """Tests for Exclusion matching."""

    def test_matches_exact_coordinate(self) -> None:
        """Test both fields must match."""
        exclusion = Exclusion("org.slf4j", "slf4j-api")

        assert exclusion.matches("org.slf4j", "slf4j-api")
        assert not exclusion.matches("org.slf4j", "slf4j-simple")
        assert not exclusion.matches("ch.qos", "slf4j-api")

    @pytest.mark.parametrize(
        "group,artifact,expected",
        [
            ("org.slf4j", "anything", True),
            ("other", "anything", False),
        ],
    )
    def test_wildcard_artifact(self, group: str, artifact: str, expected: bool) -> None:
        """Test '*' as artifactId matches the whole group."""
        assert Exclusion("org.slf4j", "*").matches(group, artifact) is expected

    def test_wildcard_both(self) -> None:
        """Test '*:*' matches everything."""
        assert Exclusion("*", "*").matches("any", "thing")

    def test_str(self) -> None:
        assert str(Exclusion("g", "a")) == "g:a"


@pytest.mark.unit
class TestDependency:
    """Tests for the Dependency value type."""

    def test_defaults(self) -> None:
        """Test a bare coordinate has no version, classifier or exclusions."""
        dependency = Dependency("g", "a")

        assert dependency.version == VersionNumber.UNKNOWN
        assert dependency.classifier == ""
        assert dependency.type == "jar"
        assert dependency.exclusions == frozenset()

    def test_normalizes_inputs(self) -> None:
        """Test string versions and exclusion tuples are converted."""
        dependency = Dependency("g", "a", "1.0", None, None, [("x", "y")])  # type: ignore[arg-type]

        assert dependency.version == VersionNumber.parse("1.0")
        assert dependency.classifier == ""
        assert dependency.type == "jar"
        assert dependency.exclusions == frozenset({Exclusion("x", "y")})

    def test_is_hashable_and_equal_by_value(self) -> None:
        """Test equality covers all fields."""
        assert Dependency("g", "a", "1.0") == Dependency("g", "a", "1.0")
        assert Dependency("g", "a", "1.0") != Dependency("g", "a", "2.0")
        assert len({Dependency("g", "a", "1.0"), Dependency("g", "a", "1.0")}) == 1

    def test_key_ignores_version(self) -> None:
        """Test key is the version-independent coordinate."""
        assert Dependency("g", "a", "1.0").key == Dependency("g", "a", "2.0").key
        assert Dependency("g", "a", "1.0", "sources").key == ("g", "a", "sources", "jar")

    def test_excludes(self) -> None:
        """Test excludes() consults every exclusion."""
        dependency = Dependency("g", "a", exclusions=[("x", "y"), ("z", "*")])

        assert dependency.excludes("x", "y")
        assert dependency.excludes("z", "anything")
        assert not dependency.excludes("x", "other")

    def test_with_version(self) -> None:
        """Test with_version keeps everything but the version."""
        original = Dependency("g", "a", "1.0", "tests", "test-jar", [("x", "y")])
        pinned = original.with_version("2.0")

        assert pinned.version == VersionNumber.parse("2.0")
        assert pinned.key == original.key
        assert pinned.exclusions == original.exclusions


@pytest.mark.unit
class TestDependencyParse:
    """Tests for coordinate string parsing and rendering."""

    @pytest.mark.parametrize(
        "text",
        [
            "org.slf4j:slf4j-api",
            "org.slf4j:slf4j-api:2.0.5",
            "org.slf4j:slf4j-api:2.0.5:sources",
            "org.slf4j:slf4j-api:2.0.5@pom",
            "com.example:app:1.0-SNAPSHOT:tests@test-jar",
        ],
    )
    def test_render_matches_input(self, text: str) -> None:
        """Test str() gives back the coordinate that was parsed."""
        assert str(Dependency.parse(text)) == text

    def test_fields(self) -> None:
        """Test every coordinate part is extracted."""
        dependency = Dependency.parse("g.h:a:1.2:cls@zip")

        assert dependency.group_id == "g.h"
        assert dependency.artifact_id == "a"
        assert str(dependency.version) == "1.2"
        assert dependency.classifier == "cls"
        assert dependency.type == "zip"

    @pytest.mark.parametrize("text", ["", "just-a-name", "g:a:1:c:extra", "g a:b"])
    def test_invalid_coordinate_raises(self, text: str) -> None:
        """Test malformed coordinates raise ValueError."""
        with pytest.raises(ValueError, match="Invalid dependency coordinate"):
            Dependency.parse(text)


@pytest.mark.unit
class TestDependencySet:
    """Tests for DependencySet merge semantics."""

    def test_higher_version_replaces(self) -> None:
        """Test adding 1.0 then 2.0 keeps 2.0."""
        deps = DependencySet()

        assert deps.add(Dependency.parse("a:b:1.0")) is True
        assert deps.add(Dependency.parse("a:b:2.0")) is True

        assert len(deps) == 1
        assert [str(d) for d in deps] == ["a:b:2.0"]

    def test_lower_version_is_discarded(self) -> None:
        """Test adding 2.0 then 1.0 keeps 2.0."""
        deps = DependencySet()

        deps.add(Dependency.parse("a:b:2.0"))
        assert deps.add(Dependency.parse("a:b:1.0")) is False

        assert len(deps) == 1
        assert [str(d) for d in deps] == ["a:b:2.0"]

    def test_equal_version_is_discarded(self) -> None:
        """Test only strictly greater versions replace."""
        deps = DependencySet([Dependency.parse("a:b:1.0")])

        assert deps.add(Dependency.parse("a:b:1.0.0")) is False
        assert str(next(iter(deps)).version) == "1.0"

    def test_membership_ignores_version(self) -> None:
        """Test 'in' checks the coordinate only."""
        deps = DependencySet([Dependency.parse("a:b:1.0")])

        assert Dependency.parse("a:b:9.9") in deps
        assert Dependency.parse("a:c:1.0") not in deps
        assert "a:b:1.0" not in deps

    def test_classifier_is_a_separate_coordinate(self) -> None:
        """Test classified artifacts don't collide with the main one."""
        deps = DependencySet([Dependency.parse("a:b:1.0"), Dependency.parse("a:b:1.0:sources")])

        assert len(deps) == 2

    def test_keeps_insertion_order(self) -> None:
        """Test iteration follows first insertion."""
        deps = DependencySet(Dependency.parse(c) for c in ("x:y:1", "a:b:1", "m:n:1"))

        assert [d.artifact_id for d in deps] == ["y", "b", "n"]

    def test_equality_and_str(self) -> None:
        """Test sets with the same entries are equal and render one per line."""
        first = DependencySet([Dependency.parse("a:b:1.0"), Dependency.parse("c:d:2.0")])
        second = DependencySet([Dependency.parse("a:b:1.0"), Dependency.parse("c:d:2.0")])

        assert first == second
        assert str(first) == "a:b:1.0\nc:d:2.0"
