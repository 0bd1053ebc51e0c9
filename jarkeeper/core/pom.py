"""POM (project object model) parsing for jarkeeper.

A POM is parsed in two stages:

1. :func:`parse_pom` turns the XML into a :class:`MavenPom` holding the
   *raw* declarations (``${...}`` placeholders intact), after merging in
   the parent POM's properties, dependency management and dependencies.
2. :meth:`MavenPom.get_dependencies` resolves placeholders against the
   merged property table, applies dependency management and optional
   filtering, and buckets the result by scope. This happens once per
   instance; every scope is computed in the same pass.

Parent and ``import``-scoped BOM POMs are loaded through a ``pom_loader``
callback supplied by the resolver, which fetches them from the same
repositories.

Typical usage::

    result = parse_pom(xml, source=url, pom_loader=load_pom)
    if result.ok:
        compile_deps = result.document.get_dependencies(Scope.COMPILE)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, FrozenSet, Iterable, Iterator, List, Optional

import xml.etree.ElementTree as ET

from jarkeeper.utils.logger import get_logger
from jarkeeper.models.version import VersionNumber
from jarkeeper.models.scope import Scope, ScopeLike, scope_names
from jarkeeper.constants import DEFAULT_ARTIFACT_TYPE, DEFAULT_SCOPE
from jarkeeper.models.dependency import CoordinateKey, Dependency, Exclusion
from jarkeeper.core.xmldoc import (
    ParseResult,
    XmlSource,
    child,
    child_text,
    children,
    local_name,
    parse_root,
    path,
)

logger = get_logger("pom")

__all__ = ["MavenPom", "PomDependency", "PomLoader", "parse_pom"]

_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")

# Top-level <project> fields mirrored as ``project.*`` properties.
_PROJECT_FIELDS = (
    "groupId",
    "artifactId",
    "version",
    "packaging",
    "name",
    "description",
    "url",
    "inceptionYear",
)


# ---------------------------------------------------------------------------
# Declared dependencies
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class PomDependency:
    """A dependency as declared in a POM.

    Identity is the coordinate ``(groupId, artifactId, classifier, type)``
    only, so dependency management and de-duplication work regardless of
    version or scope.

    ``parent`` points at the dependency whose POM declared this one. It is
    set during transitive resolution to look up inherited exclusions and
    lives no longer than that resolution.
    """

    group_id: str
    artifact_id: str
    version: str = ""
    classifier: str = ""
    type: str = ""
    scope: str = ""
    optional: str = ""
    exclusions: FrozenSet[Exclusion] = frozenset()
    parent: Optional["PomDependency"] = field(default=None, repr=False)

    @property
    def key(self) -> CoordinateKey:
        return (
            self.group_id,
            self.artifact_id,
            self.classifier,
            self.type or DEFAULT_ARTIFACT_TYPE,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PomDependency):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def excludes(self, candidate: "PomDependency") -> bool:
        """Return True if one of this dependency's exclusions matches ``candidate``."""
        return any(
            ex.matches(candidate.group_id, candidate.artifact_id)
            for ex in self.exclusions
        )

    def lineage(self) -> Iterator["PomDependency"]:
        """Yield this dependency and then each ancestor that led to it."""
        node: Optional[PomDependency] = self
        while node is not None:
            yield node
            node = node.parent

    def with_parent(self, parent: Optional["PomDependency"]) -> "PomDependency":
        return replace(self, parent=parent)

    def to_dependency(self) -> Dependency:
        """Convert to a resolvable :class:`Dependency`."""
        return Dependency(
            self.group_id,
            self.artifact_id,
            VersionNumber.parse(self.version),
            self.classifier,
            self.type or DEFAULT_ARTIFACT_TYPE,
            self.exclusions,
        )

    def __str__(self) -> str:
        text = f"{self.group_id}:{self.artifact_id}"
        if self.version:
            text += f":{self.version}"
        if self.classifier:
            text += f":{self.classifier}"
        return text


PomLoader = Callable[[Dependency], "MavenPom"]


# ---------------------------------------------------------------------------
# Parsed POM
# ---------------------------------------------------------------------------


class MavenPom:
    """A parsed POM with its parent already merged in.

    Not meant to be built directly; use :func:`parse_pom`.
    """

    def __init__(
        self,
        *,
        source: str,
        parent: Optional[Dependency],
        properties: Dict[str, str],
        managed: List[PomDependency],
        dependencies: List[PomDependency],
        pom_loader: Optional[PomLoader] = None,
    ) -> None:
        self.source = source
        self.parent = parent
        self._properties = properties
        self._managed = managed
        self._dependencies = dependencies
        self._pom_loader = pom_loader

        self._management: Optional[Dict[CoordinateKey, PomDependency]] = None
        self._scoped: Optional[Dict[str, Dict[CoordinateKey, PomDependency]]] = None

    # ------------------------------------------------------------------
    # Project fields
    # ------------------------------------------------------------------

    @property
    def properties(self) -> Dict[str, str]:
        """The merged property table, placeholders unexpanded."""
        return dict(self._properties)

    @property
    def group_id(self) -> str:
        return self.resolve(self._properties.get("project.groupId", ""))

    @property
    def artifact_id(self) -> str:
        return self.resolve(self._properties.get("project.artifactId", ""))

    @property
    def version(self) -> str:
        return self.resolve(self._properties.get("project.version", ""))

    @property
    def packaging(self) -> str:
        return self.resolve(self._properties.get("project.packaging", DEFAULT_ARTIFACT_TYPE))

    # ------------------------------------------------------------------
    # Placeholder substitution
    # ------------------------------------------------------------------

    def resolve(self, text: str) -> str:
        """Replace ``${name}`` placeholders in a single left-to-right pass.

        Unknown placeholders are left verbatim. A property whose value
        refers to other properties is expanded as well, guarding against
        cycles.
        """
        return self._expand(text, frozenset())

    def _expand(self, text: str, seen: FrozenSet[str]) -> str:
        if not text or "${" not in text:
            return text

        def substitute(match: "re.Match[str]") -> str:
            name = match.group(1)
            if name in seen or name not in self._properties:
                return match.group(0)
            return self._expand(self._properties[name], seen | {name})

        return _PLACEHOLDER.sub(substitute, text)

    def _resolve_dependency(self, raw: PomDependency) -> PomDependency:
        return replace(
            raw,
            group_id=self.resolve(raw.group_id),
            artifact_id=self.resolve(raw.artifact_id),
            version=self.resolve(raw.version),
            classifier=self.resolve(raw.classifier),
            type=self.resolve(raw.type) or DEFAULT_ARTIFACT_TYPE,
            scope=self.resolve(raw.scope),
            optional=self.resolve(raw.optional),
            exclusions=frozenset(
                Exclusion(self.resolve(ex.group_id), self.resolve(ex.artifact_id))
                for ex in raw.exclusions
            ),
        )

    # ------------------------------------------------------------------
    # Dependency management
    # ------------------------------------------------------------------

    def dependency_management(self) -> Dict[CoordinateKey, PomDependency]:
        """Return resolved ``dependencyManagement`` entries keyed by coordinate.

        ``import``-scoped ``pom`` entries are replaced by the management
        entries of the BOM they name; locally declared entries win.
        """
        if self._management is not None:
            return self._management

        management: Dict[CoordinateKey, PomDependency] = {}
        boms: List[PomDependency] = []

        for raw in self._managed:
            entry = self._resolve_dependency(raw)
            if entry.scope == Scope.IMPORT and entry.type == "pom":
                boms.append(entry)
                continue
            management.setdefault(entry.key, entry)

        for bom in boms:
            if self._pom_loader is None:
                logger.debug("No loader for imported BOM %s in %s", bom, self.source)
                continue
            logger.debug("Importing dependency management from %s", bom)
            imported = self._pom_loader(bom.to_dependency())
            for key, entry in imported.dependency_management().items():
                management.setdefault(key, entry)

        self._management = management
        return management

    # ------------------------------------------------------------------
    # Scoped dependencies
    # ------------------------------------------------------------------

    def _resolve_scopes(self) -> Dict[str, Dict[CoordinateKey, PomDependency]]:
        management = self.dependency_management()
        scoped: Dict[str, Dict[CoordinateKey, PomDependency]] = {}

        for raw in self._dependencies:
            dependency = self._resolve_dependency(raw)

            managed = management.get(dependency.key)
            if managed is not None:
                dependency = replace(
                    dependency,
                    version=dependency.version or managed.version,
                    optional=dependency.optional or managed.optional,
                    exclusions=dependency.exclusions or managed.exclusions,
                )

            if dependency.optional == "true":
                continue

            bucket = scoped.setdefault(dependency.scope or DEFAULT_SCOPE, {})
            bucket.setdefault(dependency.key, dependency)

        return scoped

    def get_dependencies(self, *scopes: ScopeLike) -> List[PomDependency]:
        """Return the resolved dependencies declared for ``scopes``.

        Scopes are concatenated in the order given; a coordinate listed
        under several requested scopes appears once.
        """
        if self._scoped is None:
            self._scoped = self._resolve_scopes()

        result: List[PomDependency] = []
        seen = set()
        for name in scope_names(scopes):
            for key, dependency in self._scoped.get(name, {}).items():
                if key not in seen:
                    seen.add(key)
                    result.append(dependency)
        return result

    def __repr__(self) -> str:
        return f"MavenPom(source={self.source!r})"


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _read_dependency(element: ET.Element) -> PomDependency:
    exclusions = frozenset(
        Exclusion(child_text(ex, "groupId"), child_text(ex, "artifactId"))
        for ex in children(child(element, "exclusions"), "exclusion")
    )
    return PomDependency(
        group_id=child_text(element, "groupId"),
        artifact_id=child_text(element, "artifactId"),
        version=child_text(element, "version"),
        classifier=child_text(element, "classifier"),
        type=child_text(element, "type"),
        scope=child_text(element, "scope"),
        optional=child_text(element, "optional"),
        exclusions=exclusions,
    )


def _read_dependencies(block: Optional[ET.Element]) -> List[PomDependency]:
    return [_read_dependency(element) for element in children(block, "dependency")]


def _union(local: List[PomDependency], inherited: Iterable[PomDependency]) -> List[PomDependency]:
    """Local entries first; inherited entries only for new coordinates."""
    merged = list(local)
    keys = {dependency.key for dependency in local}
    for dependency in inherited:
        if dependency.key not in keys:
            keys.add(dependency.key)
            merged.append(dependency)
    return merged


def parse_pom(
    content: XmlSource,
    *,
    source: str = "",
    pom_loader: Optional[PomLoader] = None,
) -> ParseResult[MavenPom]:
    """Parse a POM document and merge in its parent.

    Only ``project/dependencies`` feeds the scope buckets and only
    ``project/dependencyManagement/dependencies`` feeds management;
    dependencies nested in profiles or plugins are ignored.

    Args:
        content: The POM XML.
        source: Identifier of the document, usually its URL.
        pom_loader: Loads parent and imported BOM POMs. Without it the
            parent reference is recorded but not merged.

    Returns:
        A :class:`ParseResult` whose ``errors`` describe malformed input.

    Raises:
        DependencyError: Propagated from ``pom_loader`` when the parent
            POM can't be retrieved.
    """
    parsed = parse_root(content, "project")
    if not parsed.ok:
        return ParseResult.failure(*parsed.errors)

    root = parsed.document

    parent_ref: Optional[Dependency] = None
    parent_element = child(root, "parent")
    parent_fields = {
        name: child_text(parent_element, name)
        for name in ("groupId", "artifactId", "version")
    }
    if parent_fields["groupId"] and parent_fields["artifactId"]:
        parent_ref = Dependency(
            parent_fields["groupId"],
            parent_fields["artifactId"],
            VersionNumber.parse(parent_fields["version"]),
            type="pom",
        )

    properties: Dict[str, str] = {}
    properties_element = child(root, "properties")
    if properties_element is not None:
        for element in properties_element:
            name = local_name(element.tag)
            if name:
                properties[name] = (element.text or "").strip()

    project = {name: child_text(root, name) for name in _PROJECT_FIELDS}
    project["groupId"] = project["groupId"] or parent_fields["groupId"]
    project["version"] = project["version"] or parent_fields["version"]
    project["packaging"] = project["packaging"] or DEFAULT_ARTIFACT_TYPE
    for name, value in project.items():
        if value:
            properties[f"project.{name}"] = value
    for name, value in parent_fields.items():
        if value:
            properties[f"project.parent.{name}"] = value

    managed = _read_dependencies(path(root, "dependencyManagement", "dependencies"))
    dependencies = _read_dependencies(child(root, "dependencies"))

    if parent_ref is not None and pom_loader is not None:
        logger.debug("Merging parent %s into %s", parent_ref, source)
        parent = pom_loader(parent_ref)
        for name, value in parent.properties.items():
            properties.setdefault(name, value)
        managed = _union(managed, parent._managed)
        dependencies = _union(dependencies, parent._dependencies)

    return ParseResult(
        document=MavenPom(
            source=source,
            parent=parent_ref,
            properties=properties,
            managed=managed,
            dependencies=dependencies,
            pom_loader=pom_loader,
        )
    )
