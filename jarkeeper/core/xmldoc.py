"""
XML document helpers shared by the metadata and POM parsers.

Repository documents are parsed into an ElementTree first and then
walked explicitly. POMs usually declare the ``http://maven.apache.org/POM/4.0.0``
namespace while metadata documents usually don't, so elements are always
compared by their local name.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Generic, Iterator, List, Optional, TypeVar, Union

T = TypeVar("T")

XmlSource = Union[str, bytes]


@dataclass
class ParseResult(Generic[T]):
    """Outcome of parsing a repository document.

    Parsers report malformed input through ``errors`` instead of raising,
    so the caller can attach the document's URL to the failure.

    Attributes:
        document: The parsed document, or ``None`` on failure.
        errors: Parser-reported error messages.
    """

    document: Optional[T] = None
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.document is not None and not self.errors

    @classmethod
    def failure(cls, *errors: str) -> "ParseResult[T]":
        return cls(document=None, errors=list(errors))


def local_name(tag: object) -> str:
    """Return an element tag without its ``{namespace}`` prefix."""
    if not isinstance(tag, str):
        # comments and processing instructions
        return ""
    return tag.rsplit("}", 1)[-1]


def parse_root(content: XmlSource, expected: str) -> "ParseResult[ET.Element]":
    """Parse ``content`` and check that its root element is ``expected``."""
    try:
        root = ET.fromstring(content)
    except ET.ParseError as exc:
        return ParseResult.failure(f"Malformed XML: {exc}")

    if local_name(root.tag) != expected:
        return ParseResult.failure(
            f"Unexpected root element <{local_name(root.tag)}>, expected <{expected}>"
        )

    return ParseResult(document=root)


def children(element: Optional[ET.Element], name: str) -> Iterator[ET.Element]:
    """Yield the direct children of ``element`` called ``name``."""
    if element is None:
        return
    for child in element:
        if local_name(child.tag) == name:
            yield child


def child(element: Optional[ET.Element], name: str) -> Optional[ET.Element]:
    """Return the first direct child of ``element`` called ``name``."""
    return next(children(element, name), None)


def child_text(element: Optional[ET.Element], name: str) -> str:
    """Return the stripped text of a direct child, or ``""``."""
    found = child(element, name)
    if found is None or found.text is None:
        return ""
    return found.text.strip()


def path(element: Optional[ET.Element], *names: str) -> Optional[ET.Element]:
    """Follow a chain of direct children, e.g. ``path(root, "versioning", "versions")``."""
    current = element
    for name in names:
        current = child(current, name)
        if current is None:
            return None
    return current
