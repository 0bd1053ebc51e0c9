"""
Shared building blocks for jarkeeper CLI commands.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import click

from jarkeeper.models import Dependency, Scope

#: Choices accepted by ``--scope``.
SCOPE_CHOICES = [scope.value for scope in Scope]

#: Choices accepted by ``--format``.
FORMAT_CHOICES = ["table", "simple", "json"]


def parse_coordinate(
    ctx: click.Context, param: Optional[click.Parameter], value: str
) -> Dependency:
    """Click callback turning ``group:artifact[:version[:classifier]][@type]`` into a Dependency."""
    try:
        return Dependency.parse(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), ctx=ctx, param=param) from exc


def dependency_record(dependency: Dependency) -> Dict[str, Any]:
    """Serialize a dependency for JSON output."""
    return {
        "group_id": dependency.group_id,
        "artifact_id": dependency.artifact_id,
        "version": str(dependency.version),
        "classifier": dependency.classifier,
        "type": dependency.type,
    }


def dependency_rows(dependencies: Iterable[Dependency]) -> List[Dict[str, str]]:
    """Table rows for :func:`jarkeeper.utils.console.print_table`."""
    return [
        {
            "Group": dependency.group_id,
            "Artifact": dependency.artifact_id,
            "Version": str(dependency.version),
            "Classifier": dependency.classifier or "-",
            "Type": dependency.type,
        }
        for dependency in dependencies
    ]
