"""Deps command implementation for jarkeeper.

Shows the dependencies an artifact's POM declares for the requested
scopes, either directly or as the full transitive closure.

Typical usage::

    # Direct compile dependencies
    $ jarkeeper deps org.slf4j:slf4j-simple:2.0.5

    # Transitive compile + runtime dependencies as JSON
    $ jarkeeper deps com.example:app:1.0 -s compile -s runtime --transitive -f json
"""

from __future__ import annotations

import sys
import json
from typing import List, Tuple

import click

from jarkeeper.core import DependencyResolver
from jarkeeper.exceptions import JarKeeperError
from jarkeeper.models import Dependency, DependencySet
from jarkeeper.context import JarKeeperContext, pass_context
from jarkeeper.utils import get_logger, print_error, print_table, print_warning
from jarkeeper.commands import (
    FORMAT_CHOICES,
    SCOPE_CHOICES,
    dependency_record,
    dependency_rows,
    parse_coordinate,
)

logger = get_logger("commands.deps")


@click.command()
@click.argument("coordinate", callback=parse_coordinate)
@click.option(
    "--scope",
    "-s",
    "scopes",
    type=click.Choice(SCOPE_CHOICES, case_sensitive=False),
    multiple=True,
    default=("compile",),
    show_default=True,
    help="Scope to include (repeatable).",
)
@click.option(
    "--transitive/--direct",
    default=False,
    help="Show the transitive closure instead of direct dependencies.",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(FORMAT_CHOICES, case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def deps(
    ctx: JarKeeperContext,
    coordinate: Dependency,
    scopes: Tuple[str, ...],
    transitive: bool,
    format: str,
) -> None:
    """Show the dependencies of COORDINATE (group:artifact[:version]).

    Without a version the latest published one is used. Transitive
    resolution keeps the first version of each artifact reached
    breadth-first and honors the exclusions declared along each
    dependency path.
    """
    try:
        with ctx.create_client() as client:
            resolver = DependencyResolver(
                ctx.repository_list(),
                coordinate,
                client=client,
                deadline=ctx.create_deadline(),
            )
            version = resolver.resolve_version()
            if transitive:
                found = resolver.get_all_dependencies(*scopes)
            else:
                found = resolver.get_direct_dependencies(*scopes)
    except JarKeeperError as exc:
        print_error(str(exc))
        sys.exit(1)

    root = coordinate.with_version(version)
    dependencies = _without_root(found, root)
    logger.info("%s has %d dependencies in %s", root, len(dependencies), ", ".join(scopes))

    if format == "json":
        click.echo(
            json.dumps(
                {
                    "dependency": dependency_record(root),
                    "scopes": list(scopes),
                    "transitive": transitive,
                    "dependencies": [dependency_record(d) for d in dependencies],
                },
                indent=2,
            )
        )
    elif format == "simple":
        for dependency in dependencies:
            click.echo(str(dependency))
    elif not dependencies:
        print_warning(f"{root} has no dependencies in scope {', '.join(scopes)}")
    else:
        print_table(
            dependency_rows(dependencies),
            title=f"{'Transitive' if transitive else 'Direct'} dependencies of {root}",
            column_styles={
                "Group": {"style": "dim"},
                "Artifact": {"style": "bold cyan", "no_wrap": True},
                "Version": {"style": "bold green", "justify": "center"},
            },
        )


def _without_root(found: DependencySet, root: Dependency) -> List[Dependency]:
    return [dependency for dependency in found if dependency.key != root.key]
