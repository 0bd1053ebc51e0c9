"""Versions command implementation for jarkeeper.

Lists the versions of an artifact published in the configured
repositories, marking the ``latest`` and ``release`` versions named by
the repository metadata.

Typical usage::

    $ jarkeeper versions org.slf4j:slf4j-api
    $ jarkeeper versions org.slf4j:slf4j-api --format json
"""

from __future__ import annotations

import sys
import json
from typing import Any, Dict, List

import click

from jarkeeper.core import DependencyResolver
from jarkeeper.exceptions import JarKeeperError
from jarkeeper.models import Dependency, VersionNumber
from jarkeeper.context import JarKeeperContext, pass_context
from jarkeeper.utils import get_logger, print_error, print_table, print_warning
from jarkeeper.commands import FORMAT_CHOICES, parse_coordinate

logger = get_logger("commands.versions")


@click.command()
@click.argument("coordinate", callback=parse_coordinate)
@click.option(
    "--format",
    "-f",
    type=click.Choice(FORMAT_CHOICES, case_sensitive=False),
    default="table",
    help="Output format.",
)
@pass_context
def versions(ctx: JarKeeperContext, coordinate: Dependency, format: str) -> None:
    """List the published versions of COORDINATE (group:artifact)."""
    try:
        with ctx.create_client() as client:
            resolver = DependencyResolver(
                ctx.repository_list(),
                coordinate,
                client=client,
                deadline=ctx.create_deadline(),
            )
            listed = resolver.list_versions()
            latest = resolver.latest_version()
            release = resolver.release_version()
    except JarKeeperError as exc:
        print_error(str(exc))
        sys.exit(1)

    logger.info("Found %d version(s) of %s", len(listed), coordinate)

    if format == "json":
        _display_json(listed, latest, release)
    elif format == "simple":
        for version in listed:
            click.echo(str(version))
    else:
        _display_table(coordinate, listed, latest, release)


def _tags(version: VersionNumber, latest: VersionNumber, release: VersionNumber) -> str:
    tags = []
    if version == latest:
        tags.append("latest")
    if version == release:
        tags.append("release")
    return ", ".join(tags)


def _display_table(
    coordinate: Dependency,
    listed: List[VersionNumber],
    latest: VersionNumber,
    release: VersionNumber,
) -> None:
    if not listed:
        print_warning(f"No versions published for {coordinate}")
        return

    print_table(
        [{"Version": str(v), "Tags": _tags(v, latest, release)} for v in listed],
        title=f"{coordinate.group_id}:{coordinate.artifact_id}",
        column_styles={
            "Version": {"style": "bold cyan", "no_wrap": True},
            "Tags": {"style": "bold green"},
        },
    )


def _display_json(
    listed: List[VersionNumber], latest: VersionNumber, release: VersionNumber
) -> None:
    data: Dict[str, Any] = {
        "latest": str(latest) if latest != VersionNumber.UNKNOWN else None,
        "release": str(release) if release != VersionNumber.UNKNOWN else None,
        "versions": [str(version) for version in listed],
    }
    click.echo(json.dumps(data, indent=2))
