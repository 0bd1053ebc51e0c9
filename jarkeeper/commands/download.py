"""Download command implementation for jarkeeper.

Downloads an artifact, and optionally its transitive dependencies, into
an existing directory. Files already present are kept when their
checksum matches the repository's.

Typical usage::

    $ jarkeeper download com.h2database:h2:2.1.214 -d lib
    $ jarkeeper download org.slf4j:slf4j-simple:2.0.5 -d lib --transitive
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Tuple

import click

from jarkeeper.models import Dependency
from jarkeeper.core import DependencyResolver
from jarkeeper.exceptions import JarKeeperError
from jarkeeper.context import JarKeeperContext, pass_context
from jarkeeper.utils import get_logger, get_raw_console, print_error, print_success
from jarkeeper.commands import SCOPE_CHOICES, parse_coordinate

logger = get_logger("commands.download")


@click.command()
@click.argument("coordinate", callback=parse_coordinate)
@click.option(
    "--directory",
    "-d",
    type=click.Path(file_okay=False, path_type=Path),
    required=True,
    help="Existing, writable directory to download into.",
)
@click.option(
    "--scope",
    "-s",
    "scopes",
    type=click.Choice(SCOPE_CHOICES, case_sensitive=False),
    multiple=True,
    default=("compile", "runtime"),
    show_default=True,
    help="Scope to follow with --transitive (repeatable).",
)
@click.option(
    "--transitive",
    is_flag=True,
    help="Also download the transitive dependencies.",
)
@pass_context
def download(
    ctx: JarKeeperContext,
    coordinate: Dependency,
    directory: Path,
    scopes: Tuple[str, ...],
    transitive: bool,
) -> None:
    """Download COORDINATE into DIRECTORY."""
    try:
        with ctx.create_client() as client:
            resolver = DependencyResolver(
                ctx.repository_list(),
                coordinate,
                client=client,
                deadline=ctx.create_deadline(),
            )
            if transitive:
                paths = resolver.download_transitively_into_directory(directory, *scopes)
            else:
                paths = [resolver.download_into_directory(directory)]
    except ValueError as exc:
        print_error(f"Invalid download directory: {exc}")
        sys.exit(1)
    except JarKeeperError as exc:
        print_error(str(exc))
        sys.exit(1)

    _display_paths(paths)
    print_success(f"{len(paths)} artifact(s) in {directory}")


def _display_paths(paths: List[Path]) -> None:
    console = get_raw_console()
    for path in paths:
        console.print(f"  {path.name}", markup=False, highlight=False)
