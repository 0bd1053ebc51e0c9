"""
Command-line interface for jarkeeper.

This module provides the main CLI entry point and handles global options,
configuration loading, and command registration.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from jarkeeper.config import load_config
from jarkeeper.__version__ import __version__
from jarkeeper.context import JarKeeperContext
from jarkeeper.exceptions import ConfigError, JarKeeperError
from jarkeeper.utils.logger import get_logger, setup_logging
from jarkeeper.utils.console import print_error, print_warning, reconfigure_console
from jarkeeper.commands.deps import deps
from jarkeeper.commands.download import download
from jarkeeper.commands.versions import versions

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="JARKEEPER_CONFIG",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="JARKEEPER_COLOR",
)
@click.option(
    "--repository",
    "-r",
    "repositories",
    multiple=True,
    metavar="URL",
    help="Repository to resolve against (repeatable, replaces configured ones).",
)
@click.version_option(
    version=__version__,
    prog_name="jarkeeper",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    color: bool,
    repositories: Tuple[str, ...],
) -> None:
    """jarkeeper: resolve and download artifacts from Maven repositories.

    \b
    Available commands:
      jarkeeper versions COORDINATE    List published versions
      jarkeeper deps COORDINATE        Show direct or transitive dependencies
      jarkeeper download COORDINATE    Download artifacts into a directory

    \b
    Examples:
      jarkeeper versions org.slf4j:slf4j-api
      jarkeeper deps org.slf4j:slf4j-simple:2.0.5 --transitive
      jarkeeper download com.h2database:h2:2.1.214 -d lib

    Use ``jarkeeper COMMAND --help`` for command-specific options.
    """
    # Respect NO_COLOR for downstream libraries and our own log output
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()
    setup_logging(verbose)

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    jarkeeper_ctx = JarKeeperContext()
    jarkeeper_ctx.config_path = config or loaded_config.source_path
    jarkeeper_ctx.color = color
    jarkeeper_ctx.verbose = verbose
    jarkeeper_ctx.config = loaded_config
    jarkeeper_ctx.repositories = list(repositories)
    ctx.obj = jarkeeper_ctx

    logger.debug("jarkeeper v%s", __version__)
    logger.debug("Config path: %s", jarkeeper_ctx.config_path)
    if loaded_config.source_path:
        logger.debug("Loaded configuration: %s", loaded_config.to_log_dict())
    logger.debug("Repositories: %s", [repo.url for repo in jarkeeper_ctx.repository_list()])
    logger.debug("Verbosity: %s | Color: %s", verbose, color)


cli.add_command(versions)
cli.add_command(deps)
cli.add_command(download)


def main() -> int:
    """Main entry point for the jarkeeper CLI.

    Returns:
        Exit code:
            0   Success
            1   Unhandled or application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        cli(standalone_mode=False)
        return 0

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except click.exceptions.Exit as exc:
        return exc.exit_code

    except JarKeeperError as exc:
        print_error(str(exc))
        logger.debug(
            "JarKeeperError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return 1

    except (KeyboardInterrupt, click.exceptions.Abort):
        print_warning("\nOperation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
