"""
Executable module for jarkeeper.

Running:
    python -m jarkeeper

is equivalent to:
    jarkeeper
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: ImportError) -> None:
    """Report a CLI that can't be imported, e.g. a missing dependency."""
    sys.stderr.write("jarkeeper CLI failed to start.\n")
    sys.stderr.write(f"Python version : {sys.version}\n")
    try:
        from jarkeeper.__version__ import __version__

        sys.stderr.write(f"jarkeeper version: {__version__}\n")
    except ImportError:
        sys.stderr.write("jarkeeper version: <unknown>\n")
    sys.stderr.write(f"ImportError: {exc}\n")


def main() -> int:
    """Entrypoint when executing ``python -m jarkeeper``.

    Returns:
        Exit code returned by the CLI, or 1 if it can't be imported.
    """
    try:
        # Import lazily so dependencies are only loaded during CLI use
        from jarkeeper.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
