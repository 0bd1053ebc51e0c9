"""
Utility helpers for jarkeeper.

This package provides reusable utilities used across jarkeeper:

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Filesystem helpers for downloads and digests
- Blocking HTTP client and resolution deadlines

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Filesystem utilities
# ---------------------------------------------------------------------------

from jarkeeper.utils.filesystem import (
    atomic_writer,
    file_digest,
    validate_directory,
)

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from jarkeeper.utils.logger import (
    get_logger,
    level_for_verbosity,
    setup_logging,
)

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from jarkeeper.utils.console import (
    get_raw_console,
    print_error,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)

# ---------------------------------------------------------------------------
# Network utilities
# ---------------------------------------------------------------------------

from jarkeeper.utils.http import HTTPClient
from jarkeeper.utils.deadline import Deadline

__all__ = [
    # Console
    "print_error",
    "print_table",
    "print_success",
    "print_warning",
    "get_raw_console",
    "reconfigure_console",
    # Logging
    "get_logger",
    "setup_logging",
    "level_for_verbosity",
    # Filesystem
    "atomic_writer",
    "file_digest",
    "validate_directory",
    # Network
    "HTTPClient",
    "Deadline",
]
