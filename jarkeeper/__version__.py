"""
jarkeeper version information.

Single source of truth for the package version, also used to build the
HTTP ``User-Agent`` sent to Maven repositories.
"""

from __future__ import annotations

__version__ = "0.1.0.dev0"

#: Human-readable version (for CLI)
VERSION_STRING = f"jarkeeper {__version__}"
