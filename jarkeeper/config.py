"""Configuration file loader for jarkeeper.

Two file formats are recognized:

- ``jarkeeper.toml`` with settings under a ``[jarkeeper]`` table
- ``pyproject.toml`` with settings under a ``[tool.jarkeeper]`` table

Discovery order:

1. Explicit path from ``--config`` or ``JARKEEPER_CONFIG``
2. ``jarkeeper.toml`` in the current directory
3. ``pyproject.toml`` with a ``[tool.jarkeeper]`` section

Configuration precedence: defaults < config file < CLI args.

Example (``jarkeeper.toml``)::

    [jarkeeper]
    repositories = [
        "https://repo1.maven.org/maven2/",
        "https://s01.oss.sonatype.org/content/repositories/snapshots/",
    ]
    timeout = 15
    resolution_timeout = 300
"""

from __future__ import annotations

import tomli
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from jarkeeper.exceptions import ConfigError
from jarkeeper.utils.logger import get_logger
from jarkeeper.models.repository import Repository, repositories_from_urls
from jarkeeper.constants import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_REPOSITORIES,
    DEFAULT_TIMEOUT,
)

logger = get_logger("config")

CONFIG_FILE_NAME = "jarkeeper.toml"


@dataclass
class JarKeeperConfig:
    """Parsed and validated jarkeeper configuration.

    All fields have defaults, so an empty config file is valid.

    Attributes:
        repositories: Repository URLs, probed in order.
        timeout: Per-request network timeout in seconds.
        max_retries: Retries for transient network failures.
        resolution_timeout: Upper bound in seconds for a whole resolution,
            or ``None`` for no limit.
        verify_ssl: Whether to verify TLS certificates.
        source_path: Path to the loaded config file, or ``None`` if using
            defaults.
    """

    repositories: List[str] = field(default_factory=lambda: list(DEFAULT_REPOSITORIES))
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    resolution_timeout: Optional[float] = None
    verify_ssl: bool = True

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def repository_list(self) -> List[Repository]:
        return repositories_from_urls(self.repositories)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return the options as a dictionary for debug logging."""
        return {
            "repositories": list(self.repositories),
            "timeout": self.timeout,
            "max_retries": self.max_retries,
            "resolution_timeout": self.resolution_timeout,
            "verify_ssl": self.verify_ssl,
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to the config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    jarkeeper_toml = cwd / CONFIG_FILE_NAME
    if jarkeeper_toml.is_file():
        logger.debug("Found %s: %s", CONFIG_FILE_NAME, jarkeeper_toml)
        return jarkeeper_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_section(pyproject_toml):
        logger.debug("Found [tool.jarkeeper] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_section(path: Path) -> bool:
    """Return True if ``pyproject.toml`` has a ``[tool.jarkeeper]`` table.

    An unreadable pyproject doesn't stop discovery; it just isn't used.
    """
    try:
        raw = _read_toml(path)
    except ConfigError as exc:
        logger.debug("Ignoring %s: %s", path, exc)
        return False
    return "jarkeeper" in raw.get("tool", {})


def load_config(config_path: Optional[Path] = None) -> JarKeeperConfig:
    """Load and validate jarkeeper configuration.

    Args:
        config_path: Explicit path to a config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`JarKeeperConfig`, with defaults if no file found.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        logger.debug("No config file found, using defaults")
        return JarKeeperConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        section = raw.get("tool", {}).get("jarkeeper", {})
    else:
        section = raw.get("jarkeeper", {})

    if not section:
        logger.debug("Config file found but has no jarkeeper section, using defaults")
        return JarKeeperConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomli.load(fh)
    except tomli.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _positive_number(value: Any, *, option: str, config_path: str) -> float:
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(
            f"{option} must be a number, got {type(value).__name__}",
            config_path=config_path,
            option=option,
        )
    if value <= 0:
        raise ConfigError(
            f"{option} must be greater than 0, got {value}",
            config_path=config_path,
            option=option,
        )
    return float(value)


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> JarKeeperConfig:
    """Validate a ``[jarkeeper]`` / ``[tool.jarkeeper]`` table.

    Raises:
        ConfigError: Unknown keys or values of the wrong type or range.
    """
    config = JarKeeperConfig()

    known = {
        "repositories",
        "timeout",
        "max_retries",
        "resolution_timeout",
        "verify_ssl",
    }

    unknown = set(section.keys()) - known
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    if "repositories" in section:
        val = section["repositories"]
        if not isinstance(val, list) or not all(isinstance(url, str) and url for url in val):
            raise ConfigError(
                "repositories must be a list of URLs",
                config_path=config_path,
                option="repositories",
            )
        config.repositories = list(val)

    if "timeout" in section:
        config.timeout = _positive_number(
            section["timeout"], option="timeout", config_path=config_path
        )

    if "resolution_timeout" in section:
        config.resolution_timeout = _positive_number(
            section["resolution_timeout"],
            option="resolution_timeout",
            config_path=config_path,
        )

    if "max_retries" in section:
        val = section["max_retries"]
        if isinstance(val, bool) or not isinstance(val, int) or val < 0:
            raise ConfigError(
                f"max_retries must be a non-negative integer, got {val!r}",
                config_path=config_path,
                option="max_retries",
            )
        config.max_retries = val

    if "verify_ssl" in section:
        val = section["verify_ssl"]
        if not isinstance(val, bool):
            raise ConfigError(
                f"verify_ssl must be a boolean, got {type(val).__name__}",
                config_path=config_path,
                option="verify_ssl",
            )
        config.verify_ssl = val

    return config
