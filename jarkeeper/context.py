"""
Shared context object for jarkeeper CLI commands.

This module defines the global Click context used to share configuration
and runtime options across CLI subcommands, and builds the HTTP client
and resolution deadline every command needs from that configuration.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import click

from jarkeeper.utils.http import HTTPClient
from jarkeeper.config import JarKeeperConfig
from jarkeeper.utils.deadline import Deadline
from jarkeeper.models.repository import Repository, repositories_from_urls


class JarKeeperContext:
    """Global context object for jarkeeper CLI commands.

    Attributes:
        config_path: Path to the configuration file, if one was used.
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG).
        color: Whether colored terminal output is enabled.
        config: Loaded configuration.
        repositories: Repository URLs given with ``--repository``; they
            replace the configured ones when present.
    """

    __slots__ = ("config_path", "verbose", "color", "config", "repositories")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.verbose: int = 0
        self.color: bool = True
        self.config: JarKeeperConfig = JarKeeperConfig()
        self.repositories: List[str] = []

    def repository_list(self) -> List[Repository]:
        """Repositories to probe, in order."""
        if self.repositories:
            return repositories_from_urls(self.repositories)
        return self.config.repository_list()

    def create_client(self) -> HTTPClient:
        return HTTPClient(
            timeout=self.config.timeout,
            max_retries=self.config.max_retries,
            verify_ssl=self.config.verify_ssl,
        )

    def create_deadline(self) -> Deadline:
        return Deadline(self.config.resolution_timeout)


#: Click decorator for injecting :class:`JarKeeperContext` into commands.
pass_context = click.make_pass_decorator(JarKeeperContext, ensure=True)
