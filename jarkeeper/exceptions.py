"""
Custom exception hierarchy for jarkeeper.

All exceptions inherit from :class:`JarKeeperError` and carry optional
structured metadata via the ``details`` attribute, which is rendered into
``str()`` for diagnostics and logging.

Resolution failures derive from :class:`DependencyError` so callers can
tell *which* dependency failed:

- :class:`ArtifactNotFoundError`: no configured repository had the
  document or artifact (an expected outcome for optional lookups)
- :class:`ArtifactRetrievalError`: a transport failure other than
  "not found"
- :class:`ManifestParsingError`: a document was fetched but is not
  well-formed
- :class:`DownloadError`: an I/O failure while streaming an artifact
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, MutableMapping, Optional, Sequence

if TYPE_CHECKING:
    from jarkeeper.models.dependency import Dependency


class JarKeeperError(Exception):
    """Base exception for all jarkeeper errors.

    Args:
        message: Human-readable error message.
        details: Optional structured metadata describing the error.
    """

    __slots__ = ("message", "details")

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message: str = message
        self.details: MutableMapping[str, Any] = dict(details) if details else {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        formatted = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({formatted})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, details={dict(self.details)!r})"
        )


def _add_if(details: MutableMapping[str, Any], key: str, value: Any) -> None:
    """Add a key to ``details`` only if ``value`` is not ``None``."""
    if value is not None:
        details[key] = value


def _truncate(text: str, max_length: int = 200) -> str:
    """Truncate long text for safe logging or error reporting."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigError(JarKeeperError):
    """Raised when a configuration file is missing, unreadable or invalid.

    Args:
        message: Error description.
        config_path: Path of the configuration file involved.
        option: Name of the offending option, if any.
    """

    __slots__ = ("config_path", "option")

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", config_path)
        _add_if(details, "option", option)

        super().__init__(message, details)

        self.config_path = config_path
        self.option = option


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


class NetworkError(JarKeeperError):
    """Raised when HTTP or network operations fail.

    Args:
        message: Error description.
        url: URL being accessed.
        status_code: HTTP status code, if available.
        response_body: Raw response body, truncated for safety.
    """

    __slots__ = ("url", "status_code", "response_body")

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "url", url)
        _add_if(details, "status_code", status_code)

        if response_body is not None:
            details["response"] = _truncate(response_body)

        super().__init__(message, details)

        self.url = url
        self.status_code = status_code
        self.response_body = response_body


class ResourceNotFoundError(NetworkError):
    """Raised when a repository answers 404 for a URL."""

    __slots__ = ()


class ResolutionCancelledError(JarKeeperError):
    """Raised when a resolution deadline expired or was cancelled.

    Args:
        message: Error description.
        reason: ``"expired"`` or ``"cancelled"``.
    """

    __slots__ = ("reason",)

    def __init__(self, message: str, *, reason: Optional[str] = None) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "reason", reason)

        super().__init__(message, details)

        self.reason = reason


# ---------------------------------------------------------------------------
# Dependency resolution
# ---------------------------------------------------------------------------


class DependencyError(JarKeeperError):
    """Base class for failures tied to a single dependency.

    Args:
        message: Error description.
        dependency: The dependency being resolved.
        details: Additional structured metadata.
    """

    __slots__ = ("dependency",)

    def __init__(
        self,
        message: str,
        *,
        dependency: Optional["Dependency"] = None,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        merged: MutableMapping[str, Any] = {}
        _add_if(merged, "dependency", str(dependency) if dependency else None)
        if details:
            merged.update(details)

        super().__init__(message, merged)

        self.dependency = dependency


class ArtifactNotFoundError(DependencyError):
    """Raised when no configured repository has the requested document.

    Args:
        dependency: The dependency being resolved.
        location: URL, or comma-separated URLs, that were probed.
    """

    __slots__ = ("location",)

    def __init__(self, dependency: "Dependency", location: str) -> None:
        super().__init__(
            f"Couldn't find artifact for dependency '{dependency}'",
            dependency=dependency,
            details={"location": location},
        )
        self.location = location


class ArtifactRetrievalError(DependencyError):
    """Raised when a document exists but couldn't be retrieved.

    Args:
        dependency: The dependency being resolved.
        location: URL that failed.
        original_error: Underlying transport exception.
    """

    __slots__ = ("location", "original_error")

    def __init__(
        self,
        dependency: "Dependency",
        location: str,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {"location": location}
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )
        super().__init__(
            f"Unexpected error while retrieving artifact for dependency '{dependency}'",
            dependency=dependency,
            details=details,
        )
        self.location = location
        self.original_error = original_error


class ManifestParsingError(DependencyError):
    """Raised when a metadata document or POM is not well-formed.

    Args:
        dependency: The dependency being resolved.
        location: URL of the offending document.
        errors: Parser-reported error messages.
    """

    __slots__ = ("location", "errors")

    def __init__(
        self,
        dependency: "Dependency",
        location: str,
        errors: Sequence[str],
    ) -> None:
        super().__init__(
            f"Unable to parse document for dependency '{dependency}'",
            dependency=dependency,
            details={"location": location, "errors": "; ".join(errors)},
        )
        self.location = location
        self.errors = list(errors)


class DownloadError(DependencyError):
    """Raised when streaming an artifact to disk fails.

    Args:
        dependency: The dependency being downloaded.
        url: Artifact URL being streamed.
        destination: Local file being written.
        original_error: Underlying exception.
    """

    __slots__ = ("url", "destination", "original_error")

    def __init__(
        self,
        dependency: "Dependency",
        url: str,
        destination: str,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {"url": url, "destination": destination}
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )
        super().__init__(
            f"Unable to download dependency '{dependency}'",
            dependency=dependency,
            details=details,
        )
        self.url = url
        self.destination = destination
        self.original_error = original_error


# ---------------------------------------------------------------------------
# Filesystem
# ---------------------------------------------------------------------------


class FileOperationError(JarKeeperError):
    """Raised when file system operations fail.

    Args:
        message: Error description.
        file_path: Path to the file involved.
        operation: Operation being performed (read/write/digest).
        original_error: Original exception that triggered this error.
    """

    __slots__ = ("file_path", "operation", "original_error")

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        details: MutableMapping[str, Any] = {}
        _add_if(details, "path", file_path)
        _add_if(details, "operation", operation)
        _add_if(
            details,
            "original_error",
            str(original_error) if original_error else None,
        )

        super().__init__(message, details)

        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error
