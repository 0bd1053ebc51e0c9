"""
HTTP client utilities for jarkeeper.

This module provides a blocking HTTP client with retry logic, ``429``
handling, deadline support and Maven-repository-aware error mapping:

- ``404`` raises :class:`~jarkeeper.exceptions.ResourceNotFoundError`,
  which callers treat as "try the next repository"
- every other failure raises :class:`~jarkeeper.exceptions.NetworkError`

Resolution is deliberately sequential, so the client wraps a synchronous
``httpx.Client`` and never issues requests in parallel.
"""

from __future__ import annotations

import time
import random
from pathlib import Path
from typing import Any, Optional, Union

import httpx

from jarkeeper.utils.deadline import Deadline
from jarkeeper.utils.logger import get_logger
from jarkeeper.__version__ import __version__
from jarkeeper.utils.filesystem import atomic_writer
from jarkeeper.exceptions import NetworkError, ResourceNotFoundError
from jarkeeper.constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_MAX_RETRIES,
    DOWNLOAD_CHUNK_SIZE,
    MAX_RATE_LIMIT_RETRIES,
    USER_AGENT_TEMPLATE,
)

logger = get_logger("http")


class HTTPClient:
    """Blocking HTTP client with retries and deadline-capped timeouts.

    Args:
        timeout: Per-request timeout in seconds.
        max_retries: Maximum number of retry attempts for transient errors.
        verify_ssl: Whether to verify SSL certificates.
        user_agent: Custom User-Agent header value.
        transport: Optional ``httpx`` transport, e.g. ``httpx.MockTransport``.

    Example:
        >>> with HTTPClient() as client:
        ...     xml = client.get_bytes(
        ...         "https://repo1.maven.org/maven2/org/slf4j/slf4j-api/maven-metadata.xml"
        ...     )
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        verify_ssl: bool = True,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max_retries
        self.verify_ssl = verify_ssl
        self.user_agent = user_agent or USER_AGENT_TEMPLATE.format(version=__version__)

        self._transport = transport
        self._client: Optional[httpx.Client] = None
        self._max_429_retries: int = MAX_RATE_LIMIT_RETRIES

    def __enter__(self) -> "HTTPClient":
        self._ensure_client()
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()

    def _ensure_client(self) -> httpx.Client:
        """Initialize the underlying httpx client if needed."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=httpx.Timeout(self.timeout),
                http2=True,
                verify=self.verify_ssl,
                follow_redirects=True,
                headers={"User-Agent": self.user_agent},
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def _timeout_for(self, deadline: Optional[Deadline]) -> float:
        if deadline is None:
            return self.timeout
        deadline.check()
        return deadline.cap(self.timeout)

    def _backoff(self, attempt: int, deadline: Optional[Deadline]) -> None:
        delay = (2**attempt) + random.uniform(0.0, 0.3)
        if deadline is not None:
            delay = deadline.cap(delay)
        logger.debug("Retrying in %.2fs", delay)
        time.sleep(delay)

    def _request_with_retry(
        self,
        method: str,
        url: str,
        *,
        deadline: Optional[Deadline] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Execute an HTTP request with retry and backoff logic."""
        client = self._ensure_client()

        last_exc: Optional[Exception] = None
        retry_429_count = 0

        for attempt in range(self.max_retries + 1):
            timeout = self._timeout_for(deadline)
            try:
                response = client.request(method, url, timeout=timeout, **kwargs)

                if response.status_code == 429:
                    retry_429_count += 1
                    if retry_429_count > self._max_429_retries:
                        raise NetworkError(
                            f"Rate limit exceeded after {self._max_429_retries} retries",
                            url=url,
                            status_code=429,
                        )
                    retry_after = int(response.headers.get("Retry-After", "1"))
                    logger.warning(
                        "Rate limited (429), retrying after %ds (%d/%d)",
                        retry_after,
                        retry_429_count,
                        self._max_429_retries,
                    )
                    time.sleep(retry_after if deadline is None else deadline.cap(retry_after))
                    continue

                if response.status_code == 404:
                    raise ResourceNotFoundError(
                        f"Resource not found: {url}",
                        url=url,
                        status_code=404,
                    )

                response.raise_for_status()
                return response

            except httpx.TimeoutException as exc:
                last_exc = exc
                logger.warning(
                    "Request timeout (%d/%d): %s",
                    attempt + 1,
                    self.max_retries + 1,
                    url,
                )

            except httpx.TransportError as exc:
                last_exc = exc
                logger.warning(
                    "Network error (%d/%d): %s",
                    attempt + 1,
                    self.max_retries + 1,
                    exc,
                )

            except httpx.HTTPStatusError as exc:
                if exc.response.status_code < 500:
                    raise NetworkError(
                        f"HTTP {exc.response.status_code} error for {url}",
                        url=url,
                        status_code=exc.response.status_code,
                        response_body=exc.response.text,
                    ) from exc
                last_exc = exc
                logger.warning(
                    "HTTP %d error (%d/%d): %s",
                    exc.response.status_code,
                    attempt + 1,
                    self.max_retries + 1,
                    url,
                )

            if attempt < self.max_retries:
                self._backoff(attempt, deadline)

        if deadline is not None:
            deadline.check()

        raise NetworkError(
            f"Request failed after {self.max_retries + 1} attempts: {url}",
            url=url,
        ) from last_exc

    def get(
        self, url: str, *, deadline: Optional[Deadline] = None, **kwargs: Any
    ) -> httpx.Response:
        """Perform a GET request with retry logic."""
        return self._request_with_retry("GET", url, deadline=deadline, **kwargs)

    def get_bytes(self, url: str, *, deadline: Optional[Deadline] = None) -> bytes:
        """Fetch a URL and return the raw body, e.g. an XML document."""
        logger.debug("Fetching %s", url)
        return self.get(url, deadline=deadline).content

    def get_text(self, url: str, *, deadline: Optional[Deadline] = None) -> str:
        """Fetch a URL and return the decoded body, e.g. a checksum sidecar."""
        logger.debug("Fetching %s", url)
        return self.get(url, deadline=deadline).text

    def download(
        self,
        url: str,
        destination: Union[str, Path],
        *,
        deadline: Optional[Deadline] = None,
    ) -> int:
        """Stream ``url`` into ``destination`` atomically.

        Downloads are not retried: a partially streamed artifact is
        discarded and the failure reported to the caller.

        Returns:
            Number of bytes written.

        Raises:
            ResourceNotFoundError: The repository answered 404.
            NetworkError: Any other HTTP or transport failure.
            FileOperationError: The destination couldn't be written.
        """
        client = self._ensure_client()
        timeout = self._timeout_for(deadline)
        written = 0

        try:
            with client.stream("GET", url, timeout=timeout) as response:
                if response.status_code == 404:
                    raise ResourceNotFoundError(
                        f"Resource not found: {url}",
                        url=url,
                        status_code=404,
                    )
                if response.status_code >= 400:
                    raise NetworkError(
                        f"HTTP {response.status_code} error for {url}",
                        url=url,
                        status_code=response.status_code,
                    )

                with atomic_writer(destination) as fh:
                    for chunk in response.iter_bytes(DOWNLOAD_CHUNK_SIZE):
                        if deadline is not None:
                            deadline.check()
                        fh.write(chunk)
                        written += len(chunk)

        except httpx.HTTPError as exc:
            raise NetworkError(f"Download failed: {url}", url=url) from exc

        logger.debug("Downloaded %d bytes from %s", written, url)
        return written
