"""
Filesystem utilities for jarkeeper.

Helpers for validating download directories, computing artifact digests
and writing downloads atomically. Filesystem failures are normalized to
:class:`~jarkeeper.exceptions.FileOperationError`; directory validation
raises ``ValueError`` since a bad directory is a caller error.
"""

from __future__ import annotations

import os
import hashlib
import tempfile
from pathlib import Path
from contextlib import contextmanager
from typing import BinaryIO, Iterator, Optional, Union

from jarkeeper.utils.logger import get_logger
from jarkeeper.exceptions import FileOperationError

logger = get_logger("filesystem")

PathLike = Union[str, Path]

_DIGEST_BLOCK_SIZE = 64 * 1024


def validate_directory(directory: Optional[PathLike]) -> Path:
    """Check that ``directory`` exists, is writable and is a directory.

    Raises:
        ValueError: When any of the checks fails.
    """
    if directory is None:
        raise ValueError("directory can't be None")

    path = Path(directory)
    if not path.exists():
        raise ValueError(f"directory '{path}' doesn't exist")
    if not os.access(path, os.W_OK):
        raise ValueError(f"directory '{path}' can't be written to")
    if not path.is_dir():
        raise ValueError(f"directory '{path}' is not a directory")

    return path


def file_digest(file_path: PathLike, algorithm: str) -> str:
    """Return the lowercase hex digest of a file.

    Args:
        file_path: File to hash.
        algorithm: Any :mod:`hashlib` algorithm name, e.g. ``"sha256"``.
    """
    path = Path(file_path)
    digest = hashlib.new(algorithm)

    try:
        with open(path, "rb") as fh:
            for block in iter(lambda: fh.read(_DIGEST_BLOCK_SIZE), b""):
                digest.update(block)
    except OSError as exc:
        raise FileOperationError(
            f"Failed to read file: {exc}",
            file_path=str(path),
            operation="digest",
            original_error=exc,
        ) from exc

    return digest.hexdigest()


@contextmanager
def atomic_writer(target: PathLike) -> Iterator[BinaryIO]:
    """Write a file through a temporary sibling that replaces ``target``.

    ``target`` is only touched once the body completes; on any failure
    the temporary file is removed and ``target`` keeps its old content.

    Example:
        >>> with atomic_writer(Path("lib/a-1.0.jar")) as fh:
        ...     fh.write(payload)
    """
    target = Path(target)
    temp_path: Optional[Path] = None

    try:
        with tempfile.NamedTemporaryFile(
            mode="wb",
            dir=str(target.parent),
            delete=False,
            prefix=f".{target.name}.",
            suffix=".part",
        ) as tmp:
            temp_path = Path(tmp.name)
            yield tmp
            tmp.flush()
            os.fsync(tmp.fileno())

        temp_path.replace(target)

    except BaseException as exc:
        if temp_path is not None and temp_path.exists():
            try:
                temp_path.unlink()
                logger.debug("Cleaned up temporary file: %s", temp_path)
            except OSError as cleanup_exc:
                logger.warning(
                    "Failed to clean up temporary file %s: %s",
                    temp_path,
                    cleanup_exc,
                )

        if isinstance(exc, OSError):
            raise FileOperationError(
                f"Atomic write failed: {exc}",
                file_path=str(target),
                operation="write",
                original_error=exc,
            ) from exc
        raise
