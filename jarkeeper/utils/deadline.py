"""
Deadline and cancellation support for jarkeeper.

Every network call made on behalf of a resolution checks the shared
:class:`Deadline` first and caps its own timeout at the time that is
left, so a whole transitive resolution can be bounded or cancelled from
another thread.

Typical usage::

    deadline = Deadline(120)
    resolver = DependencyResolver(repositories, dependency, deadline=deadline)
    resolver.get_all_dependencies(Scope.COMPILE)
"""

from __future__ import annotations

import time
import threading
from typing import Callable, Optional

from jarkeeper.exceptions import ResolutionCancelledError


class Deadline:
    """A point in time after which resolution must stop.

    Args:
        seconds: Time budget from now; ``None`` means no time limit (the
            deadline can still be cancelled).
        clock: Monotonic clock, injectable for tests.
    """

    __slots__ = ("_expires_at", "_clock", "_cancelled")

    def __init__(
        self,
        seconds: Optional[float] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._clock = clock
        self._expires_at = None if seconds is None else clock() + seconds
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        """Cancel every pending and future call bound to this deadline."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self._expires_at is not None and self._clock() >= self._expires_at

    def remaining(self) -> Optional[float]:
        """Seconds left, ``0.0`` once expired, ``None`` when unbounded."""
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - self._clock())

    def check(self) -> None:
        """Raise :class:`ResolutionCancelledError` if time is up or cancelled."""
        if self.cancelled:
            raise ResolutionCancelledError("Resolution was cancelled", reason="cancelled")
        if self.expired:
            raise ResolutionCancelledError("Resolution deadline expired", reason="expired")

    def cap(self, timeout: float) -> float:
        """Return ``timeout`` limited to the time that is left."""
        remaining = self.remaining()
        return timeout if remaining is None else min(timeout, remaining)
