# Copyright (c) IBM Corporation.
# Licensed under the MIT license.

"""
Deadlines and cancellation for SDK calls.

A :class:`Deadline` bounds the total time a call may take, including retries
and backoff, and can be cancelled from another thread. Pass one to any
operation through its ``deadline`` keyword argument.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, List, Optional

from ._error_codes import TRANSPORT_CANCELLED, TRANSPORT_DEADLINE_EXCEEDED
from .errors import DeadlineExceededError


class Deadline:
    """
    Absolute expiry time plus a cancellation flag.

    :param timeout: Seconds from now until the deadline expires. ``None`` creates
        a deadline that never expires but can still be cancelled.
    :type timeout: :class:`float` | None

    Example::

        deadline = Deadline(timeout=30)
        job = client.sql_jobs.wait(job_id, deadline=deadline)

        # From another thread:
        deadline.cancel()
    """

    def __init__(self, timeout: Optional[float] = None) -> None:
        if timeout is not None and timeout < 0:
            raise ValueError("timeout must be >= 0")
        self._expires_at: Optional[float] = time.monotonic() + timeout if timeout is not None else None
        self._cancelled = threading.Event()
        self._callbacks: List[Callable[[], None]] = []
        self._lock = threading.Lock()

    @classmethod
    def after(cls, seconds: float) -> "Deadline":
        """Create a deadline expiring ``seconds`` from now."""
        return cls(timeout=seconds)

    def cancel(self) -> None:
        """Cancel the call; any in-flight wait or request wakes up and fails."""
        with self._lock:
            self._cancelled.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def on_cancel(self, callback: Callable[[], None]) -> Callable[[], None]:
        """
        Register ``callback`` to run once when the deadline is cancelled.

        Runs it immediately if already cancelled. Returns a function that
        unregisters the callback.
        """
        with self._lock:
            if not self._cancelled.is_set():
                self._callbacks.append(callback)
                return lambda: self._discard(callback)
        callback()
        return lambda: None

    def _discard(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self._expires_at is not None and time.monotonic() >= self._expires_at

    def remaining(self) -> Optional[float]:
        """Seconds left before expiry, ``0.0`` once expired, ``None`` if unbounded."""
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())

    def check(self) -> None:
        """Raise :class:`DeadlineExceededError` if cancelled or expired."""
        if self.cancelled:
            raise DeadlineExceededError("context cancelled", subcode=TRANSPORT_CANCELLED)
        if self.expired:
            raise DeadlineExceededError("context deadline exceeded", subcode=TRANSPORT_DEADLINE_EXCEEDED)

    def cap_timeout(self, timeout: Optional[float]) -> Optional[float]:
        """Return ``timeout`` limited to the remaining time."""
        remaining = self.remaining()
        if remaining is None:
            return timeout
        if timeout is None:
            return remaining
        return min(timeout, remaining)

    def sleep(self, seconds: float) -> None:
        """
        Sleep for ``seconds`` unless the deadline fires first.

        :raises DeadlineExceededError: If the deadline expires or is cancelled
            before the sleep completes.
        """
        self.check()
        remaining = self.remaining()
        if remaining is not None and remaining < seconds:
            self._cancelled.wait(remaining)
            self.check()
            # Expired by the time the wait returned
            raise DeadlineExceededError("context deadline exceeded", subcode=TRANSPORT_DEADLINE_EXCEEDED)
        if self._cancelled.wait(seconds):
            self.check()


__all__ = ["Deadline"]
