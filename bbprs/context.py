"""Cancellable operation context with an optional deadline.

A context is handed to every listing call. Adapters check it before
starting network work and turn the time left into the HTTP timeout, so a
caller can bound or abort a poll from another thread.
"""

import threading
import time

from bbprs.adapters.base import OperationCancelledError


class OperationContext:
    """Deadline plus cancellation flag, optionally chained to a parent."""

    def __init__(self, timeout: float | None = None, parent: "OperationContext | None" = None) -> None:
        if timeout is not None and timeout < 0:
            raise ValueError("timeout must be >= 0")
        self._parent = parent
        self._cancelled = threading.Event()
        deadline = time.monotonic() + timeout if timeout is not None else None
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self._deadline = deadline

    @classmethod
    def background(cls) -> "OperationContext":
        """Return a context that never expires unless cancelled."""
        return cls()

    def with_timeout(self, timeout: float) -> "OperationContext":
        """Derive a child context; the earlier deadline wins."""
        return OperationContext(timeout=timeout, parent=self)

    @property
    def deadline(self) -> float | None:
        """Monotonic deadline (``time.monotonic()`` scale) or None."""
        return self._deadline

    @property
    def cancelled(self) -> bool:
        if self._cancelled.is_set():
            return True
        return self._parent is not None and self._parent.cancelled

    def cancel(self) -> None:
        self._cancelled.set()

    def remaining(self) -> float | None:
        """Seconds until the deadline (never negative), or None without one."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def check(self) -> None:
        """Raise OperationCancelledError if cancelled or past the deadline."""
        if self.cancelled:
            raise OperationCancelledError("operation cancelled")
        if self.expired():
            raise OperationCancelledError("operation deadline exceeded")
