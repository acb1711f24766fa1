"""
Cancellation context shared by connect, run and transfer calls
"""
import threading
import time
from typing import Optional


class ContextCanceled(Exception):
    """Cause recorded when a context is cancelled explicitly."""

    def __init__(self, msg: str = "context canceled"):
        super().__init__(msg)


class DeadlineExceeded(ContextCanceled):
    """Cause recorded when a context's deadline passes."""

    def __init__(self, msg: str = "context deadline exceeded"):
        super().__init__(msg)


class Context:
    """
    A cancellation token with an optional deadline.

    One context is threaded through a whole call chain. Once done it stays
    done, and err() keeps returning the first cause.
    """

    def __init__(self, timeout: Optional[float] = None):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._cause: Optional[ContextCanceled] = None
        self._deadline: Optional[float] = None
        if timeout is not None:
            self._deadline = time.monotonic() + timeout

    @classmethod
    def with_timeout(cls, seconds: float) -> "Context":
        return cls(timeout=seconds)

    def cancel(self):
        self._finish(ContextCanceled())

    def _finish(self, cause: ContextCanceled):
        with self._lock:
            if self._cause is None:
                self._cause = cause
            self._event.set()

    def err(self) -> Optional[ContextCanceled]:
        """None while live, otherwise the cancellation cause."""
        if not self._event.is_set() and self._deadline is not None \
                and time.monotonic() >= self._deadline:
            self._finish(DeadlineExceeded())
        return self._cause

    def done(self) -> bool:
        return self.err() is not None

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None when there is none."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the context is done or *timeout* elapses; return done()."""
        end = None if timeout is None else time.monotonic() + timeout
        while not self.done():
            now = time.monotonic()
            if end is not None and now >= end:
                return False
            limits = [t - now for t in (end, self._deadline) if t is not None]
            self._event.wait(min(limits) if limits else None)
        return True
