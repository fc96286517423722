"""Cancellation and deadline token passed into runner operations."""
import threading
import time
from typing import Optional

CANCELED = "context canceled"
DEADLINE_EXCEEDED = "context deadline exceeded"


class RunContext:
    """Cancellation token with an optional deadline.

    A context is fired either by calling ``cancel()`` (from any thread) or by
    its deadline passing. Operations check ``err()`` before starting a
    subprocess and keep polling it while the subprocess runs.

    Examples:
        ctx = RunContext(timeout=30)
        runner.mod_tidy(ctx=ctx)
    """

    def __init__(self, timeout: Optional[float] = None):
        self._deadline = time.monotonic() + timeout if timeout is not None else None
        self._cancelled = threading.Event()

    @classmethod
    def background(cls) -> "RunContext":
        """Context that never fires unless cancelled explicitly."""
        return cls()

    def cancel(self) -> None:
        self._cancelled.set()

    def remaining(self) -> Optional[float]:
        """Seconds until the deadline, or None without one."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def err(self) -> Optional[str]:
        """Reason the context fired, or None while it is still live."""
        if self._cancelled.is_set():
            return CANCELED
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return DEADLINE_EXCEEDED
        return None

    def done(self) -> bool:
        return self.err() is not None

    def wait(self, timeout: float) -> bool:
        """Block up to ``timeout`` seconds or until the context fires."""
        remaining = self.remaining()
        if remaining is not None:
            timeout = min(timeout, remaining)
        self._cancelled.wait(timeout)
        return self.done()
