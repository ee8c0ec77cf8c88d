"""Cancellation tokens for client calls.

A Context is checked once before a call does any work, and its remaining
time is handed to the HTTP executor as the request timeout.

Example:
    ctx = Context.background().with_timeout(5.0)
    client.execute(req, result, context=ctx)

    # cancel from another thread
    ctx = Context.background().with_cancel()
    ctx.cancel()
"""

import threading
import time

from .errors import CancellationError, ContextCancelled, DeadlineExceeded


class Context:
    """A cancellation signal with an optional deadline.

    Children inherit their parent's cancellation and never outlive its
    deadline.

    Only the deadline reaches the HTTP executor, as its timeout. Calling
    cancel() from another thread does not interrupt a call that is already
    waiting on the network; it is seen the next time the context is checked.
    """

    def __init__(self, parent: "Context | None" = None, deadline: float | None = None):
        self._parent = parent
        self._cancelled = threading.Event()
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self._deadline = deadline

    @classmethod
    def background(cls) -> "Context":
        """Return an empty context that is never done."""
        return cls()

    @property
    def deadline(self) -> float | None:
        """Deadline as a ``time.monotonic()`` value, or None."""
        return self._deadline

    def with_cancel(self) -> "Context":
        return Context(parent=self)

    def with_timeout(self, seconds: float) -> "Context":
        return Context(parent=self, deadline=time.monotonic() + seconds)

    def cancel(self):
        self._cancelled.set()

    def remaining(self) -> float | None:
        """Seconds left before the deadline (never negative), or None."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def err(self) -> CancellationError | None:
        """Return the reason this context is done, or None if it is not."""
        ctx: Context | None = self
        while ctx is not None:
            if ctx._cancelled.is_set():
                return ContextCancelled()
            ctx = ctx._parent
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return DeadlineExceeded()
        return None

    def done(self) -> bool:
        return self.err() is not None
