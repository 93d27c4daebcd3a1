"""Cancellation and deadline context for executor calls.

A Context travels with every executor call and carries three things:
an optional deadline, a cancellation signal, and a small set of values.
Contexts form a tree: a child inherits its parent's deadline and values and
is cancelled when its parent is cancelled.

Example:
    ctx = Context.background().with_timeout(30)
    found, devices = executor.wait_for_device(ctx, opts)

    # From another thread:
    ctx.cancel()
"""

from __future__ import annotations

import threading
import time
import weakref
from collections.abc import Mapping
from typing import Any

from lsx.exceptions import (
    ContextCancelledError,
    ContextDeadlineExceededError,
    ContextError,
)


class Context:
    """Thread-safe cancellation, deadline and value carrier.

    Deadlines are absolute time.monotonic() values.
    """

    def __init__(
        self,
        parent: Context | None = None,
        *,
        deadline: float | None = None,
        values: Mapping[str, Any] | None = None,
    ) -> None:
        """Initialize the context.

        Args:
            parent: Parent context, or None for a root context.
            deadline: Absolute monotonic deadline. The effective deadline is
                the earlier of this and the parent's.
            values: Values visible through value() on this context and its
                children.
        """
        self._parent = parent
        self._values: dict[str, Any] = dict(values or {})
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._children: weakref.WeakSet[Context] = weakref.WeakSet()
        self._cause: ContextError | None = None

        parent_deadline = parent.deadline if parent is not None else None
        if deadline is None:
            self._deadline = parent_deadline
        elif parent_deadline is None:
            self._deadline = deadline
        else:
            self._deadline = min(deadline, parent_deadline)

        if parent is not None:
            parent._adopt(self)

    @classmethod
    def background(cls) -> Context:
        """Return a new root context that is never cancelled on its own."""
        return cls()

    def with_cancel(self) -> Context:
        """Return a child context that can be cancelled independently."""
        return Context(self)

    def with_timeout(self, seconds: float) -> Context:
        """Return a child context whose deadline is ``seconds`` from now."""
        return Context(self, deadline=time.monotonic() + seconds)

    def with_deadline(self, deadline: float) -> Context:
        """Return a child context with an absolute monotonic deadline."""
        return Context(self, deadline=deadline)

    def with_value(self, key: str, value: Any) -> Context:
        """Return a child context carrying an additional value."""
        return Context(self, values={key: value})

    def value(self, key: str, default: Any = None) -> Any:
        """Look up a value on this context or its ancestors."""
        ctx: Context | None = self
        while ctx is not None:
            if key in ctx._values:
                return ctx._values[key]
            ctx = ctx._parent
        return default

    @property
    def deadline(self) -> float | None:
        """Effective monotonic deadline, or None if there is none."""
        return self._deadline

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None if there is none."""
        if self._deadline is None:
            return None
        return self._deadline - time.monotonic()

    def cancel(self) -> None:
        """Cancel this context and every context derived from it."""
        self._cancel(ContextCancelledError("context cancelled"))

    @property
    def done(self) -> bool:
        """True once the context is cancelled or its deadline has passed."""
        if self._event.is_set():
            return True
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def err(self) -> ContextError | None:
        """Return the reason the context is done, or None if it is not."""
        if self._event.is_set():
            return self._cause
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            return ContextDeadlineExceededError("context deadline exceeded")
        return None

    def raise_if_done(self) -> None:
        """Raise the context error if the context is done.

        Raises:
            ContextCancelledError: If the context was cancelled.
            ContextDeadlineExceededError: If the deadline passed.
        """
        error = self.err()
        if error is not None:
            raise error

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the context is done or ``timeout`` seconds elapse.

        The wait never extends past the context deadline.

        Args:
            timeout: Maximum seconds to block, or None to block until done.

        Returns:
            True if the context is done when the wait ends.
        """
        limit = timeout
        remaining = self.remaining()
        if remaining is not None:
            limit = remaining if limit is None else min(limit, remaining)
        if limit is not None and limit <= 0:
            return self.done
        self._event.wait(limit)
        return self.done

    def _adopt(self, child: Context) -> None:
        with self._lock:
            cause = self._cause
            if cause is None:
                self._children.add(child)
        if cause is not None:
            child._cancel(cause)

    def _cancel(self, cause: ContextError) -> None:
        with self._lock:
            if self._cause is not None:
                return
            self._cause = cause
            children = list(self._children)
            self._children.clear()
        self._event.set()
        for child in children:
            child._cancel(cause)
