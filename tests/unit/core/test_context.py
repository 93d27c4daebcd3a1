"""Tests for the cancellation/deadline Context."""

import threading
import time

import pytest

from lsx.core.context import Context
from lsx.exceptions import ContextCancelledError, ContextDeadlineExceededError


class TestContextCancel:
    """Tests for cancellation."""

    def test_background_is_not_done(self) -> None:
        ctx = Context.background()
        assert not ctx.done
        assert ctx.err() is None
        assert ctx.deadline is None

    def test_cancel_marks_done(self) -> None:
        ctx = Context.background().with_cancel()
        ctx.cancel()
        assert ctx.done
        assert isinstance(ctx.err(), ContextCancelledError)

    def test_raise_if_done(self) -> None:
        ctx = Context.background().with_cancel()
        ctx.raise_if_done()
        ctx.cancel()
        with pytest.raises(ContextCancelledError):
            ctx.raise_if_done()

    def test_cancel_propagates_to_children(self) -> None:
        parent = Context.background().with_cancel()
        child = parent.with_cancel()
        grandchild = child.with_timeout(60)
        parent.cancel()
        assert child.done
        assert grandchild.done

    def test_child_cancel_does_not_affect_parent(self) -> None:
        parent = Context.background().with_cancel()
        child = parent.with_cancel()
        child.cancel()
        assert child.done
        assert not parent.done

    def test_child_of_cancelled_parent_starts_cancelled(self) -> None:
        parent = Context.background().with_cancel()
        parent.cancel()
        child = parent.with_cancel()
        assert isinstance(child.err(), ContextCancelledError)

    def test_cancel_twice_is_harmless(self) -> None:
        ctx = Context.background().with_cancel()
        ctx.cancel()
        first = ctx.err()
        ctx.cancel()
        assert ctx.err() is first


class TestContextDeadline:
    """Tests for deadlines."""

    def test_with_timeout_sets_deadline(self) -> None:
        before = time.monotonic()
        ctx = Context.background().with_timeout(10)
        assert ctx.deadline is not None
        assert before + 10 <= ctx.deadline <= time.monotonic() + 10

    def test_deadline_is_earliest_of_parent_and_child(self) -> None:
        parent = Context.background().with_timeout(1)
        child = parent.with_timeout(60)
        assert child.deadline == parent.deadline

        tighter = parent.with_timeout(0.5)
        assert tighter.deadline < parent.deadline

    def test_expired_deadline(self) -> None:
        ctx = Context.background().with_timeout(0)
        assert ctx.done
        assert isinstance(ctx.err(), ContextDeadlineExceededError)

    def test_remaining_without_deadline(self) -> None:
        assert Context.background().remaining() is None


class TestContextWait:
    """Tests for Context.wait."""

    def test_wait_times_out_when_not_done(self) -> None:
        ctx = Context.background().with_cancel()
        start = time.monotonic()
        assert ctx.wait(0.05) is False
        assert time.monotonic() - start >= 0.04

    def test_wait_returns_on_cancel(self) -> None:
        ctx = Context.background().with_cancel()
        timer = threading.Timer(0.05, ctx.cancel)
        timer.start()
        start = time.monotonic()
        try:
            assert ctx.wait(5) is True
        finally:
            timer.cancel()
        assert time.monotonic() - start < 2

    def test_wait_bounded_by_deadline(self) -> None:
        ctx = Context.background().with_timeout(0.05)
        start = time.monotonic()
        assert ctx.wait(5) is True
        assert time.monotonic() - start < 2


class TestContextValues:
    """Tests for context values."""

    def test_value_lookup_through_ancestors(self) -> None:
        root = Context.background().with_value("request_id", "r-1")
        child = root.with_cancel().with_value("other", 2)
        assert child.value("request_id") == "r-1"
        assert child.value("other") == 2
        assert root.value("other") is None

    def test_child_value_shadows_parent(self) -> None:
        root = Context.background().with_value("key", "parent")
        child = root.with_value("key", "child")
        assert child.value("key") == "child"
        assert root.value("key") == "parent"

    def test_value_default(self) -> None:
        assert Context.background().value("missing", 42) == 42
