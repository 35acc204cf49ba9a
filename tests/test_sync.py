"""Tests for the synchronization helpers."""

import threading

import pytest

from consolidate.exceptions import SyncAdapterError
from consolidate.sync import resolve_awaitable, run_sync


class TestRunSync:
    """Test run_sync."""

    def test_inline_completion(self):
        """Test a callback fired before return yields its result."""

        def operation(source, callback):
            callback(None, source.upper())

        assert run_sync(operation, "abc") == "ABC"

    def test_keyword_arguments_forwarded(self):
        def operation(source, callback, suffix=""):
            callback(None, source + suffix)

        assert run_sync(operation, "abc", suffix="!") == "abc!"

    def test_inline_error_reraised(self):
        """Test an exception reported through the callback is raised as-is."""
        error = ValueError("boom")

        def operation(callback):
            callback(error)

        with pytest.raises(ValueError) as exc_info:
            run_sync(operation)
        assert exc_info.value is error

    def test_non_exception_error(self):
        """Test an error value that is not an exception."""

        def operation(callback):
            callback("went wrong")

        with pytest.raises(SyncAdapterError, match="went wrong"):
            run_sync(operation)

    def test_completion_from_another_thread(self):
        """Test the caller waits for a completion from a worker thread."""

        def operation(callback):
            threading.Timer(0.05, callback, args=(None, "late")).start()

        assert run_sync(operation, timeout=5) == "late"

    def test_timeout(self):
        """Test a completion that never arrives times out."""

        def operation(callback):
            pass

        with pytest.raises(SyncAdapterError, match="did not complete"):
            run_sync(operation, timeout=0.05)

    def test_second_callback_ignored(self, caplog):
        """Test only the first completion counts."""

        def operation(callback):
            callback(None, "first")
            callback(None, "second")

        assert run_sync(operation) == "first"
        assert "more than once" in caplog.text


class TestResolveAwaitable:
    """Test resolve_awaitable."""

    def test_plain_value_returned(self):
        assert resolve_awaitable("text") == "text"
        assert resolve_awaitable(None) is None

    def test_coroutine_run_without_loop(self):
        async def render():
            return "done"

        assert resolve_awaitable(render()) == "done"

    def test_coroutine_error_propagates(self):
        async def render():
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            resolve_awaitable(render())

    @pytest.mark.asyncio
    async def test_inside_running_loop(self):
        """Test blocking inside an event loop is refused."""

        async def render():
            return "done"

        with pytest.raises(SyncAdapterError, match="render_async"):
            resolve_awaitable(render())
