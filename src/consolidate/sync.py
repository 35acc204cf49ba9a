"""Turning callback- and coroutine-shaped render calls into return values.

Only a few libraries need this: most wrapped engines render synchronously and
are called directly. For the rest, :func:`run_sync` handles functions that
report through a ``callback(error, result)`` argument and
:func:`resolve_awaitable` handles functions returning an awaitable.

Neither helper spins. :func:`run_sync` returns at once when the callback fired
before the operation returned, which is the common case for libraries whose
"asynchronous" API completes inline. Otherwise it blocks on an event until
another thread reports completion. A completion that needs the calling thread
to yield (a timer or an event loop owned by this thread) can never arrive, so
such libraries must be used through the async API instead.
"""

import asyncio
import inspect
import logging
import threading
from typing import Any, Awaitable, Callable, Dict, Optional

from .exceptions import SyncAdapterError

logger = logging.getLogger(__name__)


def run_sync(
    operation: Callable[..., Any],
    *args: Any,
    timeout: Optional[float] = None,
    **kwargs: Any,
) -> Any:
    """Call ``operation(*args, callback, **kwargs)`` and return what it reports.

    Args:
        operation: Callback-shaped function, the callback is appended to ``args``
        timeout: Seconds to wait for a completion that did not happen inline,
            None waits forever

    Returns:
        The result passed to the callback

    Raises:
        SyncAdapterError: If the operation did not complete in time, or
            reported an error that is not an exception
        Exception: The exception reported through the callback
    """
    done = threading.Event()
    outcome: Dict[str, Any] = {"error": None, "result": None}

    def callback(error: Any = None, result: Any = None) -> None:
        if done.is_set():
            logger.warning("Completion callback called more than once, ignoring")
            return
        outcome["error"] = error
        outcome["result"] = result
        done.set()

    operation(*args, callback, **kwargs)

    if not done.is_set():
        logger.debug(f"{_describe(operation)} did not complete inline, waiting")
        if not done.wait(timeout):
            raise SyncAdapterError(
                f"{_describe(operation)} did not complete within {timeout} seconds"
            )

    error = outcome["error"]
    if error is not None:
        if isinstance(error, Exception):
            raise error
        raise SyncAdapterError(f"{_describe(operation)} failed: {error}")
    return outcome["result"]


def resolve_awaitable(value: Any) -> Any:
    """Return ``value``, running it to completion first if it is awaitable.

    Raises:
        SyncAdapterError: If called from a thread that is running an event
            loop, where blocking would deadlock
    """
    if not inspect.isawaitable(value):
        return value

    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(_await(value))

    if inspect.iscoroutine(value):
        value.close()
    raise SyncAdapterError(
        "Cannot wait for an asynchronous render inside a running event loop. "
        "Suggestion: use the render_async() / render_file_async() API"
    )


async def _await(value: Awaitable[Any]) -> Any:
    return await value


def _describe(operation: Callable[..., Any]) -> str:
    return getattr(operation, "__qualname__", None) or repr(operation)
