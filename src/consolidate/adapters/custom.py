"""Adapters wrapping user-supplied render functions.

Three calling conventions are supported, each a separate adapter type:

* :class:`FunctionAdapter` for ``render(source, options) -> str``
* :class:`CallbackAdapter` for ``render(source, options, callback)`` where the
  callback receives ``(error, result)``
* :class:`CoroutineAdapter` for ``async render(source, options) -> str``
"""

import inspect
from typing import Any, Callable, Dict, Iterable, Optional

from ..sync import resolve_awaitable, run_sync
from .base import EngineAdapter


class FunctionAdapter(EngineAdapter):
    """Adapter for a plain synchronous render function."""

    compiles = False

    def __init__(
        self,
        name: str,
        render: Callable[..., Any],
        extensions: Iterable[str] = (),
        config: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(config)
        self.name = name
        self.module = getattr(render, "__module__", None) or name
        self.extensions = tuple(extensions)
        self._render = render

    def load_library(self) -> Any:
        """The render function is already imported; return its module."""
        return inspect.getmodule(self._render)

    def is_installed(self) -> bool:
        return True

    def compile(self, source: str, options: Dict[str, Any]) -> Any:
        return source

    def render_compiled(self, compiled: Any, options: Dict[str, Any]) -> str:
        return self._render(compiled, options)


class CallbackAdapter(FunctionAdapter):
    """Adapter for a callback-shaped render function.

    The synchronous path goes through :func:`~consolidate.sync.run_sync`, which
    only works when the callback fires inline or from another thread.
    """

    def __init__(
        self,
        name: str,
        render: Callable[..., Any],
        extensions: Iterable[str] = (),
        timeout: Optional[float] = None,
        config: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(name, render, extensions, config)
        self.timeout = timeout

    def render_compiled(self, compiled: Any, options: Dict[str, Any]) -> str:
        return run_sync(self._render, compiled, options, timeout=self.timeout)


class CoroutineAdapter(FunctionAdapter):
    """Adapter for an ``async`` render function."""

    native_async = True

    def __init__(
        self,
        name: str,
        render: Callable[..., Any],
        extensions: Iterable[str] = (),
        config: Optional[Dict[str, Any]] = None,
    ):
        if not inspect.iscoroutinefunction(render):
            raise TypeError(f"{render!r} is not an async function")
        super().__init__(name, render, extensions, config)

    def render_compiled(self, compiled: Any, options: Dict[str, Any]) -> str:
        return resolve_awaitable(self._render(compiled, options))

    async def render_compiled_async(
        self, compiled: Any, options: Dict[str, Any]
    ) -> str:
        return await self._render(compiled, options)


ADAPTER_KINDS = {
    "sync": FunctionAdapter,
    "callback": CallbackAdapter,
    "coroutine": CoroutineAdapter,
}


def adapter_from_function(
    name: str,
    render: Callable[..., Any],
    kind: Optional[str] = None,
    extensions: Iterable[str] = (),
    **kwargs: Any,
) -> FunctionAdapter:
    """Wrap ``render`` in the adapter matching its calling convention.

    ``kind`` defaults to ``"coroutine"`` for async functions and ``"sync"``
    otherwise; callback-shaped functions must say ``kind="callback"``.
    """
    if kind is None:
        kind = "coroutine" if inspect.iscoroutinefunction(render) else "sync"
    if kind not in ADAPTER_KINDS:
        available = ", ".join(ADAPTER_KINDS.keys())
        raise ValueError(f"Unknown adapter kind '{kind}'. Available kinds: {available}")
    return ADAPTER_KINDS[kind](name, render, extensions=extensions, **kwargs)
