"""Base class for template engine adapters."""

import asyncio
import importlib
import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Mapping
from types import ModuleType
from typing import Any, Dict, Optional, Tuple

from ..exceptions import (
    CompileError,
    ConsolidateError,
    EngineNotInstalledError,
    RenderError,
)
from ..loader import read_file

logger = logging.getLogger(__name__)


class EngineAdapter(ABC):
    """Translate consolidate's calling convention to one template library.

    Subclasses set the class attributes and implement :meth:`compile` and
    :meth:`render_compiled`. The library is imported on first use, so
    registering an adapter never requires the library to be installed.

    Attributes:
        name: Engine name used for lookup
        module: Import name of the wrapped library
        fallback_modules: Import names tried in order when ``module`` is missing
        extensions: File extensions (with dot) rendered by this engine
        compiles: Whether :meth:`compile` produces a handle worth caching
        native_async: Whether :meth:`render_compiled_async` uses the library's
            own asynchronous API
    """

    name: str = ""
    module: str = ""
    fallback_modules: Tuple[str, ...] = ()
    extensions: Tuple[str, ...] = ()
    compiles: bool = True
    native_async: bool = False

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self._library: Optional[ModuleType] = None

    def load_library(self) -> ModuleType:
        """Import the wrapped library, once.

        Raises:
            EngineNotInstalledError: If neither ``module`` nor any fallback
                can be imported
        """
        if self._library is None:
            self._library = self._import_library()
        return self._library

    def _import_library(self) -> ModuleType:
        modules = (self.module,) + tuple(self.fallback_modules)
        for module_name in modules:
            try:
                library = importlib.import_module(module_name)
            except ImportError as e:
                logger.debug(f"Could not import {module_name} for {self.name}: {e}")
                continue
            logger.debug(f"Loaded {module_name} for engine {self.name}")
            return library
        raise EngineNotInstalledError(self.name, modules)

    def is_installed(self) -> bool:
        """Check whether the wrapped library can be imported."""
        try:
            self.load_library()
            return True
        except EngineNotInstalledError:
            return False

    @abstractmethod
    def compile(self, source: str, options: Dict[str, Any]) -> Any:
        """Turn template source into a handle for :meth:`render_compiled`.

        Engines without a separate compile step return ``source``.
        """
        ...

    @abstractmethod
    def render_compiled(self, compiled: Any, options: Dict[str, Any]) -> str:
        """Render a handle returned by :meth:`compile`."""
        ...

    async def render_compiled_async(
        self, compiled: Any, options: Dict[str, Any]
    ) -> str:
        """Render without blocking the event loop.

        The default runs :meth:`render_compiled` in a worker thread. Engines
        with an asynchronous API override this.
        """
        return await asyncio.to_thread(self.render_compiled, compiled, options)

    async def compile_async(self, source: str, options: Dict[str, Any]) -> Any:
        """Compile for the asynchronous render path."""
        return self.compile(source, options)

    def safe_compile(self, source: str, options: Dict[str, Any]) -> Any:
        """:meth:`compile` with library errors wrapped in :class:`CompileError`."""
        try:
            return self.compile(source, options)
        except ConsolidateError:
            raise
        except Exception as e:
            raise CompileError(
                f"{self.name} failed to compile {_identity(options)}: {e}",
                self.name,
                e,
            ) from e

    async def safe_compile_async(self, source: str, options: Dict[str, Any]) -> Any:
        try:
            return await self.compile_async(source, options)
        except ConsolidateError:
            raise
        except Exception as e:
            raise CompileError(
                f"{self.name} failed to compile {_identity(options)}: {e}",
                self.name,
                e,
            ) from e

    def safe_render(self, compiled: Any, options: Dict[str, Any]) -> str:
        """:meth:`render_compiled` with library errors wrapped in :class:`RenderError`."""
        try:
            return self.render_compiled(compiled, options)
        except ConsolidateError:
            raise
        except Exception as e:
            raise RenderError(
                f"{self.name} failed to render {_identity(options)}: {e}",
                self.name,
                e,
            ) from e

    async def safe_render_async(self, compiled: Any, options: Dict[str, Any]) -> str:
        try:
            return await self.render_compiled_async(compiled, options)
        except ConsolidateError:
            raise
        except Exception as e:
            raise RenderError(
                f"{self.name} failed to render {_identity(options)}: {e}",
                self.name,
                e,
            ) from e

    @staticmethod
    def views_dir(options: Dict[str, Any]) -> Optional[str]:
        """Base directory for bare partial references, if configured."""
        views = options.get("views")
        if not views:
            settings = options.get("settings")
            if isinstance(settings, Mapping):
                views = settings.get("views")
        return str(views) if views else None

    @classmethod
    def read_view(cls, options: Dict[str, Any], name: str) -> str:
        """Read ``name`` from the views directory in the configured encoding."""
        return read_file(
            os.path.join(cls.views_dir(options), name),
            options.get("encoding") or "utf-8",
        )

    @staticmethod
    def partials(options: Dict[str, Any]) -> Dict[str, str]:
        return dict(options.get("partials") or {})

    @staticmethod
    def helpers(options: Dict[str, Any]) -> Dict[str, Any]:
        return dict(options.get("helpers") or {})

    @staticmethod
    def context(options: Dict[str, Any]) -> Dict[str, Any]:
        """Template locals: ``options["data"]`` when it is a mapping, else ``options``."""
        data = options.get("data")
        if isinstance(data, Mapping):
            return dict(data)
        return dict(options)

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.name})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, module={self.module!r})"


def _identity(options: Dict[str, Any]) -> str:
    return options.get("filename") or "<string>"
