"""Uniform render API over the registered template engines.

Usage::

    from consolidate import Engines

    engines = Engines()
    html = engines.mustache("views/user.mustache", {"user": {"name": "Tobi"}})
    html = engines.mustache.render("<p>{{user.name}}</p>", {"user": {"name": "Tobi"}})
    engines.clear_cache()

Every render call takes an options dict that doubles as the template locals.
It is used in place: ``filename`` is set to the template path and
``partials`` fragments are replaced by their text.
"""

import logging
import os
from typing import Any, Callable, Dict, List, Optional, Union

from .adapters.base import EngineAdapter
from .adapters.registry import EngineRegistry
from .cache import TemplateCache
from .config.models import ConsolidateConfig
from .exceptions import EngineNotInstalledError, UnknownEngineError
from .loader import PathLike, read_template, read_template_async
from .partials import resolve_partials, resolve_partials_async

logger = logging.getLogger(__name__)

Options = Optional[Dict[str, Any]]


class BoundEngine:
    """One engine bound to the cache and configuration of an :class:`Engines`.

    Calling the engine renders a file; :meth:`render` renders a string.
    """

    def __init__(self, name: str, adapter: EngineAdapter, owner: "Engines"):
        self.name = name
        self.adapter = adapter
        self._owner = owner

    @property
    def cache(self) -> TemplateCache:
        return self._owner.cache

    def __call__(self, path: PathLike, options: Options = None) -> str:
        return self.render_file(path, options)

    def render_file(self, path: PathLike, options: Options = None) -> str:
        """Render the template file at ``path``.

        Raises:
            ReadError: If the template or one of its partials cannot be read
            CompileError: If the library rejects the template
            RenderError: If the library fails while rendering
        """
        path = os.fspath(path)
        options = self._owner.prepare_options(self.name, options)
        options["filename"] = path

        resolve_partials(path, options, self.cache, options["encoding"])

        compiled = self._cached(options)
        if compiled is None:
            source = read_template(path, options, self.cache, options["encoding"])
            compiled = self._compile(source, options)
        return self.adapter.safe_render(compiled, options)

    def render(self, source: str, options: Options = None) -> str:
        """Render template ``source``.

        When ``options`` carries a ``filename`` and ``cache`` that already
        has a compiled template, that template is rendered and ``source`` is
        not compiled.
        """
        options = self._owner.prepare_options(self.name, options)
        compiled = self._cached(options)
        if compiled is None:
            compiled = self._compile(source, options)
        return self.adapter.safe_render(compiled, options)

    async def render_file_async(self, path: PathLike, options: Options = None) -> str:
        """Non-blocking :meth:`render_file`."""
        path = os.fspath(path)
        options = self._owner.prepare_options(self.name, options)
        options["filename"] = path

        await resolve_partials_async(path, options, self.cache, options["encoding"])

        compiled = self._cached(options)
        if compiled is None:
            source = await read_template_async(
                path, options, self.cache, options["encoding"]
            )
            compiled = await self._compile_async(source, options)
        return await self.adapter.safe_render_async(compiled, options)

    async def render_async(self, source: str, options: Options = None) -> str:
        """Non-blocking :meth:`render`."""
        options = self._owner.prepare_options(self.name, options)
        compiled = self._cached(options)
        if compiled is None:
            compiled = await self._compile_async(source, options)
        return await self.adapter.safe_render_async(compiled, options)

    def _cached(self, options: Dict[str, Any]) -> Any:
        if not self.adapter.compiles:
            return None
        return self.cache.get_compiled(options)

    def _compile(self, source: str, options: Dict[str, Any]) -> Any:
        logger.debug(f"Compiling {options.get('filename') or '<string>'} with {self.name}")
        compiled = self.adapter.safe_compile(source, options)
        if self.adapter.compiles:
            self.cache.set_compiled(options, compiled)
        return compiled

    async def _compile_async(self, source: str, options: Dict[str, Any]) -> Any:
        logger.debug(f"Compiling {options.get('filename') or '<string>'} with {self.name}")
        compiled = await self.adapter.safe_compile_async(source, options)
        if self.adapter.compiles:
            self.cache.set_compiled(options, compiled)
        return compiled

    def __repr__(self) -> str:
        return f"BoundEngine(name={self.name!r}, adapter={self.adapter!r})"


class Engines:
    """Entry point for rendering with any registered engine.

    Engines are reachable as items (``engines["jinja2"]``) or attributes
    (``engines.jinja2``), both returning a :class:`BoundEngine`. Item access
    raises the library errors as they are; attribute access turns an unknown
    or uninstalled engine into :class:`AttributeError` so that ``getattr``
    with a default and ``hasattr`` behave.

    Args:
        cache: Template cache, a new private cache when omitted
        registry: Engine registry, a new registry with the built-in engines
            when omitted
        config: Configuration supplying option defaults
    """

    def __init__(
        self,
        cache: Optional[TemplateCache] = None,
        registry: Optional[EngineRegistry] = None,
        config: Optional[ConsolidateConfig] = None,
    ):
        self.cache = cache if cache is not None else TemplateCache()
        self.registry = registry if registry is not None else EngineRegistry()
        self.config = config if config is not None else ConsolidateConfig()

        for extension, name in self.config.extensions.items():
            self.registry.map_extension(extension, name)

    def get(self, name: str) -> BoundEngine:
        """Get engine ``name`` bound to this instance.

        Raises:
            UnknownEngineError: If the engine is not registered or disabled
            EngineNotInstalledError: If its library cannot be imported
        """
        canonical = self.registry.resolve_name(name)
        if not self.config.engine_config(canonical).enabled:
            raise UnknownEngineError(f"Engine '{name}' is disabled by configuration")

        adapter = self.registry.get(canonical)
        adapter.load_library()
        return BoundEngine(canonical, adapter, self)

    def __getitem__(self, name: str) -> BoundEngine:
        return self.get(name)

    def __getattr__(self, name: str) -> BoundEngine:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self.get(name)
        except (UnknownEngineError, EngineNotInstalledError) as e:
            raise AttributeError(str(e)) from e

    def __contains__(self, name: str) -> bool:
        return self.registry.is_registered(name)

    def for_path(self, path: PathLike) -> BoundEngine:
        """Engine chosen by the extension of ``path``."""
        return self.get(self.registry.engine_for_path(path))

    def render(self, source: str, options: Options = None, engine: Optional[str] = None) -> str:
        """Render ``source`` with ``engine`` or the configured default engine."""
        return self.get(engine or self.config.default_engine).render(source, options)

    def render_file(
        self, path: PathLike, options: Options = None, engine: Optional[str] = None
    ) -> str:
        """Render the file at ``path``, inferring the engine from its extension."""
        bound = self.get(engine) if engine else self._engine_for_file(path)
        return bound.render_file(path, options)

    async def render_async(
        self, source: str, options: Options = None, engine: Optional[str] = None
    ) -> str:
        return await self.get(engine or self.config.default_engine).render_async(
            source, options
        )

    async def render_file_async(
        self, path: PathLike, options: Options = None, engine: Optional[str] = None
    ) -> str:
        bound = self.get(engine) if engine else self._engine_for_file(path)
        return await bound.render_file_async(path, options)

    def _engine_for_file(self, path: PathLike) -> BoundEngine:
        try:
            return self.for_path(path)
        except UnknownEngineError:
            logger.debug(
                f"No engine for {path}, using default engine {self.config.default_engine}"
            )
            return self.get(self.config.default_engine)

    def register(
        self,
        name: str,
        adapter: Union[EngineAdapter, type, Callable[..., Any]],
        **kwargs: Any,
    ) -> BoundEngine:
        """Register an engine and return it bound to this instance.

        Callback-shaped functions get the configured ``sync_timeout`` unless a
        ``timeout`` is given.
        """
        if kwargs.get("kind") == "callback":
            kwargs.setdefault("timeout", self.config.sync_timeout)
        self.registry.register(name, adapter, **kwargs)
        return self.get(name)

    def list_engines(self) -> List[str]:
        return self.registry.list_engines()

    def clear_cache(self) -> None:
        """Reset the compiled-template cache."""
        self.cache.clear()

    def prepare_options(self, name: str, options: Options) -> Dict[str, Any]:
        """Fill configuration defaults into ``options`` without overriding it."""
        options = {} if options is None else options

        if self.config.cache:
            options.setdefault("cache", True)
        options.setdefault("encoding", self.config.encoding)
        if self.config.views is not None and not EngineAdapter.views_dir(options):
            options["views"] = str(self.config.views)
        for key, value in self.config.engine_config(name).options.items():
            options.setdefault(key, value)

        return options
