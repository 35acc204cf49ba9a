"""Registry of template engine adapters."""

import importlib
import logging
import os
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from ..exceptions import UnknownEngineError
from .base import EngineAdapter
from .custom import adapter_from_function

logger = logging.getLogger(__name__)

# Engine name -> 'module:ClassName', loaded on first lookup
BUILTIN_ENGINES: Dict[str, str] = {
    "jinja2": "consolidate.adapters.jinja2:Jinja2Adapter",
    "mako": "consolidate.adapters.mako:MakoAdapter",
    "mustache": "consolidate.adapters.mustache:MustacheAdapter",
    "pystache": "consolidate.adapters.pystache:PystacheAdapter",
    "handlebars": "consolidate.adapters.handlebars:HandlebarsAdapter",
    "liquid": "consolidate.adapters.liquid:LiquidAdapter",
    "tornado": "consolidate.adapters.tornado:TornadoAdapter",
    "velocity": "consolidate.adapters.velocity:VelocityAdapter",
    "chameleon": "consolidate.adapters.chameleon:ChameleonAdapter",
    "markdown": "consolidate.adapters.markdown:MarkdownAdapter",
    "string": "consolidate.adapters.stdlib:StringTemplateAdapter",
    "format": "consolidate.adapters.stdlib:FormatAdapter",
}

BUILTIN_ALIASES: Dict[str, str] = {
    "jinja": "jinja2",
    "chevron": "mustache",
    "hbs": "handlebars",
    "pybars": "handlebars",
    "airspeed": "velocity",
    "pt": "chameleon",
    "md": "markdown",
}


class EngineRegistry:
    """Registry mapping engine names, aliases and extensions to adapters."""

    def __init__(self, builtins: bool = True):
        """Initialize engine registry.

        Args:
            builtins: Register the built-in engines
        """
        self._engines: Dict[str, Union[str, EngineAdapter]] = {}
        self._aliases: Dict[str, str] = {}
        self._extensions: Dict[str, str] = {}
        if builtins:
            self._register_builtin_engines()

    def _register_builtin_engines(self) -> None:
        for name, import_path in BUILTIN_ENGINES.items():
            self._register_lazy(name, import_path)
        self._aliases.update(BUILTIN_ALIASES)

    def _register_lazy(self, name: str, import_path: str) -> None:
        """Register adapter with lazy loading.

        Args:
            name: Engine name
            import_path: Import path in format 'module:ClassName'
        """
        self._engines[name] = import_path

    def register(
        self,
        name: str,
        adapter: Union[EngineAdapter, type, Callable[..., Any]],
        kind: Optional[str] = None,
        aliases: Iterable[str] = (),
        extensions: Optional[Iterable[str]] = None,
        **kwargs: Any,
    ) -> EngineAdapter:
        """Register an engine.

        Args:
            name: Engine name
            adapter: Adapter instance, adapter class, or a render function
                (wrapped according to ``kind``, see
                :func:`~consolidate.adapters.custom.adapter_from_function`)
            kind: Calling convention of a render function
            aliases: Extra names for the engine
            extensions: File extensions rendered by this engine

        Returns:
            The registered adapter
        """
        if isinstance(adapter, type):
            if not issubclass(adapter, EngineAdapter):
                raise TypeError(f"{adapter} must inherit from EngineAdapter")
            adapter = adapter(**kwargs)
        elif not isinstance(adapter, EngineAdapter):
            if not callable(adapter):
                raise TypeError(f"{adapter!r} is neither an adapter nor callable")
            adapter = adapter_from_function(
                name, adapter, kind=kind, extensions=extensions or (), **kwargs
            )

        if not adapter.name:
            adapter.name = name

        self._engines[name] = adapter
        self._aliases.pop(name, None)
        for alias in aliases:
            self._aliases[alias] = name
        for extension in extensions or ():
            self.map_extension(extension, name)

        logger.info(f"Registered engine: {name}")
        return adapter

    def unregister(self, name: str) -> bool:
        """Remove an engine and everything pointing at it."""
        if name not in self._engines:
            return False
        del self._engines[name]
        self._aliases = {a: n for a, n in self._aliases.items() if n != name}
        self._extensions = {e: n for e, n in self._extensions.items() if n != name}
        return True

    def resolve_name(self, name: str) -> str:
        """Canonical engine name for ``name`` or one of its aliases."""
        return self._aliases.get(name, name)

    def get(self, name: str) -> EngineAdapter:
        """Get the adapter registered under ``name``.

        Raises:
            UnknownEngineError: If no engine or alias matches
        """
        canonical = self.resolve_name(name)
        adapter = self._engines.get(canonical)

        if adapter is None:
            raise UnknownEngineError(
                f"Unknown engine '{name}'. Available engines: "
                f"{', '.join(self.list_engines())}"
            )

        # Handle lazy loading
        if isinstance(adapter, str):
            adapter = self._load_adapter(canonical, adapter)
            self._engines[canonical] = adapter

        return adapter

    def _load_adapter(self, name: str, import_path: str) -> EngineAdapter:
        module_path, class_name = import_path.split(":")
        try:
            module = importlib.import_module(module_path)
            adapter_class = getattr(module, class_name)
        except (ImportError, AttributeError) as e:
            raise UnknownEngineError(
                f"Failed to load adapter for engine '{name}' from {import_path}: {e}"
            ) from e

        if not isinstance(adapter_class, type) or not issubclass(
            adapter_class, EngineAdapter
        ):
            raise TypeError(f"{adapter_class} must inherit from EngineAdapter")

        logger.debug(f"Loaded adapter {import_path}")
        return adapter_class()

    def list_engines(self) -> List[str]:
        """List registered engine names."""
        return list(self._engines.keys())

    def list_aliases(self) -> Dict[str, str]:
        return dict(self._aliases)

    def is_registered(self, name: str) -> bool:
        return self.resolve_name(name) in self._engines

    def is_installed(self, name: str) -> bool:
        """Check whether the library behind ``name`` can be imported."""
        return self.get(name).is_installed()

    def map_extension(self, extension: str, name: str) -> None:
        """Route files with ``extension`` to engine ``name``."""
        if not extension.startswith("."):
            extension = "." + extension
        self._extensions[extension.lower()] = self.resolve_name(name)

    def engine_for_path(self, path: Union[str, "os.PathLike[str]"]) -> str:
        """Name of the engine that renders ``path``, chosen by its extension.

        Explicit mappings from :meth:`map_extension` win over the extensions
        adapters declare. Among adapters, registration order decides.

        Raises:
            UnknownEngineError: If no engine handles the extension
        """
        extension = os.path.splitext(os.fspath(path))[1].lower()
        if not extension:
            raise UnknownEngineError(f"Cannot infer engine for {path}: no extension")

        if extension in self._extensions:
            return self._extensions[extension]

        for name in self.list_engines():
            if extension in self.get(name).extensions:
                return name

        raise UnknownEngineError(f"No engine registered for '{extension}' files")


# Global registry instance
_registry = EngineRegistry()


def get_registry() -> EngineRegistry:
    """Get the process-wide engine registry."""
    return _registry


def register_engine(name: str, adapter: Any, **kwargs: Any) -> EngineAdapter:
    """Register an engine with the global registry."""
    return _registry.register(name, adapter, **kwargs)


def get_engine_adapter(name: str) -> EngineAdapter:
    """Get an adapter from the global registry."""
    return _registry.get(name)


def list_engines() -> List[str]:
    """List engines in the global registry."""
    return _registry.list_engines()
