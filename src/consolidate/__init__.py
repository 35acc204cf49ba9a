"""consolidate - one calling convention for many Python template engines.

Usage::

    from consolidate import engines

    engines.handlebars("views/page.hbs", {"title": "Home", "partials": {"nav": "nav"}})
    engines.jinja2.render("<p>{{ user.name }}</p>", {"user": {"name": "Tobi"}})
    engines.clear_cache()
"""

from typing import Any, Dict, Optional

from .adapters import (
    CallbackAdapter,
    CoroutineAdapter,
    EngineAdapter,
    EngineRegistry,
    FunctionAdapter,
    get_registry,
)
from .cache import TemplateCache, get_global_cache
from .config import ConsolidateConfig, load_config
from .renderer import BoundEngine, Engines
from .exceptions import (
    CompileError,
    ConfigError,
    ConsolidateError,
    EngineError,
    EngineNotInstalledError,
    ReadError,
    RenderError,
    SyncAdapterError,
    UnknownEngineError,
)
from .loader import PathLike

__version__ = "0.1.0"

# Default instance sharing the process-wide cache and registry
engines = Engines(cache=get_global_cache(), registry=get_registry())


def render(
    source: str, options: Optional[Dict[str, Any]] = None, engine: Optional[str] = None
) -> str:
    """Render a template string with the default :class:`Engines` instance."""
    return engines.render(source, options, engine=engine)


def render_file(
    path: PathLike, options: Optional[Dict[str, Any]] = None, engine: Optional[str] = None
) -> str:
    """Render a template file with the default :class:`Engines` instance."""
    return engines.render_file(path, options, engine=engine)


def clear_cache() -> None:
    """Reset the compiled-template cache of the default instance."""
    engines.clear_cache()


__all__ = [
    "engines",
    "render",
    "render_file",
    "clear_cache",
    "Engines",
    "BoundEngine",
    "EngineAdapter",
    "FunctionAdapter",
    "CallbackAdapter",
    "CoroutineAdapter",
    "EngineRegistry",
    "TemplateCache",
    "ConsolidateConfig",
    "load_config",
    "ConsolidateError",
    "ReadError",
    "EngineError",
    "CompileError",
    "RenderError",
    "EngineNotInstalledError",
    "UnknownEngineError",
    "SyncAdapterError",
    "ConfigError",
    "__version__",
]
