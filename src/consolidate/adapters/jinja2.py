"""Jinja2 adapter."""

import logging
from typing import Any, Dict, List

from .base import EngineAdapter

logger = logging.getLogger(__name__)


class Jinja2Adapter(EngineAdapter):
    """Adapter for Jinja2.

    Partials are served by name through a ``DictLoader`` ahead of a
    ``FileSystemLoader`` rooted at the views directory, so
    ``{% include "header" %}`` finds ``options["partials"]["header"]`` first.
    ``options["helpers"]`` become globals and ``options["filters"]`` filters.

    The async path compiles in an async-enabled environment and renders with
    ``render_async``.
    """

    name = "jinja2"
    module = "jinja2"
    extensions = (".j2", ".jinja", ".jinja2")
    native_async = True

    def _environment(self, options: Dict[str, Any], enable_async: bool = False):
        jinja2 = self.load_library()

        loaders: List[Any] = []
        partials = self.partials(options)
        if partials:
            loaders.append(jinja2.DictLoader(partials))
        views = self.views_dir(options)
        if views:
            loaders.append(
                jinja2.FileSystemLoader(views, encoding=options.get("encoding") or "utf-8")
            )

        env = jinja2.Environment(
            loader=jinja2.ChoiceLoader(loaders) if loaders else None,
            autoescape=bool(options.get("autoescape", False)),
            keep_trailing_newline=bool(options.get("keep_trailing_newline", False)),
            enable_async=enable_async,
        )
        env.globals.update(self.helpers(options))
        env.filters.update(options.get("filters") or {})
        return env

    def compile(self, source: str, options: Dict[str, Any]) -> Any:
        return self._environment(options).from_string(source)

    async def compile_async(self, source: str, options: Dict[str, Any]) -> Any:
        return self._environment(options, enable_async=True).from_string(source)

    def render_compiled(self, compiled: Any, options: Dict[str, Any]) -> str:
        return compiled.render(self.context(options))

    async def render_compiled_async(
        self, compiled: Any, options: Dict[str, Any]
    ) -> str:
        if compiled.environment.is_async:
            return await compiled.render_async(self.context(options))
        # Compiled by the synchronous path and cached
        logger.debug("Rendering synchronous jinja2 template in a worker thread")
        return await super().render_compiled_async(compiled, options)
