"""Liquid adapter backed by python-liquid."""

from typing import Any, Dict, List

from .base import EngineAdapter


class LiquidAdapter(EngineAdapter):
    """Adapter for Liquid templates using python-liquid.

    ``{% include "name" %}`` and ``{% render "name" %}`` look in
    ``options["partials"]`` first, then in the views directory. python-liquid
    renders asynchronously on its own, so the async path does not need a
    worker thread.
    """

    name = "liquid"
    module = "liquid"
    extensions = (".liquid",)
    native_async = True

    def compile(self, source: str, options: Dict[str, Any]) -> Any:
        liquid = self.load_library()

        loaders: List[Any] = []
        partials = self.partials(options)
        if partials:
            loaders.append(liquid.DictLoader(partials))
        views = self.views_dir(options)
        if views:
            loaders.append(liquid.FileSystemLoader(views))

        env_options: Dict[str, Any] = {}
        if len(loaders) == 1:
            env_options["loader"] = loaders[0]
        elif loaders:
            env_options["loader"] = liquid.ChoiceLoader(loaders)

        return liquid.Environment(**env_options).from_string(source)

    def render_compiled(self, compiled: Any, options: Dict[str, Any]) -> str:
        return compiled.render(**self.context(options))

    async def render_compiled_async(
        self, compiled: Any, options: Dict[str, Any]
    ) -> str:
        return await compiled.render_async(**self.context(options))
