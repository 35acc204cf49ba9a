"""Pystache adapter."""

from typing import Any, Dict

from .base import EngineAdapter


class PystacheAdapter(EngineAdapter):
    """Adapter for pystache, a Mustache implementation with a parse step."""

    name = "pystache"
    module = "pystache"

    def compile(self, source: str, options: Dict[str, Any]) -> Any:
        pystache = self.load_library()
        return pystache.parse(source)

    def render_compiled(self, compiled: Any, options: Dict[str, Any]) -> str:
        pystache = self.load_library()

        renderer_options: Dict[str, Any] = {}
        partials = self.partials(options)
        if partials:
            renderer_options["partials"] = partials
        views = self.views_dir(options)
        if views:
            renderer_options["search_dirs"] = [views]
            renderer_options["file_encoding"] = options.get("encoding") or "utf-8"

        renderer = pystache.Renderer(**renderer_options)
        return renderer.render(compiled, self.context(options))
