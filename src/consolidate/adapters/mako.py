"""Mako adapter."""

from typing import Any, Dict

from .base import EngineAdapter


class MakoAdapter(EngineAdapter):
    """Adapter for Mako.

    Partials are registered in the ``TemplateLookup`` under their name, so
    ``<%include file="header"/>`` works, and the views directory is searched
    for anything else.
    """

    name = "mako"
    module = "mako"
    extensions = (".mako",)

    def compile(self, source: str, options: Dict[str, Any]) -> Any:
        self.load_library()
        from mako.lookup import TemplateLookup
        from mako.template import Template

        views = self.views_dir(options)
        lookup = TemplateLookup(
            directories=[views] if views else [],
            input_encoding=options.get("encoding") or "utf-8",
        )
        for name, text in self.partials(options).items():
            # Includes from a string template resolve to either form
            lookup.put_string(name, text)
            lookup.put_string("/" + name.lstrip("/"), text)

        return Template(source, lookup=lookup)

    def render_compiled(self, compiled: Any, options: Dict[str, Any]) -> str:
        return compiled.render(**self.context(options))
