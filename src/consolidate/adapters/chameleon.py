"""Chameleon page template adapter."""

from typing import Any, Dict

from .base import EngineAdapter


class ChameleonAdapter(EngineAdapter):
    """Adapter for Chameleon page templates.

    Chameleon composes templates through macros rather than named partials, so
    ``options["partials"]`` is only available to templates as a plain value.
    """

    name = "chameleon"
    module = "chameleon"
    extensions = (".pt",)

    def compile(self, source: str, options: Dict[str, Any]) -> Any:
        chameleon = self.load_library()
        return chameleon.PageTemplate(source)

    def render_compiled(self, compiled: Any, options: Dict[str, Any]) -> str:
        return compiled.render(**self.context(options))
