"""Mustache adapter backed by chevron."""

from typing import Any, Dict

from .base import EngineAdapter


class MustacheAdapter(EngineAdapter):
    """Adapter for Mustache templates using chevron.

    chevron has no separate compile step, so nothing is stored in the compiled
    cache; with ``cache`` on, the template text itself is cached instead.
    Partials not found in ``options["partials"]`` are looked up in the views
    directory with the ``.mustache`` extension (``options["partials_ext"]``
    overrides it).
    """

    name = "mustache"
    module = "chevron"
    extensions = (".mustache", ".ms")
    compiles = False

    def compile(self, source: str, options: Dict[str, Any]) -> Any:
        self.load_library()
        return source

    def render_compiled(self, compiled: Any, options: Dict[str, Any]) -> str:
        chevron = self.load_library()
        return chevron.render(
            template=compiled,
            data=self.context(options),
            partials_path=self.views_dir(options) or ".",
            partials_ext=options.get("partials_ext", "mustache"),
            partials_dict=self.partials(options),
        )
