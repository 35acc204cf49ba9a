"""Handlebars adapter backed by pybars3."""

from typing import Any, Dict

from .base import EngineAdapter


class HandlebarsAdapter(EngineAdapter):
    """Adapter for Handlebars templates using pybars3.

    pybars takes partials and helpers per call rather than registering them
    globally. Partials are compiled on each render because their text may
    differ between renders of the same cached template. Helpers are called as
    ``helper(this, *args)``.
    """

    name = "handlebars"
    module = "pybars"
    extensions = (".hbs", ".handlebars")

    def __init__(self, config=None):
        super().__init__(config)
        self._compiler = None

    def _get_compiler(self):
        if self._compiler is None:
            pybars = self.load_library()
            self._compiler = pybars.Compiler()
        return self._compiler

    def compile(self, source: str, options: Dict[str, Any]) -> Any:
        return self._get_compiler().compile(source)

    def render_compiled(self, compiled: Any, options: Dict[str, Any]) -> str:
        compiler = self._get_compiler()
        partials = {
            name: compiler.compile(text)
            for name, text in self.partials(options).items()
        }
        return str(
            compiled(
                self.context(options),
                helpers=self.helpers(options),
                partials=partials,
            )
        )
