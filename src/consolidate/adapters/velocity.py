"""Velocity adapter backed by airspeed."""

from typing import Any, Dict

from .base import EngineAdapter


class PartialLoader:
    """airspeed loader for ``#parse`` and ``#include``.

    Names are looked up in the resolved partials first and then as files
    under the views directory.
    """

    def __init__(self, airspeed: Any, partials: Dict[str, str], options: Dict[str, Any]):
        self._airspeed = airspeed
        self._partials = partials
        self._options = options
        self._templates: Dict[str, Any] = {}

    def load_text(self, name: str) -> str:
        if name in self._partials:
            return self._partials[name]
        if EngineAdapter.views_dir(self._options) is None:
            raise IOError(f"Unknown partial: {name}")
        return EngineAdapter.read_view(self._options, name)

    def load_template(self, name: str) -> Any:
        if name not in self._templates:
            self._templates[name] = self._airspeed.Template(
                self.load_text(name), filename=name
            )
        return self._templates[name]


class VelocityAdapter(EngineAdapter):
    """Adapter for Velocity templates using airspeed."""

    name = "velocity"
    module = "airspeed"
    extensions = (".vm", ".vtl")

    def compile(self, source: str, options: Dict[str, Any]) -> Any:
        airspeed = self.load_library()
        return airspeed.Template(source, filename=options.get("filename") or "<string>")

    def render_compiled(self, compiled: Any, options: Dict[str, Any]) -> str:
        airspeed = self.load_library()
        loader = PartialLoader(airspeed, self.partials(options), options)
        return compiled.merge(self.context(options), loader=loader)
