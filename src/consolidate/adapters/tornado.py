"""Tornado template adapter."""

import functools
from typing import Any, Callable, Dict, Optional

from .base import EngineAdapter

ViewReader = Optional[Callable[[str], str]]


def _partial_loader(template_module: Any, partials: Dict[str, str], read_view: ViewReader):
    """Loader serving ``{% include %}`` from partials, then the views directory."""

    class PartialLoader(template_module.BaseLoader):
        def resolve_path(self, name: str, parent_path: Optional[str] = None) -> str:
            return name

        def _create_template(self, name: str) -> Any:
            if name in partials:
                return template_module.Template(partials[name], name=name, loader=self)
            if read_view is None:
                raise template_module.ParseError(f"Unknown partial: {name}")
            return template_module.Template(read_view(name), name=name, loader=self)

    return PartialLoader()


class TornadoAdapter(EngineAdapter):
    """Adapter for ``tornado.template``."""

    name = "tornado"
    module = "tornado.template"

    def compile(self, source: str, options: Dict[str, Any]) -> Any:
        template = self.load_library()
        read_view = None
        if self.views_dir(options):
            read_view = functools.partial(self.read_view, options)
        return template.Template(
            source,
            name=options.get("filename") or "<string>",
            loader=_partial_loader(template, self.partials(options), read_view),
        )

    def render_compiled(self, compiled: Any, options: Dict[str, Any]) -> str:
        output = compiled.generate(**self.context(options))
        return output.decode("utf-8") if isinstance(output, bytes) else output
