"""Markdown adapter."""

from typing import Any, Dict, NamedTuple

from .base import EngineAdapter


class CompiledMarkdown(NamedTuple):
    source: str
    extensions: tuple


class MarkdownAdapter(EngineAdapter):
    """Render Markdown to HTML with Python-Markdown.

    Markdown has no placeholders, so locals are ignored. Python-Markdown
    extensions are taken from ``options["markdown_extensions"]``.
    """

    name = "markdown"
    module = "markdown"
    extensions = (".md", ".markdown")

    def compile(self, source: str, options: Dict[str, Any]) -> Any:
        self.load_library()
        return CompiledMarkdown(source, tuple(options.get("markdown_extensions") or ()))

    def render_compiled(self, compiled: Any, options: Dict[str, Any]) -> str:
        markdown = self.load_library()
        return markdown.markdown(compiled.source, extensions=list(compiled.extensions))
