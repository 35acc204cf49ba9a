"""Adapters for the standard library's string formatting."""

import string
from collections.abc import Mapping
from typing import Any, Dict

from .base import EngineAdapter


class DottedTemplate(string.Template):
    """``string.Template`` accepting dotted names such as ``${user.name}``."""

    idpattern = r"(?a:[_a-z][_a-z0-9]*(?:\.[_a-z][_a-z0-9]*)*)"


def flatten(mapping: Mapping, prefix: str = "") -> Dict[str, Any]:
    """Flatten nested mappings into dotted keys, keeping the nested values too.

    >>> flatten({"user": {"name": "Tobi"}})["user.name"]
    'Tobi'
    """
    flat: Dict[str, Any] = {}
    for key, value in mapping.items():
        name = f"{prefix}{key}"
        flat[name] = value
        if isinstance(value, Mapping):
            flat.update(flatten(value, name + "."))
    return flat


class StringTemplateAdapter(EngineAdapter):
    """Adapter for ``string.Template`` (``$name`` / ``${user.name}``).

    Missing names are a render error unless ``options["safe"]`` is set, in
    which case they are left in place.
    """

    name = "string"
    module = "string"
    extensions = (".tmpl",)

    def compile(self, source: str, options: Dict[str, Any]) -> Any:
        return DottedTemplate(source)

    def render_compiled(self, compiled: Any, options: Dict[str, Any]) -> str:
        mapping = flatten(self.context(options))
        if options.get("safe"):
            return compiled.safe_substitute(mapping)
        return compiled.substitute(mapping)


class FormatAdapter(EngineAdapter):
    """Adapter for ``str.format_map`` (``{user[name]}``)."""

    name = "format"
    module = "string"
    compiles = False

    def compile(self, source: str, options: Dict[str, Any]) -> Any:
        return source

    def render_compiled(self, compiled: Any, options: Dict[str, Any]) -> str:
        return compiled.format_map(self.context(options))
