"""Partial resolution relative to the main template.

``options["partials"]`` maps a partial name to a path fragment. Each fragment
is resolved against the directory of the main template and given the main
template's extension, so for ``views/page.hbs`` the entry
``{"header": "shared/header"}`` loads ``views/shared/header.hbs``. The loaded
text replaces the fragment in place.
"""

import logging
import os
from typing import Any, Dict, Iterator, Tuple

from .cache import TemplateCache
from .loader import PathLike, read_template, read_template_async

logger = logging.getLogger(__name__)


class ResolvedPartial(str):
    """Partial text that has already been loaded from disk."""

    __slots__ = ()


def partial_path(path: str, fragment: str) -> str:
    """Location of ``fragment`` next to the template at ``path``."""
    extension = os.path.splitext(path)[1]
    return os.path.join(os.path.dirname(path), fragment + extension)


def _pending(path: str, options: Dict[str, Any]) -> Iterator[Tuple[str, str]]:
    partials = options.get("partials")
    if not partials:
        return
    for name, fragment in list(partials.items()):
        if isinstance(fragment, ResolvedPartial):
            continue
        yield name, partial_path(path, fragment)


def resolve_partials(
    path: PathLike,
    options: Dict[str, Any],
    cache: TemplateCache,
    encoding: str = "utf-8",
) -> None:
    """Load every partial named in ``options["partials"]``, in order.

    The first partial that cannot be read raises and the remaining ones are
    not attempted.
    """
    path = os.fspath(path)
    for name, location in _pending(path, options):
        logger.debug(f"Resolving partial '{name}' from {location}")
        text = read_template(location, options, cache, encoding)
        options["partials"][name] = ResolvedPartial(text)


async def resolve_partials_async(
    path: PathLike,
    options: Dict[str, Any],
    cache: TemplateCache,
    encoding: str = "utf-8",
) -> None:
    """Non-blocking :func:`resolve_partials`, still one partial at a time."""
    path = os.fspath(path)
    for name, location in _pending(path, options):
        logger.debug(f"Resolving partial '{name}' from {location}")
        text = await read_template_async(location, options, cache, encoding)
        options["partials"][name] = ResolvedPartial(text)
