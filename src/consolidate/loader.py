"""Template source loading with optional raw-content caching."""

import asyncio
import logging
import os
from typing import Any, Dict, Union

from .cache import TemplateCache
from .exceptions import ReadError

logger = logging.getLogger(__name__)

BOM = "\ufeff"

PathLike = Union[str, "os.PathLike[str]"]


def strip_bom(text: str) -> str:
    """Remove a single leading UTF-8 byte order mark."""
    if text.startswith(BOM):
        return text[1:]
    return text


def _read_text(path: str, encoding: str) -> str:
    with open(path, "r", encoding=encoding, newline="") as f:
        return f.read()


def _cached_text(path: str, options: Dict[str, Any], cache: TemplateCache):
    if not options.get("cache"):
        return None
    text = cache.get_raw(path)
    if text is not None:
        logger.debug(f"Raw cache hit: {path}")
    return text


def _store(
    path: str, text: str, options: Dict[str, Any], cache: TemplateCache
) -> str:
    text = strip_bom(text)
    if options.get("cache"):
        cache.set_raw(path, text)
    return text


def _read_error(path: str, e: Exception) -> ReadError:
    if isinstance(e, FileNotFoundError):
        return ReadError(f"Template file not found: {path}", path)
    return ReadError(f"Failed to read template {path}: {e}", path)


def read_file(path: PathLike, encoding: str = "utf-8") -> str:
    """Read ``path`` without caching, dropping a leading BOM.

    Raises:
        ReadError: If the file does not exist or cannot be decoded
    """
    path = os.fspath(path)
    try:
        text = _read_text(path, encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise _read_error(path, e) from e
    return strip_bom(text)


def read_template(
    path: PathLike,
    options: Dict[str, Any],
    cache: TemplateCache,
    encoding: str = "utf-8",
) -> str:
    """Read the template at ``path``.

    When ``options["cache"]`` is truthy a cached copy is returned without
    touching the filesystem, and a fresh read is stored for next time.

    Raises:
        ReadError: If the file does not exist or cannot be decoded
    """
    path = os.fspath(path)
    text = _cached_text(path, options, cache)
    if text is not None:
        return text

    logger.debug(f"Reading template: {path}")
    try:
        text = _read_text(path, encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise _read_error(path, e) from e

    return _store(path, text, options, cache)


async def read_template_async(
    path: PathLike,
    options: Dict[str, Any],
    cache: TemplateCache,
    encoding: str = "utf-8",
) -> str:
    """Non-blocking :func:`read_template`; the file is read in a worker thread."""
    path = os.fspath(path)
    text = _cached_text(path, options, cache)
    if text is not None:
        return text

    logger.debug(f"Reading template: {path}")
    try:
        text = await asyncio.to_thread(_read_text, path, encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise _read_error(path, e) from e

    return _store(path, text, options, cache)
