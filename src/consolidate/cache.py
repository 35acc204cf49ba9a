"""Template caching for consolidate.

Two mappings live in a :class:`TemplateCache`:

* the raw-content cache, ``path -> template text`` (BOM already stripped),
  filled by the loader when ``options["cache"]`` is truthy;
* the compiled-template cache, ``options["filename"] -> compiled handle``,
  filled by engines whose libraries compile templates.

Storing a compiled handle evicts the raw text for the same path, so once a
template is compiled its text is never served again. Entries never expire.
"""

import logging
import threading
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


def is_cacheable(options: Dict[str, Any]) -> bool:
    """Whether ``options`` identify a template that may be cached."""
    return bool(options.get("filename")) and bool(options.get("cache"))


class TemplateCache:
    """Raw-content and compiled-template cache."""

    def __init__(self) -> None:
        self._compiled: Dict[str, Any] = {}
        self._raw: Dict[str, str] = {}
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0

    def get_compiled(self, options: Dict[str, Any]) -> Optional[Any]:
        """Return the compiled handle stored for ``options["filename"]``.

        Returns None when caching is disabled for these options or nothing
        was stored yet, which tells the caller to compile.
        """
        if not is_cacheable(options):
            return None

        filename = options["filename"]
        with self._lock:
            compiled = self._compiled.get(filename)
            if compiled is None:
                self._misses += 1
            else:
                self._hits += 1

        if compiled is not None:
            logger.debug(f"Compiled cache hit: {filename}")
        return compiled

    def set_compiled(self, options: Dict[str, Any], compiled: Any) -> Any:
        """Store ``compiled`` for ``options["filename"]`` and return it.

        Does nothing beyond returning ``compiled`` when caching is disabled.
        """
        if compiled is None or not is_cacheable(options):
            return compiled

        filename = options["filename"]
        with self._lock:
            self._raw.pop(filename, None)
            self._compiled[filename] = compiled

        logger.debug(f"Cached compiled template: {filename}")
        return compiled

    def get_raw(self, path: str) -> Optional[str]:
        """Return the cached text for ``path``, if any."""
        with self._lock:
            text = self._raw.get(path)
        return text if isinstance(text, str) else None

    def set_raw(self, path: str, text: str) -> None:
        """Cache the text of ``path``."""
        with self._lock:
            self._raw[path] = text

    def clear(self) -> None:
        """Clear the compiled-template cache.

        The raw-content cache is left untouched, use :meth:`clear_raw` or
        :meth:`clear_all` for that.
        """
        with self._lock:
            self._compiled.clear()
        logger.debug("Compiled template cache cleared")

    def clear_raw(self) -> None:
        """Clear the raw-content cache."""
        with self._lock:
            self._raw.clear()

    def clear_all(self) -> None:
        """Clear both caches."""
        with self._lock:
            self._compiled.clear()
            self._raw.clear()

    def size(self) -> int:
        """Number of compiled templates held."""
        with self._lock:
            return len(self._compiled)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dictionary containing cache statistics
        """
        with self._lock:
            return {
                "compiled_entries": len(self._compiled),
                "raw_entries": len(self._raw),
                "hits": self._hits,
                "misses": self._misses,
            }


# Global cache instance
_global_cache: Optional[TemplateCache] = None
_cache_lock = threading.Lock()


def get_global_cache() -> TemplateCache:
    """Get the process-wide template cache, creating it on first use."""
    global _global_cache

    if _global_cache is None:
        with _cache_lock:
            if _global_cache is None:
                _global_cache = TemplateCache()

    return _global_cache
