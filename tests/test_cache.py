"""Tests for the template cache."""

import threading

from consolidate.cache import TemplateCache, get_global_cache, is_cacheable


class TestIsCacheable:
    """Test the caching predicate."""

    def test_requires_filename_and_cache(self):
        """Test both filename and a truthy cache flag are required."""
        assert is_cacheable({"filename": "a.j2", "cache": True})
        assert is_cacheable({"filename": "a.j2", "cache": "memory"})
        assert not is_cacheable({"filename": "a.j2"})
        assert not is_cacheable({"filename": "a.j2", "cache": False})
        assert not is_cacheable({"cache": True})
        assert not is_cacheable({})


class TestTemplateCache:
    """Test TemplateCache class."""

    def test_cache_initialization(self):
        """Test a new cache is empty."""
        cache = TemplateCache()
        assert cache.size() == 0
        assert cache.get_stats() == {
            "compiled_entries": 0,
            "raw_entries": 0,
            "hits": 0,
            "misses": 0,
        }

    def test_set_and_get_compiled(self):
        """Test storing and retrieving a compiled handle."""
        cache = TemplateCache()
        options = {"filename": "views/user.j2", "cache": True}
        handle = object()

        assert cache.set_compiled(options, handle) is handle
        assert cache.get_compiled(options) is handle
        assert cache.size() == 1

    def test_compiled_bypassed_without_cache_flag(self):
        """Test nothing is stored when caching is off."""
        cache = TemplateCache()
        options = {"filename": "views/user.j2"}
        handle = object()

        assert cache.set_compiled(options, handle) is handle
        assert cache.get_compiled(options) is None
        assert cache.size() == 0

    def test_compiled_keyed_by_filename(self):
        """Test handles are stored per filename."""
        cache = TemplateCache()
        cache.set_compiled({"filename": "a.j2", "cache": True}, "A")
        cache.set_compiled({"filename": "b.j2", "cache": True}, "B")

        assert cache.get_compiled({"filename": "a.j2", "cache": True}) == "A"
        assert cache.get_compiled({"filename": "b.j2", "cache": True}) == "B"

    def test_set_compiled_evicts_raw(self):
        """Test storing a compiled handle drops the raw text of the same path."""
        cache = TemplateCache()
        cache.set_raw("views/user.j2", "<p>{{user.name}}</p>")
        cache.set_raw("views/other.j2", "other")

        cache.set_compiled({"filename": "views/user.j2", "cache": True}, "handle")

        assert cache.get_raw("views/user.j2") is None
        assert cache.get_raw("views/other.j2") == "other"

    def test_raw_round_trip(self):
        """Test raw text storage."""
        cache = TemplateCache()
        assert cache.get_raw("a.txt") is None
        cache.set_raw("a.txt", "text")
        assert cache.get_raw("a.txt") == "text"

    def test_clear_keeps_raw(self):
        """Test clear() only empties the compiled cache."""
        cache = TemplateCache()
        cache.set_compiled({"filename": "a.j2", "cache": True}, "A")
        cache.set_raw("b.j2", "B")

        cache.clear()

        assert cache.size() == 0
        assert cache.get_raw("b.j2") == "B"

    def test_clear_raw_and_clear_all(self):
        """Test the raw and full clears."""
        cache = TemplateCache()
        cache.set_compiled({"filename": "a.j2", "cache": True}, "A")
        cache.set_raw("b.j2", "B")

        cache.clear_raw()
        assert cache.get_raw("b.j2") is None
        assert cache.size() == 1

        cache.set_raw("b.j2", "B")
        cache.clear_all()
        assert cache.size() == 0
        assert cache.get_raw("b.j2") is None

    def test_hit_and_miss_stats(self):
        """Test hits and misses are counted for cacheable lookups only."""
        cache = TemplateCache()
        options = {"filename": "a.j2", "cache": True}

        cache.get_compiled(options)
        cache.set_compiled(options, "A")
        cache.get_compiled(options)
        cache.get_compiled(options)
        cache.get_compiled({"filename": "a.j2"})

        stats = cache.get_stats()
        assert stats["misses"] == 1
        assert stats["hits"] == 2
        assert stats["compiled_entries"] == 1

    def test_concurrent_writes(self):
        """Test concurrent stores leave the cache consistent."""
        cache = TemplateCache()

        def worker(n):
            for i in range(50):
                cache.set_compiled({"filename": f"t{n}-{i}", "cache": True}, i)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert cache.size() == 200


class TestGlobalCache:
    """Test the process-wide cache."""

    def test_global_cache_singleton(self):
        """Test the same instance is returned every time."""
        assert get_global_cache() is get_global_cache()
        assert isinstance(get_global_cache(), TemplateCache)

    def test_default_engines_share_global_cache(self):
        """Test the module-level engines use the global cache."""
        import consolidate

        assert consolidate.engines.cache is get_global_cache()
