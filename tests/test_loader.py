"""Tests for template loading."""

from pathlib import Path

import pytest

from consolidate.cache import TemplateCache
from consolidate.exceptions import ReadError
from consolidate.loader import (
    BOM,
    read_file,
    read_template,
    read_template_async,
    strip_bom,
)


class TestStripBom:
    """Test byte order mark removal."""

    def test_strips_single_leading_bom(self):
        assert strip_bom(BOM + "<p>x</p>") == "<p>x</p>"

    def test_only_one_bom_is_removed(self):
        assert strip_bom(BOM + BOM + "x") == BOM + "x"

    def test_text_without_bom_unchanged(self):
        assert strip_bom("x" + BOM) == "x" + BOM
        assert strip_bom("") == ""


class TestReadTemplate:
    """Test read_template."""

    def test_reads_file(self, write_template, template_cache):
        """Test the file text is returned."""
        path = write_template("user.j2", "<p>{{user.name}}</p>")
        assert read_template(path, {}, template_cache) == "<p>{{user.name}}</p>"

    def test_strips_bom(self, write_template, template_cache):
        """Test a leading BOM is removed."""
        path = write_template("bom.j2", BOM + "<p>hi</p>")
        assert read_template(str(path), {}, template_cache) == "<p>hi</p>"

    def test_preserves_crlf(self, tmp_path, template_cache):
        """Test Windows line endings reach the engine untranslated."""
        path = tmp_path / "crlf.j2"
        path.write_bytes(b"<p>x</p>\r\n<p>y</p>\r\n")
        assert read_template(path, {}, template_cache) == "<p>x</p>\r\n<p>y</p>\r\n"

    def test_missing_file(self, tmp_path, template_cache):
        """Test a missing file raises ReadError naming the path."""
        missing = str(tmp_path / "missing.j2")

        with pytest.raises(ReadError) as exc_info:
            read_template(missing, {}, template_cache)

        assert exc_info.value.path == missing
        assert missing in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    def test_undecodable_file(self, tmp_path, template_cache):
        """Test decoding failures are read errors."""
        path = tmp_path / "latin.j2"
        path.write_bytes(b"\xff\xfe\xfa")

        with pytest.raises(ReadError):
            read_template(str(path), {}, template_cache)

    def test_uncached_reads_every_time(self, write_template, template_cache, read_counter):
        """Test one filesystem read per uncached call."""
        path = str(write_template("user.j2", "x"))

        read_template(path, {}, template_cache)
        read_template(path, {}, template_cache)

        assert read_counter.call_count == 2
        assert template_cache.get_raw(path) is None

    def test_cached_reads_once(self, write_template, template_cache, read_counter):
        """Test a cached path touches the filesystem once."""
        path = str(write_template("user.j2", BOM + "x"))
        options = {"cache": True}

        assert read_template(path, options, template_cache) == "x"
        assert read_template(path, options, template_cache) == "x"

        assert read_counter.call_count == 1
        assert template_cache.get_raw(path) == "x"

    def test_cached_text_served_after_file_changes(self, write_template, template_cache):
        """Test the raw cache is not invalidated by file changes."""
        path = write_template("user.j2", "before")
        options = {"cache": True}

        read_template(str(path), options, template_cache)
        path.write_text("after", encoding="utf-8")

        assert read_template(str(path), options, template_cache) == "before"

    def test_custom_encoding(self, write_template, template_cache):
        """Test templates can be read with another encoding."""
        path = write_template("latin.j2", "café", encoding="latin-1")
        assert read_template(path, {}, template_cache, encoding="latin-1") == "café"


class TestReadTemplateAsync:
    """Test read_template_async."""

    @pytest.mark.asyncio
    async def test_reads_file(self, write_template, template_cache):
        path = write_template("user.j2", BOM + "<p>hi</p>")
        assert await read_template_async(path, {}, template_cache) == "<p>hi</p>"

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path, template_cache):
        missing = str(tmp_path / "missing.j2")
        with pytest.raises(ReadError) as exc_info:
            await read_template_async(missing, {}, template_cache)
        assert exc_info.value.path == missing

    @pytest.mark.asyncio
    async def test_preserves_crlf(self, tmp_path, template_cache):
        path = tmp_path / "crlf.j2"
        path.write_bytes(b"<p>x</p>\r\n<p>y</p>")
        assert await read_template_async(path, {}, template_cache) == "<p>x</p>\r\n<p>y</p>"

    @pytest.mark.asyncio
    async def test_cached_reads_once(self, write_template, template_cache, read_counter):
        path = str(write_template("user.j2", "x"))
        options = {"cache": True}

        await read_template_async(path, options, template_cache)
        await read_template_async(path, options, template_cache)

        assert read_counter.call_count == 1

    @pytest.mark.asyncio
    async def test_shares_cache_with_sync_loader(self, write_template, read_counter):
        """Test text cached by one loader is served by the other."""
        cache = TemplateCache()
        path = str(write_template("user.j2", "x"))
        options = {"cache": True}

        read_template(path, options, cache)
        assert await read_template_async(Path(path), options, cache) == "x"
        assert read_counter.call_count == 1


class TestReadFile:
    """Test the uncached read_file."""

    def test_strips_bom_and_keeps_crlf(self, tmp_path):
        path = tmp_path / "nav.html"
        path.write_bytes((BOM + "<nav/>\r\n").encode("utf-8"))
        assert read_file(path) == "<nav/>\r\n"

    def test_encoding(self, write_template):
        path = write_template("latin.j2", "café", encoding="latin-1")
        assert read_file(path, "latin-1") == "café"

    def test_undecodable_file(self, write_template):
        path = write_template("latin.j2", "café", encoding="latin-1")
        with pytest.raises(ReadError, match="Failed to read template"):
            read_file(path)
