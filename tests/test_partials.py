"""Tests for partial resolution."""

import os

import pytest

from consolidate.exceptions import ReadError
from consolidate.partials import (
    ResolvedPartial,
    partial_path,
    resolve_partials,
    resolve_partials_async,
)


class TestPartialPath:
    """Test partial location rules."""

    def test_sibling_with_template_extension(self):
        assert partial_path("views/page.hbs", "header") == os.path.join("views", "header.hbs")

    def test_nested_fragment(self):
        assert partial_path("views/page.hbs", "shared/nav") == os.path.join(
            "views", "shared/nav.hbs"
        )

    def test_template_without_directory(self):
        assert partial_path("page.mustache", "nav") == "nav.mustache"


class TestResolvePartials:
    """Test resolve_partials."""

    def test_no_partials_is_noop(self, template_cache, read_counter):
        options = {"user": {"name": "Tobi"}}
        resolve_partials("views/page.hbs", options, template_cache)
        assert options == {"user": {"name": "Tobi"}}
        assert read_counter.call_count == 0

    def test_replaces_fragments_with_text(self, write_template, template_cache):
        """Test each fragment is replaced by the file's text."""
        page = write_template("page.hbs", "{{> header}}{{> footer}}")
        write_template("header.hbs", "<h1>Head</h1>")
        write_template("parts/footer.hbs", "\ufeff<footer/>")
        options = {"partials": {"header": "header", "footer": "parts/footer"}}

        resolve_partials(page, options, template_cache)

        assert options["partials"] == {"header": "<h1>Head</h1>", "footer": "<footer/>"}
        assert all(isinstance(v, ResolvedPartial) for v in options["partials"].values())

    def test_already_resolved_not_read_again(self, write_template, template_cache, read_counter):
        """Test reusing an options dict does not resolve twice."""
        page = write_template("page.hbs", "")
        write_template("header.hbs", "<h1>Head</h1>")
        options = {"partials": {"header": "header"}}

        resolve_partials(page, options, template_cache)
        resolve_partials(page, options, template_cache)

        assert read_counter.call_count == 1
        assert options["partials"]["header"] == "<h1>Head</h1>"

    def test_missing_partial_aborts(self, write_template, template_cache):
        """Test the first failing partial raises and later ones stay unresolved."""
        page = write_template("page.hbs", "")
        write_template("footer.hbs", "<footer/>")
        options = {"partials": {"header": "missing", "footer": "footer"}}

        with pytest.raises(ReadError) as exc_info:
            resolve_partials(page, options, template_cache)

        assert exc_info.value.path.endswith("missing.hbs")
        assert options["partials"]["footer"] == "footer"

    def test_partials_use_raw_cache(self, write_template, template_cache, read_counter):
        """Test partial reads honour options["cache"]."""
        page = write_template("page.hbs", "")
        write_template("header.hbs", "<h1>Head</h1>")

        for _ in range(2):
            options = {"cache": True, "partials": {"header": "header"}}
            resolve_partials(page, options, template_cache)

        assert read_counter.call_count == 1


class TestResolvePartialsAsync:
    """Test resolve_partials_async."""

    @pytest.mark.asyncio
    async def test_replaces_fragments_with_text(self, write_template, template_cache):
        page = write_template("page.hbs", "")
        write_template("header.hbs", "<h1>Head</h1>")
        options = {"partials": {"header": "header"}}

        await resolve_partials_async(page, options, template_cache)

        assert options["partials"]["header"] == "<h1>Head</h1>"

    @pytest.mark.asyncio
    async def test_missing_partial_aborts(self, write_template, template_cache):
        page = write_template("page.hbs", "")
        options = {"partials": {"header": "missing"}}

        with pytest.raises(ReadError):
            await resolve_partials_async(page, options, template_cache)
