"""Shared pytest fixtures and configuration."""

from pathlib import Path
from typing import Any, Dict
from unittest.mock import patch

from pytest import fixture

from consolidate import loader
from consolidate.cache import TemplateCache
from consolidate.renderer import Engines

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@fixture
def fixtures_dir() -> Path:
    """Directory holding one sub-directory of templates per engine."""
    return FIXTURES_DIR


@fixture
def template_cache() -> TemplateCache:
    """Provide an empty template cache."""
    return TemplateCache()


@fixture
def engines(template_cache) -> Engines:
    """Provide an Engines instance with its own cache and registry."""
    return Engines(cache=template_cache)


@fixture
def user_options() -> Dict[str, Any]:
    """Locals used by every fixture template."""
    return {"user": {"name": "Tobi"}}


@fixture
def read_counter():
    """Count filesystem reads made by the loader."""
    with patch.object(loader, "_read_text", wraps=loader._read_text) as mock_read:
        yield mock_read


@fixture
def write_template(tmp_path):
    """Write a template into a temporary directory and return its path."""

    def _write(name: str, content: str, encoding: str = "utf-8") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding=encoding)
        return path

    return _write
