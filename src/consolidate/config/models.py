"""Configuration models for consolidate."""

from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator


class EngineConfig(BaseModel):
    """Per-engine settings.

    Attributes:
        enabled: Disabled engines raise on lookup as if they were unknown.
        options: Default render options, applied only where a call does not
            set the same key.
    """

    enabled: bool = True
    options: Dict[str, Any] = Field(default_factory=dict)


class ConsolidateConfig(BaseModel):
    """Top-level configuration.

    Attributes:
        default_engine: Engine used when a call names none and the extension
            does not decide.
        cache: Default for ``options["cache"]``.
        views: Default for ``options["views"]``, the directory bare partial
            references are resolved against.
        encoding: Encoding used to read templates and partials.
        sync_timeout: Seconds a callback-shaped engine may take to report
            completion before the synchronous API gives up. None waits forever.
        extensions: Extension to engine overrides, e.g. ``{".html": "jinja2"}``.
        engines: Per-engine settings keyed by engine name.

    Example:
        ConsolidateConfig(
            default_engine="mustache",
            cache=True,
            views="templates",
            engines={"jinja2": {"options": {"autoescape": True}}},
        )
    """

    default_engine: str = "jinja2"
    cache: bool = False
    views: Optional[Path] = None
    encoding: str = "utf-8"
    sync_timeout: Optional[float] = Field(default=None, gt=0)
    extensions: Dict[str, str] = Field(default_factory=dict)
    engines: Dict[str, EngineConfig] = Field(default_factory=dict)

    @field_validator("extensions")
    @classmethod
    def normalize_extensions(cls, value: Dict[str, str]) -> Dict[str, str]:
        """Ensure every extension starts with a dot and is lower case."""
        return {
            (ext if ext.startswith(".") else "." + ext).lower(): engine
            for ext, engine in value.items()
        }

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, value: str) -> str:
        import codecs

        try:
            codecs.lookup(value)
        except LookupError as e:
            raise ValueError(f"Unknown encoding '{value}'") from e
        return value

    def engine_config(self, name: str) -> EngineConfig:
        return self.engines.get(name) or EngineConfig()
