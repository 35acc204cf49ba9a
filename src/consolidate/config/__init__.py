"""Configuration management for consolidate."""

from .loader import (
    dump_config,
    environment_overrides,
    load_config,
    substitute_environment,
)
from .models import ConsolidateConfig, EngineConfig

__all__ = [
    "ConsolidateConfig",
    "EngineConfig",
    "load_config",
    "dump_config",
    "environment_overrides",
    "substitute_environment",
]
