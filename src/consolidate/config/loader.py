"""YAML configuration loader for consolidate."""

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import ValidationError

from ..exceptions import ConfigError
from .models import ConsolidateConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILES = ("consolidate.yaml", "consolidate.yml")

ENV_PREFIX = "CONSOLIDATE_"

# ${VAR} or ${VAR:default}
_ENV_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::([^}]*))?\}")

_ENV_OVERRIDES = {
    "DEFAULT_ENGINE": "default_engine",
    "CACHE": "cache",
    "VIEWS": "views",
    "ENCODING": "encoding",
    "SYNC_TIMEOUT": "sync_timeout",
}


def substitute_environment(value: Any, environ: Optional[Mapping[str, str]] = None) -> Any:
    """Replace ``${VAR}`` and ``${VAR:default}`` in every string of ``value``.

    Raises:
        ConfigError: If a variable without default is not set
    """
    environ = os.environ if environ is None else environ

    if isinstance(value, dict):
        return {k: substitute_environment(v, environ) for k, v in value.items()}
    if isinstance(value, list):
        return [substitute_environment(item, environ) for item in value]
    if not isinstance(value, str):
        return value

    def replace(match: "re.Match[str]") -> str:
        name, default = match.group(1), match.group(2)
        if name in environ:
            return environ[name]
        if default is not None:
            return default
        raise ConfigError(
            f"Environment variable '{name}' is not set. "
            f"Suggestion: export {name} or use ${{{name}:default}}"
        )

    return _ENV_PATTERN.sub(replace, value)


def environment_overrides(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Collect ``CONSOLIDATE_*`` variables as configuration values."""
    environ = os.environ if environ is None else environ
    overrides: Dict[str, Any] = {}
    for suffix, field in _ENV_OVERRIDES.items():
        value = environ.get(ENV_PREFIX + suffix)
        if value is None or value == "":
            continue
        if field == "cache":
            overrides[field] = value.strip().lower() in {"1", "true", "yes", "on"}
        else:
            overrides[field] = value
    return overrides


def _find_default_config() -> Optional[Path]:
    for name in DEFAULT_CONFIG_FILES:
        candidate = Path.cwd() / name
        if candidate.is_file():
            return candidate
    return None


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(
            f"Configuration file not found: {path}. "
            f"Suggestion: Check the file path and ensure the file exists."
        ) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Configuration file {path} must contain a mapping, "
            f"got {type(data).__name__}"
        )
    return data


def load_config(
    file_path: Optional[Union[str, Path]] = None,
    use_env: bool = True,
    environ: Optional[Mapping[str, str]] = None,
) -> ConsolidateConfig:
    """Load and validate consolidate configuration.

    Resolution order, later wins: model defaults, the YAML file (``file_path``
    or ``consolidate.yaml`` in the working directory), ``CONSOLIDATE_*``
    environment variables.

    Args:
        file_path: Path to a YAML configuration file
        use_env: Whether to apply ``${VAR}`` substitution and environment overrides
        environ: Environment mapping, defaults to ``os.environ``

    Returns:
        Validated ConsolidateConfig object

    Raises:
        ConfigError: If the file is missing or invalid
    """
    path = Path(file_path) if file_path is not None else _find_default_config()

    data: Dict[str, Any] = {}
    if path is not None:
        logger.debug(f"Loading configuration from {path}")
        data = _load_yaml(path)

    if use_env:
        data = substitute_environment(data, environ)
        data.update(environment_overrides(environ))

    try:
        return ConsolidateConfig.model_validate(data)
    except ValidationError as e:
        source = path or "environment"
        raise ConfigError(f"Configuration validation failed for {source}:\n{e}") from e


def dump_config(config: ConsolidateConfig) -> str:
    """Render ``config`` as YAML."""
    return yaml.safe_dump(config.model_dump(mode="json"), default_flow_style=False, sort_keys=False)
