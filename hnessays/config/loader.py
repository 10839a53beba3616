"""YAML configuration loader with environment variable overrides.

Configuration is layered (later layers win):

    1. Field defaults on :class:`Settings`
    2. ``config/config.yaml`` -- checked-in defaults, grouped in sections
    3. ``.env`` file and environment variables

The YAML file is sectioned for readability and flattened to field names
by joining section and key with an underscore::

    search:
      hits_per_page: 50      ->  search_hits_per_page
    batch:
      size: 5                ->  batch_size
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from hnessays.config.settings import Settings
from hnessays.utils.errors import ConfigurationError
from hnessays.utils.logging import get_logger

logger = get_logger(__name__)

# Sections whose keys already carry the full field name.
_FLAT_SECTIONS = {"storage"}


def load_settings(path: str | Path = "config/config.yaml", **overrides: Any) -> Settings:
    """Build :class:`Settings` from YAML defaults, env vars and explicit overrides.

    Args:
        path: YAML file to read.  A missing file is not an error.
        **overrides: Field values that beat every other source (CLI flags).
            ``None`` values are ignored so unset flags fall through.

    Returns:
        Fully resolved settings.

    Raises:
        ConfigurationError: If the YAML is malformed, names an unknown field,
            or any source (YAML, environment, overrides) holds an invalid value.
    """
    yaml_values = _flatten(_read_yaml(Path(path)))

    try:
        # Fields set from env / .env must not be clobbered by YAML values.
        env_set = Settings().model_fields_set
        init_values = {k: v for k, v in yaml_values.items() if k not in env_set}
        init_values.update({k: v for k, v in overrides.items() if v is not None})
        settings = Settings(**init_values)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc

    logger.debug(
        "settings_loaded",
        config_path=str(path),
        yaml_keys=sorted(yaml_values),
        overrides=sorted(k for k, v in overrides.items() if v is not None),
    )
    return settings


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Malformed YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Top level of {path} must be a mapping")
    return data


def _flatten(data: dict[str, Any]) -> dict[str, Any]:
    """Flatten one level of sections into ``section_key`` field names."""
    flat: dict[str, Any] = {}
    for section, value in data.items():
        if isinstance(value, dict):
            for key, inner in value.items():
                name = key if section in _FLAT_SECTIONS else f"{section}_{key}"
                flat[name] = inner
        else:
            flat[section] = value
    return flat
