"""YAML configuration loader with environment variable overrides.

Configuration is layered (later layers override earlier):

  1. Field defaults on :class:`~codechunk.config.settings.Settings`
  2. ``config/config.yaml`` -- static defaults checked into the repo
  3. ``.env`` file and environment variables

The YAML file is grouped into sections for readability::

    storage:
      output_prefix: transformations
    chunking:
      max_chunk_size: 1000

Section names are cosmetic: every key inside a section must be a
``Settings`` field name.  Unknown keys are rejected.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from codechunk.config.settings import Settings
from codechunk.utils.errors import ConfigurationError


def load_settings(path: str = "config/config.yaml") -> Settings:
    """Load YAML defaults and layer environment-based Settings on top.

    Args:
        path: Path to the YAML configuration file.  A missing file is not an
              error; defaults and the environment are used alone.

    Returns:
        Fully resolved :class:`Settings`.

    Raises:
        ConfigurationError: If the YAML is malformed or names unknown fields.
    """
    yaml_values = _flatten_sections(_read_yaml(Path(path)))

    unknown = sorted(set(yaml_values) - set(Settings.model_fields))
    if unknown:
        raise ConfigurationError(f"Unknown settings in {path}: {', '.join(unknown)}")

    # Fields supplied by the environment / .env count as "set"; defaults do not.
    env_values = Settings().model_dump(exclude_unset=True)

    return Settings(**{**yaml_values, **env_values})


def _read_yaml(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        return {}
    try:
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Malformed YAML in {config_path}: {exc}") from exc
    if not isinstance(loaded, dict):
        raise ConfigurationError(f"Top level of {config_path} must be a mapping")
    return loaded


def _flatten_sections(config: dict[str, Any]) -> dict[str, Any]:
    """Merge ``{section: {field: value}}`` into ``{field: value}``.

    Top-level scalars are accepted as-is so a flat file also works.
    """
    flat: dict[str, Any] = {}
    for key, value in config.items():
        if isinstance(value, dict):
            flat.update(value)
        else:
            flat[key] = value
    return flat
