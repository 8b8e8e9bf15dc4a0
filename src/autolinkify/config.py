"""YAML/dict config loader for autolinkify.

Supports loading from a YAML file or a plain dict (for embedding
in a larger application config).

Example YAML:

    autolinkify:
      urls:
        scheme_matches: true
        www_matches: true
        tld_matches: false
      email: true
      phone: true
      mention: twitter
      hashtag: instagram
      new_window: true
      class_name: autolink
      strip_prefix:
        scheme: true
        www: false
      truncate:
        length: 32
        location: smart
      type_priority: [url, email, phone]
"""

from __future__ import annotations
from dataclasses import fields
from pathlib import Path
from typing import Any

from .linker import Linker, LinkerConfig
from .types import ConfigurationError

_FIELDS = frozenset(f.name for f in fields(LinkerConfig)) - {"custom_matchers"}


def load_config(data: dict[str, Any]) -> LinkerConfig:
    """Build a LinkerConfig from a config dict (from YAML or inline)."""
    # Support nested under "autolinkify" key or flat
    if "autolinkify" in data:
        data = data["autolinkify"] or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"config must be a mapping, got {type(data).__name__}")

    unknown = set(data) - _FIELDS
    if unknown:
        raise ConfigurationError(f"unknown config keys: {sorted(unknown)}")
    return LinkerConfig(**data)


def load_from_yaml(path: str | Path) -> LinkerConfig:
    """Load config from a YAML file."""
    import yaml
    with open(path) as f:
        return load_config(yaml.safe_load(f) or {})


def create_linker(config: dict[str, Any] | LinkerConfig | None = None) -> Linker:
    """Create a fully configured Linker from a config dict or LinkerConfig."""
    if config is None or isinstance(config, LinkerConfig):
        return Linker(config)
    return Linker(load_config(config))
