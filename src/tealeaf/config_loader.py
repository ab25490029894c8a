"""Load TealeafConfig from tealeaf.yaml or tealeaf.toml if present.

Merges file config with keyword overrides. Overrides take precedence.
"""

from __future__ import annotations

import tomllib
from dataclasses import fields
from pathlib import Path

import yaml

from tealeaf._errors import ConfigError
from tealeaf.config import TealeafConfig

_KNOWN_KEYS = frozenset(f.name for f in fields(TealeafConfig))


def load_config(root: Path, **overrides: object) -> TealeafConfig:
    """Load TealeafConfig from root, optionally merging a config file.

    Looks for tealeaf.yaml, tealeaf.yml, or tealeaf.toml in root. If found,
    loads and merges with overrides. Overrides take precedence.

    Raises:
        ConfigError: The file is malformed or names an unknown key.

    """
    file_config = _read_tealeaf_config(root)
    merged = {**file_config, **overrides}
    unknown = set(merged) - _KNOWN_KEYS
    if unknown:
        msg = f"Unknown tealeaf config keys: {', '.join(sorted(unknown))}"
        raise ConfigError(msg)
    return TealeafConfig(**merged)  # type: ignore[arg-type]


def _read_tealeaf_config(root: Path) -> dict[str, object]:
    """Read tealeaf config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("tealeaf.yaml", "tealeaf.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "tealeaf.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        msg = f"Invalid YAML in {path.name}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path.name} must contain a mapping, got {type(data).__name__}"
        raise ConfigError(msg)
    return _flatten_tealeaf_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path.name}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_tealeaf_section(data)


def _flatten_tealeaf_section(data: dict[str, object]) -> dict[str, object]:
    """Extract tealeaf.* keys into top-level config."""
    result: dict[str, object] = {}
    section = data.get("tealeaf")
    if isinstance(section, dict):
        result.update(section)
    for k, v in data.items():
        if k != "tealeaf" and k in _KNOWN_KEYS:
            result[k] = v
    return result
