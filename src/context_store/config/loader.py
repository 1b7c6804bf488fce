from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from context_store.config.models import StoreSettings

# Environment variable pointing at the YAML settings used by the process-wide default store.
CONFIG_ENV_VAR = "CONTEXT_STORE_CONFIG"


# ConfigError is raised for invalid configuration (fail fast).
class ConfigError(ValueError):
    pass


class PropertySourceError(ConfigError):
    # Raised when a property source cannot be found, read or parsed.
    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Property source {name!r}: {reason}")
        self.name = name
        self.reason = reason


def load_yaml_config(path: Path) -> dict[str, object]:
    # Raw YAML loader; returns a mapping for model validation.
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in config file {path}: {exc}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("Config root must be a mapping")
    return raw


def load_settings(path: Path) -> StoreSettings:
    raw = load_yaml_config(path)
    try:
        return StoreSettings.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings in {path}: {exc}") from exc


def settings_from_env(environ: dict[str, str] | None = None) -> StoreSettings:
    # Defaults apply when no settings file is configured.
    env = os.environ if environ is None else environ
    path = env.get(CONFIG_ENV_VAR)
    if not path:
        return StoreSettings()
    return load_settings(Path(path))
