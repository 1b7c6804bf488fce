from .loader import CONFIG_ENV_VAR, ConfigError, PropertySourceError, load_settings, load_yaml_config, settings_from_env
from .models import DEFAULT_PROPERTY_SOURCES, BootstrapSettings, LoggingSettings, PropertiesSettings, StoreSettings
from .properties import PropertySourceLoader, parse_properties
from .system import system_properties

__all__ = [
    "CONFIG_ENV_VAR",
    "ConfigError",
    "PropertySourceError",
    "load_settings",
    "load_yaml_config",
    "settings_from_env",
    "DEFAULT_PROPERTY_SOURCES",
    "BootstrapSettings",
    "LoggingSettings",
    "PropertiesSettings",
    "StoreSettings",
    "PropertySourceLoader",
    "parse_properties",
    "system_properties",
]
