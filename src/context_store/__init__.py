from context_store.config.loader import ConfigError, PropertySourceError
from context_store.integration.context_store import ContextEntries, ContextStore
from context_store.integration.default_store import (
    clear,
    default_store,
    ensure_initialized,
    get,
    get_boolean,
    get_double,
    get_int,
    get_string,
    has,
    items,
    load_properties,
    load_system_properties,
    merge,
    put,
    remove,
    set_default_store,
    update,
)

__all__ = [
    "ConfigError",
    "PropertySourceError",
    "ContextEntries",
    "ContextStore",
    "default_store",
    "set_default_store",
    "ensure_initialized",
    "put",
    "remove",
    "get",
    "get_string",
    "get_boolean",
    "get_int",
    "get_double",
    "items",
    "has",
    "update",
    "merge",
    "clear",
    "load_properties",
    "load_system_properties",
]
