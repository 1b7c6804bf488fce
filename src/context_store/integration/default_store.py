from __future__ import annotations

from collections.abc import KeysView, Mapping
from threading import Lock

from context_store.config.loader import settings_from_env
from context_store.integration.context_store import ContextStore

# Process-wide store backing the module-level functions; settings come from CONTEXT_STORE_CONFIG.
_default: ContextStore | None = None
_default_lock = Lock()


def default_store() -> ContextStore:
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = ContextStore.from_settings(settings_from_env())
    return _default


def set_default_store(store: ContextStore | None) -> None:
    # Replaces (or with None, resets) the process-wide store; mainly for tests and embedding hosts.
    global _default
    with _default_lock:
        _default = store


def ensure_initialized() -> list[str]:
    return default_store().ensure_initialized()


def put(key: object, value: object) -> None:
    default_store().put(key, value)


def remove(key: object) -> None:
    default_store().remove(key)


def get(key: object, default: object = None) -> object:
    return default_store().get(key, default)


def get_string(key: object, default: str | None = None) -> str | None:
    return default_store().get_string(key, default)


def get_boolean(key: object, default: bool = False) -> bool:
    return default_store().get_boolean(key, default)


def get_int(key: object, default: int = 0) -> int:
    return default_store().get_int(key, default)


def get_double(key: object, default: float = 0.0) -> float:
    return default_store().get_double(key, default)


def items() -> KeysView[object]:
    return default_store().items()


def has(key: object) -> bool:
    return default_store().has(key)


def update(key: object, value: object) -> None:
    default_store().update(key, value)


def merge(*sources: Mapping[object, object]) -> None:
    default_store().merge(*sources)


def clear() -> None:
    default_store().clear()


def load_properties(*names: str) -> None:
    default_store().load_properties(*names)


def load_system_properties() -> None:
    default_store().load_system_properties()
