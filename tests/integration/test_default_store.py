from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

import context_store
from context_store.config.properties import PropertySourceLoader
from context_store.integration.context_store import ContextStore


@pytest.fixture
def installed() -> Iterator[ContextStore]:
    # Module-level functions delegate to the process-wide store; swap in an isolated one.
    resources = Path(__file__).resolve().parents[1] / "resources"
    store = ContextStore(
        loader=PropertySourceLoader([resources]),
        bootstrap_sources=["test.properties"],
        identity=lambda: "owner",
    )
    context_store.set_default_store(store)
    yield store
    context_store.set_default_store(None)


def test_module_functions_use_default_store(installed: ContextStore) -> None:
    assert context_store.default_store() is installed
    assert context_store.ensure_initialized() == ["test.properties"]
    assert context_store.get("test-secret") == "secret!"
    assert context_store.get("non-existent-property", "default-value") == "default-value"
    context_store.load_properties("secret.properties")
    assert context_store.get("test-property") == "test-value-2"


def test_module_typed_getters(installed: ContextStore) -> None:
    assert context_store.get_boolean("test-bool") is True
    assert context_store.get_boolean("test-false-bool", True) is False
    assert context_store.get_int("test-int") == 15
    assert context_store.get_int("test-false-primitive", 10) == 10
    assert context_store.get_double("test-double") == 4.3
    assert context_store.get_string("test-int") == "15"


def test_module_mutators(installed: ContextStore) -> None:
    context_store.put("k", "v")
    context_store.update("k", "v2")
    context_store.update("absent", "x")
    assert context_store.has("k") is True
    assert context_store.has("absent") is False
    assert context_store.get("k") == "v2"
    context_store.merge({"a": "1"}, {"a": "2"})
    assert context_store.get("a") == "2"
    context_store.remove("k")
    assert "k" not in context_store.items()
    context_store.load_system_properties()
    assert context_store.has("python.version") is True
    context_store.clear()
    assert list(context_store.items()) == []


def test_default_store_built_from_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    settings = tmp_path / "settings.yml"
    settings.write_text("bootstrap:\n  enabled: false\n", encoding="utf-8")
    monkeypatch.setenv("CONTEXT_STORE_CONFIG", str(settings))
    context_store.set_default_store(None)
    try:
        store = context_store.default_store()
        assert store.ensure_initialized() == []
        assert context_store.default_store() is store
    finally:
        context_store.set_default_store(None)
