from __future__ import annotations

from pathlib import Path

import pytest

from context_store.config.loader import PropertySourceError
from context_store.config.properties import PropertySourceLoader
from context_store.integration.context_store import ContextStore
from context_store.observability.adapters.logging import MemoryLogSink


def _resources() -> Path:
    return Path(__file__).resolve().parents[1] / "resources"


def _store(**kwargs: object) -> ContextStore:
    sink = kwargs.pop("log_sink", None)
    loader = PropertySourceLoader([_resources()], log_sink=sink)  # type: ignore[arg-type]
    return ContextStore(loader=loader, bootstrap=False, identity=lambda: "owner", log_sink=sink, **kwargs)  # type: ignore[arg-type]


def test_load_properties_reflects_loaded_values() -> None:
    store = _store()
    store.load_properties("test.properties")
    assert store.get("test-secret") == "secret!"
    assert store.get("test-property") == "test-value-1"


def test_second_source_overwrites_first() -> None:
    store = _store()
    store.load_properties("test.properties")
    store.load_properties("secret.properties")
    assert store.get("test-property") == "test-value-2"
    assert store.get("secret-token") == "s3cr3t"
    assert store.get("test-secret") == "secret!"


def test_load_properties_with_several_names_applies_them_in_order() -> None:
    store = _store()
    store.load_properties("secret.properties", "test.properties")
    assert store.get("test-property") == "test-value-1"


def test_loaded_values_overwrite_existing_entries() -> None:
    store = _store()
    store.put("test-int", 99)
    store.load_properties("test.properties")
    assert store.get_int("test-int") == 15


def test_missing_source_raises_and_merges_nothing() -> None:
    store = _store()
    with pytest.raises(PropertySourceError) as excinfo:
        store.load_properties("does-not-exist.properties")
    assert excinfo.value.name == "does-not-exist.properties"
    assert list(store.items()) == []


def test_failure_keeps_sources_merged_before_it() -> None:
    store = _store()
    with pytest.raises(PropertySourceError):
        store.load_properties("test.properties", "does-not-exist.properties", "secret.properties")
    assert store.get("test-property") == "test-value-1"
    assert store.has("secret-token") is False


def test_malformed_source_raises() -> None:
    store = _store()
    with pytest.raises(PropertySourceError):
        store.load_properties("malformed.properties")
    assert store.has("good") is False


def test_load_failures_are_logged_before_propagating() -> None:
    sink = MemoryLogSink()
    store = _store(log_sink=sink)
    store.load_properties("test.properties")
    with pytest.raises(PropertySourceError):
        store.load_properties("does-not-exist.properties")
    loaded = sink.by_message("property source loaded")
    failed = sink.by_message("property source failed")
    assert [item.fields["source"] for item in loaded] == ["test.properties"]
    assert failed[0].level == "error"
    assert failed[0].fields["source"] == "does-not-exist.properties"


def test_load_system_properties_merges_source() -> None:
    store = _store(system_source=lambda: {"HOME": "/home/tester", "os.name": "Linux"})
    store.put("HOME", "old")
    store.load_system_properties()
    assert store.get("HOME") == "/home/tester"
    assert store.get("os.name") == "Linux"


def test_load_system_properties_failure_propagates() -> None:
    def broken() -> dict[str, str]:
        raise PropertySourceError("<system>", "cannot enumerate system properties")

    store = _store(system_source=broken)
    with pytest.raises(PropertySourceError):
        store.load_system_properties()


def test_default_system_source_includes_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CONTEXT_STORE_TEST_VAR", "from-env")
    store = _store()
    store.load_system_properties()
    assert store.get("CONTEXT_STORE_TEST_VAR") == "from-env"
    assert store.has("python.version") is True
