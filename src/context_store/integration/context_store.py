from __future__ import annotations

import re
from collections.abc import Callable, KeysView, Mapping, Sequence
from threading import Lock

from context_store.config.loader import PropertySourceError
from context_store.config.models import DEFAULT_PROPERTY_SOURCES, StoreSettings
from context_store.config.properties import PropertySourceLoader
from context_store.config.system import system_properties
from context_store.integration.context_registry import ContextRegistry
from context_store.integration.identity import IdentityResolver, current_context
from context_store.observability.adapters.logging import build_log_sink
from context_store.observability.domain.logging import LogMessage
from context_store.ports.log_sink import LogSink

_INT_TEXT = re.compile(r"[+-]?[0-9]+")
_DOUBLE_TEXT = re.compile(r"[+-]?(?:NaN|Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?[fFdD]?)")
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1

SystemSource = Callable[[], Mapping[str, str]]


def parse_boolean(text: str) -> bool:
    # Lax: only "true" in any case is True, everything else is False.
    return text.lower() == "true"


def parse_int(text: str) -> int | None:
    # Signed 32-bit base-10; None when the text is not an integer or overflows.
    if not _INT_TEXT.fullmatch(text):
        return None
    value = int(text)
    if value < _INT_MIN or value > _INT_MAX:
        return None
    return value


def parse_double(text: str) -> float | None:
    # Decimal with optional exponent and f/d suffix, or exactly "NaN" / "Infinity".
    text = text.strip()
    if not _DOUBLE_TEXT.fullmatch(text):
        return None
    return float(text.rstrip("fFdD"))


class ContextEntries:
    """Operations over one execution context's private mapping.

    ``None`` keys and values are never stored: mutators given either one do
    nothing. Typed getters read through :meth:`get` and parse ``str(value)``.
    A missing key yields the default; an unparsable number yields the default
    too, while the boolean getter never fails and maps anything other than
    ``"true"`` (any case) to ``False`` even when a default was supplied.
    """

    __slots__ = ("_mapping", "_loader", "_system_source")

    def __init__(
        self,
        mapping: dict[object, object],
        *,
        loader: PropertySourceLoader,
        system_source: SystemSource = system_properties,
    ) -> None:
        self._mapping = mapping
        self._loader = loader
        self._system_source = system_source

    def put(self, key: object, value: object) -> None:
        if key is None or value is None:
            return
        self._mapping[key] = value

    def remove(self, key: object) -> None:
        if key is None:
            return
        self._mapping.pop(key, None)

    def get(self, key: object, default: object = None) -> object:
        # The only primitive read; a stored value is returned as-is.
        if key is None:
            return default
        value = self._mapping.get(key)
        return default if value is None else value

    def get_string(self, key: object, default: str | None = None) -> str | None:
        value = self.get(key)
        return default if value is None else str(value)

    def get_boolean(self, key: object, default: bool = False) -> bool:
        value = self.get(key)
        if value is None:
            return default
        return parse_boolean(str(value))

    def get_int(self, key: object, default: int = 0) -> int:
        value = self.get(key)
        if value is None:
            return default
        parsed = parse_int(str(value))
        return default if parsed is None else parsed

    def get_double(self, key: object, default: float = 0.0) -> float:
        value = self.get(key)
        if value is None:
            return default
        parsed = parse_double(str(value))
        return default if parsed is None else parsed

    def items(self) -> KeysView[object]:
        # Live, read-only view over the keys.
        return self._mapping.keys()

    def has(self, key: object) -> bool:
        if key is None:
            return False
        return self._mapping.get(key) is not None

    def update(self, key: object, value: object) -> None:
        # Replaces only existing entries; put() is the inserting variant.
        if key is None or value is None:
            return
        if key in self._mapping:
            self._mapping[key] = value

    def merge(self, *sources: Mapping[object, object]) -> None:
        # Later sources win on key collision.
        for source in sources:
            for key, value in source.items():
                self.put(key, value)

    def clear(self) -> None:
        self._mapping.clear()

    def snapshot(self) -> dict[object, object]:
        return dict(self._mapping)

    def load_properties(self, *names: str) -> None:
        # Sources load and merge one at a time; a failing name leaves earlier merges in place.
        for name in names:
            self.merge(self._loader.load(name))

    def load_system_properties(self) -> None:
        self.merge(self._system_source())

    def __len__(self) -> int:
        return len(self._mapping)

    def __contains__(self, key: object) -> bool:
        return self.has(key)


class ContextStore:
    """Per-execution-context key-value store.

    Every thread (or asyncio task, with the default identity resolver) gets its
    own private mapping, created on first touch and seeded with a copy of the
    baseline loaded from the default property sources. The registry lookup is
    the only synchronized step; operations on a mapping run without a
    cross-context lock.

    Bootstrap runs once, either explicitly through :meth:`ensure_initialized`
    or lazily on the first operation. Missing default sources are skipped
    unless ``strict_bootstrap`` is set; malformed ones always raise.
    """

    def __init__(
        self,
        *,
        loader: PropertySourceLoader | None = None,
        bootstrap_sources: Sequence[str] = DEFAULT_PROPERTY_SOURCES,
        bootstrap: bool = True,
        strict_bootstrap: bool = False,
        identity: IdentityResolver = current_context,
        system_source: SystemSource = system_properties,
        log_sink: LogSink | None = None,
    ) -> None:
        self._log_sink = log_sink
        self._loader = loader if loader is not None else PropertySourceLoader(log_sink=log_sink)
        self._bootstrap_sources = tuple(bootstrap_sources) if bootstrap else ()
        self._strict_bootstrap = strict_bootstrap
        self._identity = identity
        self._system_source = system_source
        self._baseline: dict[object, object] = {}
        self._loaded_sources: list[str] = []
        self._initialized = False
        self._bootstrap_lock = Lock()
        self._registry = ContextRegistry(seed=self._seed)

    @classmethod
    def from_settings(
        cls,
        settings: StoreSettings,
        *,
        identity: IdentityResolver = current_context,
        system_source: SystemSource = system_properties,
        log_sink: LogSink | None = None,
    ) -> ContextStore:
        sink = log_sink if log_sink is not None else build_log_sink(settings.logging)
        loader = PropertySourceLoader(
            settings.properties.search_paths,
            encoding=settings.properties.encoding,
            log_sink=sink,
        )
        return cls(
            loader=loader,
            bootstrap_sources=settings.bootstrap.sources,
            bootstrap=settings.bootstrap.enabled,
            strict_bootstrap=settings.bootstrap.strict,
            identity=identity,
            system_source=system_source,
            log_sink=sink,
        )

    @property
    def loader(self) -> PropertySourceLoader:
        return self._loader

    @property
    def log_sink(self) -> LogSink | None:
        return self._log_sink

    @property
    def initialized(self) -> bool:
        return self._initialized

    def ensure_initialized(self) -> list[str]:
        # Idempotent; returns the default sources that were found and merged into the baseline.
        if self._initialized:
            return list(self._loaded_sources)
        with self._bootstrap_lock:
            if not self._initialized:
                self._bootstrap()
            return list(self._loaded_sources)

    def current(self) -> ContextEntries:
        # Entries of the calling execution context.
        return self.view(self._identity())

    def view(self, owner: object) -> ContextEntries:
        # Entries of an explicitly supplied owner object.
        self.ensure_initialized()
        return ContextEntries(
            self._registry.mapping_for(owner),
            loader=self._loader,
            system_source=self._system_source,
        )

    def discard(self, owner: object | None = None) -> bool:
        # Drops an owner's mapping entirely; the next touch reseeds it from the baseline.
        return self._registry.discard(self._identity() if owner is None else owner)

    def contexts(self) -> int:
        return len(self._registry)

    def put(self, key: object, value: object) -> None:
        self.current().put(key, value)

    def remove(self, key: object) -> None:
        self.current().remove(key)

    def get(self, key: object, default: object = None) -> object:
        return self.current().get(key, default)

    def get_string(self, key: object, default: str | None = None) -> str | None:
        return self.current().get_string(key, default)

    def get_boolean(self, key: object, default: bool = False) -> bool:
        return self.current().get_boolean(key, default)

    def get_int(self, key: object, default: int = 0) -> int:
        return self.current().get_int(key, default)

    def get_double(self, key: object, default: float = 0.0) -> float:
        return self.current().get_double(key, default)

    def items(self) -> KeysView[object]:
        return self.current().items()

    def has(self, key: object) -> bool:
        return self.current().has(key)

    def update(self, key: object, value: object) -> None:
        self.current().update(key, value)

    def merge(self, *sources: Mapping[object, object]) -> None:
        self.current().merge(*sources)

    def clear(self) -> None:
        self.current().clear()

    def snapshot(self) -> dict[object, object]:
        return self.current().snapshot()

    def load_properties(self, *names: str) -> None:
        self.current().load_properties(*names)

    def load_system_properties(self) -> None:
        self.current().load_system_properties()

    def _seed(self) -> dict[object, object]:
        return dict(self._baseline)

    def _bootstrap(self) -> None:
        baseline: dict[object, object] = {}
        loaded: list[str] = []
        for name in self._bootstrap_sources:
            if not self._strict_bootstrap and not self._loader.exists(name):
                self._emit("warning", "default property source skipped", source=name)
                continue
            try:
                baseline.update(self._loader.load(name))
            except PropertySourceError:
                self._emit("error", "bootstrap failed", source=name)
                raise
            loaded.append(name)
        self._baseline = baseline
        self._loaded_sources = loaded
        self._initialized = True
        self._emit("info", "bootstrap complete", sources=list(loaded), entries=len(baseline))

    def _emit(self, level: str, message: str, **fields: object) -> None:
        if self._log_sink is not None:
            self._log_sink.emit(LogMessage(level=level, message=message, fields=dict(fields)))
