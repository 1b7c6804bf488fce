from __future__ import annotations

import weakref
from collections.abc import Callable
from threading import Lock


class ContextRegistry:
    # Process-wide owner -> private mapping registry; the only state shared between contexts.
    def __init__(self, seed: Callable[[], dict[object, object]] | None = None) -> None:
        self._seed = seed if seed is not None else dict
        self._weak: weakref.WeakKeyDictionary[object, dict[object, object]] = weakref.WeakKeyDictionary()
        self._strong: dict[object, dict[object, object]] = {}
        self._lock = Lock()

    def mapping_for(self, owner: object) -> dict[object, object]:
        # Exactly one mapping per owner, even when first touches race.
        with self._lock:
            table = self._table_for(owner)
            mapping = table.get(owner)
            if mapping is None:
                mapping = self._seed()
                table[owner] = mapping
            return mapping

    def discard(self, owner: object) -> bool:
        with self._lock:
            table = self._table_for(owner)
            return table.pop(owner, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._weak) + len(self._strong)

    def _table_for(self, owner: object) -> dict[object, dict[object, object]] | weakref.WeakKeyDictionary:
        # Threads and tasks are weak-referenced so their mappings go away with them;
        # owners without weakref support (plain strings, ints) are held strongly.
        try:
            weakref.ref(owner)
        except TypeError:
            return self._strong
        return self._weak
