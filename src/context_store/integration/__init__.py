# Integration package: the context store, its registry and the process-wide default instance.

from context_store.integration.context_registry import ContextRegistry
from context_store.integration.context_store import ContextEntries, ContextStore
from context_store.integration.identity import current_context, current_thread

__all__ = [
    "ContextEntries",
    "ContextRegistry",
    "ContextStore",
    "current_context",
    "current_thread",
]
