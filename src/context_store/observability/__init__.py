# Adapters are imported from context_store.observability.adapters; the package root stays dependency-free.
from .domain import LogMessage

__all__ = ["LogMessage"]
