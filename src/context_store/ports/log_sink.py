from __future__ import annotations

from typing import Protocol, runtime_checkable

from context_store.observability.domain.logging import LogMessage


# LogSink is a port-like interface for structured log adapters.
@runtime_checkable
class LogSink(Protocol):
    def emit(self, message: LogMessage) -> None:
        """Consume one LogMessage."""
        raise NotImplementedError("LogSink is a port; use a concrete adapter.")

    def close(self) -> None:
        """Close the sink and release resources."""
        raise NotImplementedError("LogSink is a port; use a concrete adapter.")
