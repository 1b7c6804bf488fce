from __future__ import annotations

import json
import sys
from pathlib import Path
from threading import Lock
from typing import TextIO

from context_store.config.models import LoggingSettings
from context_store.observability.domain.logging import LogMessage, level_rank
from context_store.ports.log_sink import LogSink


class StdoutLogSink:
    # Compact JSON per line on a text stream (stdout unless overridden).
    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def emit(self, message: LogMessage) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        print(json.dumps(_log_to_dict(message), separators=(",", ":"), ensure_ascii=False, default=str), file=stream)

    def close(self) -> None:
        return None


class JsonlLogSink:
    # File-backed structured log sink; appends one JSON object per message.
    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self._path.open("a", encoding="utf-8")
        self._lock = Lock()

    def emit(self, message: LogMessage) -> None:
        payload = json.dumps(_log_to_dict(message), separators=(",", ":"), ensure_ascii=False, default=str)
        with self._lock:
            self._file.write(payload + "\n")
            self._file.flush()

    def close(self) -> None:
        with self._lock:
            self._file.close()


class MemoryLogSink:
    # Collects messages for tests and in-process inspection.
    def __init__(self) -> None:
        self.messages: list[LogMessage] = []
        self._lock = Lock()

    def emit(self, message: LogMessage) -> None:
        with self._lock:
            self.messages.append(message)

    def close(self) -> None:
        return None

    def by_message(self, text: str) -> list[LogMessage]:
        with self._lock:
            return [item for item in self.messages if item.message == text]


class NullLogSink:
    def emit(self, message: LogMessage) -> None:
        _ = message

    def close(self) -> None:
        return None


class LevelFilterSink:
    # Drops messages below the configured minimum level before delegating.
    def __init__(self, inner: LogSink, level: str) -> None:
        self._inner = inner
        self._min_rank = level_rank(level)

    @property
    def inner(self) -> LogSink:
        return self._inner

    def emit(self, message: LogMessage) -> None:
        if level_rank(message.level) >= self._min_rank:
            self._inner.emit(message)

    def close(self) -> None:
        self._inner.close()


def build_log_sink(settings: LoggingSettings, *, stream: TextIO | None = None) -> LogSink:
    # Sink selection mirrors logging.sink; the level filter wraps every real sink.
    # stream redirects the stdout sink, e.g. to stderr when stdout carries program output.
    if settings.sink == "none":
        return NullLogSink()
    if settings.sink == "stdout":
        inner: LogSink = StdoutLogSink(stream)
    elif settings.sink == "jsonl":
        if not settings.path:
            raise ValueError("logging.path must be a non-empty string for the jsonl sink")
        inner = JsonlLogSink(Path(settings.path))
    else:
        inner = MemoryLogSink()
    return LevelFilterSink(inner, settings.level)


def _log_to_dict(message: LogMessage) -> dict[str, object]:
    return {
        "level": message.level,
        "message": message.message,
        "timestamp": message.timestamp.isoformat().replace("+00:00", "Z"),
        "fields": message.fields,
    }
