from .logging import JsonlLogSink, LevelFilterSink, MemoryLogSink, NullLogSink, StdoutLogSink, build_log_sink

__all__ = [
    "StdoutLogSink",
    "JsonlLogSink",
    "MemoryLogSink",
    "NullLogSink",
    "LevelFilterSink",
    "build_log_sink",
]
