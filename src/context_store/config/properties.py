from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path
from typing import NoReturn

from context_store.config.loader import PropertySourceError
from context_store.observability.domain.logging import LogMessage
from context_store.ports.log_sink import LogSink

# Line format follows java.util.Properties: comments, separators, continuations and escapes.

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_BLANK = " \t\f"
_SEPARATORS = "=:"
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def parse_properties(text: str, *, name: str = "<string>") -> dict[str, str]:
    # Ordered key/value pairs; a repeated key keeps its last value.
    result: dict[str, str] = {}
    for line_no, line in _logical_lines(text):
        key, value = _split_pair(line)
        result[_unescape(key, name=name, line_no=line_no)] = _unescape(value, name=name, line_no=line_no)
    return result


def _logical_lines(text: str) -> list[tuple[int, str]]:
    lines: list[tuple[int, str]] = []
    pending: list[str] = []
    start = 0
    for index, physical in enumerate(_LINE_BREAK.split(text), start=1):
        stripped = physical.lstrip(_BLANK)
        if not pending:
            if not stripped or stripped[0] in "#!":
                continue
            start = index
        elif not stripped:
            # A blank continuation line terminates the logical line.
            lines.append((start, "".join(pending)))
            pending = []
            continue
        if _trailing_backslashes(stripped) % 2 == 1:
            pending.append(stripped[:-1])
            continue
        pending.append(stripped)
        lines.append((start, "".join(pending)))
        pending = []
    if pending:
        lines.append((start, "".join(pending)))
    return lines


def _trailing_backslashes(line: str) -> int:
    return len(line) - len(line.rstrip("\\"))


def _split_pair(line: str) -> tuple[str, str]:
    index = 0
    length = len(line)
    while index < length:
        char = line[index]
        if char == "\\":
            index += 2
            continue
        if char in _SEPARATORS or char in _BLANK:
            break
        index += 1
    key = line[:min(index, length)]
    rest = line[index:].lstrip(_BLANK)
    if rest and rest[0] in _SEPARATORS:
        rest = rest[1:].lstrip(_BLANK)
    return key, rest


def _unescape(raw: str, *, name: str, line_no: int) -> str:
    if "\\" not in raw:
        return raw
    out: list[str] = []
    index = 0
    length = len(raw)
    while index < length:
        char = raw[index]
        index += 1
        if char != "\\":
            out.append(char)
            continue
        if index >= length:
            break
        escaped = raw[index]
        index += 1
        if escaped == "u":
            digits = raw[index:index + 4]
            if len(digits) != 4 or not all(c in "0123456789abcdefABCDEF" for c in digits):
                raise PropertySourceError(name, f"malformed \\uxxxx encoding at line {line_no}")
            out.append(chr(int(digits, 16)))
            index += 4
            continue
        out.append(_ESCAPES.get(escaped, escaped))
    return "".join(out)


class PropertySourceLoader:
    # Resolves a resource name against search paths and parses it into a property mapping.
    def __init__(
        self,
        search_paths: Sequence[str | Path] = (".", "resources"),
        *,
        encoding: str = "latin-1",
        log_sink: LogSink | None = None,
    ) -> None:
        self._search_paths = [Path(path) for path in search_paths]
        self._encoding = encoding
        self._log_sink = log_sink

    @property
    def search_paths(self) -> list[Path]:
        return list(self._search_paths)

    def resolve(self, name: str) -> Path | None:
        candidate = Path(name)
        if candidate.is_absolute():
            return candidate if candidate.is_file() else None
        for base in self._search_paths:
            path = base / candidate
            if path.is_file():
                return path
        return None

    def exists(self, name: str) -> bool:
        return self.resolve(name) is not None

    def load(self, name: str) -> dict[str, str]:
        path = self.resolve(name)
        if path is None:
            searched = [str(base) for base in self._search_paths]
            self._fail(name, "resource not found", searched=searched)
        try:
            text = path.read_text(encoding=self._encoding)
        except (OSError, UnicodeDecodeError, LookupError) as exc:
            self._fail(name, f"cannot read {path}: {exc}")
        try:
            properties = parse_properties(text, name=name)
        except PropertySourceError as exc:
            self._emit("error", "property source malformed", source=name, path=str(path), reason=exc.reason)
            raise
        self._emit("debug", "property source loaded", source=name, path=str(path), entries=len(properties))
        return properties

    def _fail(self, name: str, reason: str, **fields: object) -> NoReturn:
        self._emit("error", "property source failed", source=name, reason=reason, **fields)
        raise PropertySourceError(name, reason)

    def _emit(self, level: str, message: str, **fields: object) -> None:
        if self._log_sink is not None:
            self._log_sink.emit(LogMessage(level=level, message=message, fields=dict(fields)))
