from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

from context_store.config.loader import ConfigError, load_settings
from context_store.config.models import StoreSettings
from context_store.integration.context_store import (
    ContextEntries,
    ContextStore,
    parse_boolean,
    parse_double,
    parse_int,
)
from context_store.observability.adapters.logging import build_log_sink

# Thin shell over ContextStore: build from settings, load sources, print the result as JSON.

_TYPED_GETTERS = {
    "str": "get_string",
    "bool": "get_boolean",
    "int": "get_int",
    "float": "get_double",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="context-store", description="Inspect context store configuration")
    parser.add_argument("--config", help="Path to YAML settings")
    parser.add_argument(
        "--load",
        action="append",
        default=[],
        metavar="NAME",
        help="Property source to merge (repeatable, later wins)",
    )
    parser.add_argument("--system", action="store_true", help="Merge system properties before --load sources")
    parser.add_argument("--no-bootstrap", action="store_true", help="Skip default property sources")
    parser.add_argument("--get", metavar="KEY", help="Print a single value instead of the whole mapping")
    parser.add_argument("--type", choices=sorted(_TYPED_GETTERS), default="str", help="Coercion for --get")
    parser.add_argument("--default", help="Default for --get, coerced like the value")
    return parser


def parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def settings_for(args: argparse.Namespace) -> StoreSettings:
    settings = load_settings(Path(args.config)) if args.config else StoreSettings()
    if args.no_bootstrap:
        settings.bootstrap.enabled = False
    return settings


def coerce_default(kind: str, text: str) -> object:
    # The default is coerced with the same rules as a stored value; numeric text must parse.
    if kind == "str":
        return text
    if kind == "bool":
        return parse_boolean(text)
    parsed = parse_int(text) if kind == "int" else parse_double(text)
    if parsed is None:
        raise ConfigError(f"--default {text!r} is not a valid {kind}")
    return parsed


def read_value(entries: ContextEntries, key: str, kind: str, default: str | None) -> object:
    getter = getattr(entries, _TYPED_GETTERS[kind])
    if default is None:
        return getter(key)
    return getter(key, coerce_default(kind, default))


def run(argv: Sequence[str] | None = None, *, stdout: TextIO | None = None, stderr: TextIO | None = None) -> int:
    out = stdout if stdout is not None else sys.stdout
    err = stderr if stderr is not None else sys.stderr
    args = parse_args(argv)
    store: ContextStore | None = None
    try:
        settings = settings_for(args)
        # Log lines go to stderr so stdout stays a single JSON document.
        store = ContextStore.from_settings(settings, log_sink=build_log_sink(settings.logging, stream=err))
        entries = store.current()
        if args.system:
            entries.load_system_properties()
        entries.load_properties(*args.load)
        if args.get is not None:
            payload: object = read_value(entries, args.get, args.type, args.default)
        else:
            payload = _mapping_payload(entries)
    except ConfigError as exc:
        print(f"context-store: {exc}", file=err)
        return 2
    finally:
        if store is not None and store.log_sink is not None:
            store.log_sink.close()
    print(json.dumps(payload, ensure_ascii=False, default=str), file=out)
    return 0


def _mapping_payload(entries: ContextEntries) -> dict[str, object]:
    # Keys are rendered as text and sorted for stable output.
    snapshot = entries.snapshot()
    return {str(key): snapshot[key] for key in sorted(snapshot, key=str)}
