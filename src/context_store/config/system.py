from __future__ import annotations

import getpass
import os
import platform
from collections.abc import Mapping
from pathlib import Path

from context_store.config.loader import PropertySourceError

SYSTEM_SOURCE_NAME = "<system>"


def runtime_properties() -> dict[str, str]:
    # Interpreter/host facts under the conventional system-property names.
    try:
        user = getpass.getuser()
    except (KeyError, OSError):
        user = ""
    return {
        "os.name": platform.system(),
        "os.arch": platform.machine(),
        "python.version": platform.python_version(),
        "python.implementation": platform.python_implementation(),
        "user.dir": os.getcwd(),
        "user.home": str(Path.home()),
        "user.name": user,
        "file.separator": os.sep,
        "path.separator": os.pathsep,
        "line.separator": os.linesep,
    }


def system_properties(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    # Process environment overlaid with runtime properties; runtime properties win.
    try:
        merged = dict(os.environ if environ is None else environ)
        merged.update(runtime_properties())
    except (OSError, RuntimeError) as exc:
        raise PropertySourceError(SYSTEM_SOURCE_NAME, f"cannot enumerate system properties: {exc}") from exc
    return merged
