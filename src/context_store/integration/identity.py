from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable

# Resolves the identity object owning the caller's private mapping.
IdentityResolver = Callable[[], object]


def current_context() -> object:
    # The running asyncio task when inside one, otherwise the current thread.
    try:
        task = asyncio.current_task()
    except RuntimeError:
        task = None
    if task is not None:
        return task
    return threading.current_thread()


def current_thread() -> object:
    # Thread-only identity: tasks sharing a thread share one mapping.
    return threading.current_thread()
