"""Worker pool that keeps lock-taking room calls off the event loop.

The pool is started on first use and torn down by the application lifespan.
A call made after shutdown starts a fresh pool, so apps built in tests can
come and go without sharing a dead executor.
"""

from __future__ import annotations

import asyncio
import os
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any, Final, TypeVar

__all__ = ["WORKER_COUNT", "run_blocking", "shutdown_workers"]

R = TypeVar("R")

# room calls only wait on locks, never on CPU
WORKER_COUNT: Final = max(4, min(32, (os.cpu_count() or 1) * 4))

_pool: ThreadPoolExecutor | None = None
_pool_guard = threading.Lock()


def _workers() -> ThreadPoolExecutor:
    global _pool
    with _pool_guard:
        if _pool is None:
            _pool = ThreadPoolExecutor(max_workers=WORKER_COUNT, thread_name_prefix="secretsanta-room")
        return _pool


async def run_blocking(func: Callable[..., R], /, *args: Any, **kwargs: Any) -> R:
    call = partial(func, *args, **kwargs)
    return await asyncio.get_running_loop().run_in_executor(_workers(), call)


def shutdown_workers(wait: bool = True) -> None:
    global _pool
    with _pool_guard:
        pool, _pool = _pool, None
    if pool is not None:
        pool.shutdown(wait=wait)
