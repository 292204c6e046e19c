from __future__ import annotations

import asyncio
import threading

from gtopreflop.features.concurrency import run_blocking


def _describe(value: int, *, scale: int = 1) -> tuple[int, str]:
    return value * scale, threading.current_thread().name


def test_run_blocking_runs_on_the_worker_pool() -> None:
    result, thread_name = asyncio.run(run_blocking(_describe, 7, scale=3))
    assert result == 21
    assert thread_name.startswith("gtopreflop")
