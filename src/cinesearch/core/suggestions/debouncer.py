"""Cancellable debounce timer for asyncio callers."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Union

logger = logging.getLogger(__name__)

DebouncedCallback = Callable[[], Union[Awaitable[Any], Any]]


class Debouncer:
    """Runs only the last callback triggered within the delay window.

    Every ``trigger`` bumps a generation counter and cancels the pending
    task. The scheduled task re-checks its generation after sleeping, so a
    superseded callback never runs even if cancellation raced with wake-up.

    Args:
        delay: Seconds to wait after the last trigger
    """

    def __init__(self, delay: float) -> None:
        self.delay = delay
        self._generation = 0
        self._task: asyncio.Task[None] | None = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def trigger(self, callback: DebouncedCallback) -> asyncio.Task[None]:
        """Schedule callback, replacing any pending one.

        Must be called from a running event loop.
        """
        self.cancel()
        self._generation += 1
        self._task = asyncio.get_running_loop().create_task(
            self._run(self._generation, callback)
        )
        return self._task

    def cancel(self) -> None:
        """Drop the pending callback, if any."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run(self, generation: int, callback: DebouncedCallback) -> None:
        await asyncio.sleep(self.delay)
        if generation != self._generation:
            return
        result = callback()
        if inspect.isawaitable(result):
            await result
