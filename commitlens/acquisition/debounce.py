"""Collapse bursts of triggers into a single call."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class Debouncer:
    """Runs ``callback`` once, ``delay`` seconds after the last trigger."""

    def __init__(self, delay: float, callback: Callable[[], Awaitable[object]]) -> None:
        self.delay = delay
        self.callback = callback
        self._task: asyncio.Task[None] | None = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def trigger(self) -> None:
        """Schedule the callback, restarting the delay if one is pending.

        Must be called from a running event loop.
        """
        self.cancel()
        self._task = asyncio.create_task(self._run())

    def cancel(self) -> None:
        if self.pending and self._task is not None:
            self._task.cancel()
        self._task = None

    async def wait(self) -> None:
        """Wait for a scheduled callback to finish, if any."""
        if self._task is not None:
            await asyncio.wait({self._task})

    async def _run(self) -> None:
        await asyncio.sleep(self.delay)
        try:
            await self.callback()
        except Exception:
            logger.exception("Debounced callback failed")
