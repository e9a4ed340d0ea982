"""Timer-gated coalescing of rapid calls (search box input)."""

import asyncio
from typing import Any, Awaitable, Callable, Optional

from job_match_ai.config import SEARCH_DEBOUNCE_SECONDS


class Debouncer:
    """
    Calls an async function at most once per quiet window.
    A call inside the window replaces the pending one; a call that already
    fired runs to completion and is never cancelled.
    """

    def __init__(
        self,
        fn: Callable[..., Awaitable[Any]],
        wait: float = SEARCH_DEBOUNCE_SECONDS,
    ) -> None:
        self._fn = fn
        self._wait = wait
        self._timer: Optional[asyncio.Task] = None
        self._running: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def __call__(self, *args: Any) -> None:
        """Schedule fn(*args); must be called from inside a running event loop."""
        self.cancel()
        self._timer = asyncio.get_running_loop().create_task(self._fire_later(args))

    async def _fire_later(self, args: tuple) -> None:
        await asyncio.sleep(self._wait)
        self._running = asyncio.ensure_future(self._fn(*args))

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        if self.pending:
            self._timer.cancel()
        self._timer = None

    async def flush(self) -> None:
        """Wait for the pending call (if any) to fire and complete."""
        if self._timer is not None:
            await self._timer
        if self._running is not None:
            await self._running
