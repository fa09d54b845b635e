"""Short/long press disambiguation for the opener button.

A press schedules the long outcome. Releasing before the threshold cancels
it and schedules the short outcome instead; the long outcome cancels a
pending short one. Each press yields exactly one outcome.
"""

import asyncio
import inspect
from collections.abc import Callable
from typing import Any

import structlog

logger = structlog.get_logger()


class PressDisambiguator:
    """Turns press/release pairs into short or long press callbacks."""

    def __init__(
        self,
        on_short: Callable[[], Any],
        on_long: Callable[[], Any],
        long_press_seconds: float = 0.4,
    ):
        """Initialize the disambiguator.

        Args:
            on_short: Called for a press released before the threshold.
            on_long: Called once the press has been held for the threshold.
            long_press_seconds: Hold time that makes a press long.

        Coroutine functions are accepted; their coroutines run as tasks.
        """
        self._on_short = on_short
        self._on_long = on_long
        self._threshold = long_press_seconds
        self._long_handle: asyncio.TimerHandle | None = None
        self._short_handle: asyncio.Handle | None = None
        self._pressed = False
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        """True while an outcome is scheduled but has not fired."""
        return self._long_handle is not None or self._short_handle is not None

    def press(self) -> None:
        """Start a press. Must be called from a running event loop."""
        self.cancel()
        self._pressed = True
        loop = asyncio.get_running_loop()
        self._long_handle = loop.call_later(self._threshold, self._fire_long)

    def release(self) -> None:
        """End the current press.

        Reason: the short outcome is scheduled with ``call_soon`` instead of
        running inline, so the release handler returns at once and both
        outcomes are fired from the loop in the same way.
        """
        if not self._pressed:
            return
        self._pressed = False

        if self._long_handle is None:
            # Long outcome already fired
            return

        self._long_handle.cancel()
        self._long_handle = None
        self._short_handle = asyncio.get_running_loop().call_soon(self._fire_short)

    def cancel(self) -> None:
        """Drop any scheduled outcome without firing it."""
        if self._long_handle is not None:
            self._long_handle.cancel()
            self._long_handle = None
        if self._short_handle is not None:
            self._short_handle.cancel()
            self._short_handle = None
        self._pressed = False

    async def wait_idle(self) -> None:
        """Wait for callback tasks started by fired outcomes."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _fire_long(self) -> None:
        self._long_handle = None
        if self._short_handle is not None:
            self._short_handle.cancel()
            self._short_handle = None
        self._dispatch(self._on_long, "long")

    def _fire_short(self) -> None:
        self._short_handle = None
        self._dispatch(self._on_short, "short")

    def _dispatch(self, callback: Callable[[], Any], outcome: str) -> None:
        logger.debug("Press resolved", outcome=outcome)
        result = callback()
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Press callback failed", error=str(task.exception()))
