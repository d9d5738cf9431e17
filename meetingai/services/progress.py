"""Cosmetic progress ticker for the processing request.

The ticker walks the fixed ``PROGRESS_STEPS`` table on a fixed cadence as
user feedback only; it knows nothing about real backend progress. It is
scoped by an async context manager so it is always cancelled when the
request settles, whichever finishes first.

Usage::

    async with ProgressTicker(on_step):
        payload = await client.process_audio(selection)
"""

import asyncio
import contextlib
import logging
from collections.abc import Callable, Sequence

from meetingai.core.config import get_settings
from meetingai.core.models import PROGRESS_STEPS, ProgressStep

logger = logging.getLogger(__name__)


class ProgressTicker:
    """Publishes progress checkpoints from a background ``asyncio.Task``.

    Args:
        on_step: Called with each checkpoint as it is reached.
        interval: Seconds between checkpoints. Uses settings if not provided.
        steps: Checkpoint table (defaults to ``PROGRESS_STEPS``).
    """

    def __init__(
        self,
        on_step: Callable[[ProgressStep], None],
        interval: float | None = None,
        steps: Sequence[ProgressStep] = PROGRESS_STEPS,
    ) -> None:
        self._on_step = on_step
        self._interval = interval if interval is not None else get_settings().progress_interval_seconds
        self._steps = tuple(steps)
        self._task: asyncio.Task | None = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Launch the ticker loop."""
        if self._task is None:
            self._task = asyncio.create_task(self._tick_loop())

    async def stop(self) -> None:
        """Cancel the ticker loop and wait for it to exit."""
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def __aenter__(self) -> "ProgressTicker":
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()

    async def _tick_loop(self) -> None:
        for step in self._steps:
            await asyncio.sleep(self._interval)
            try:
                self._on_step(step)
            except Exception:
                logger.exception("Progress callback failed at %d%%", step.percent)
                return
            self.ticks += 1
