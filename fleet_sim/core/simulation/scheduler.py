import asyncio
from typing import Callable, Optional
import logging

logger = logging.getLogger(__name__)

class TickScheduler:
    """Runs a tick callback on a fixed cadence inside an asyncio loop.

    At most one scheduling task exists at any time: ``start`` and
    ``reschedule`` cancel the current task before installing a new one, and
    both happen synchronously so no other coroutine can observe two live
    tasks. A tick callback always runs to completion because it is
    synchronous; cancellation only lands while the loop is sleeping.

    A tick that raises ends the schedule; the exception is logged and
    handed to ``on_error`` instead of being left on the finished task.
    """

    def __init__(self, tick: Callable[[], object], period: float,
                 on_error: Optional[Callable[[BaseException], object]] = None):
        if period <= 0:
            raise ValueError(f"Tick period must be positive, got {period}")
        self._tick = tick
        self._on_error = on_error
        self._period = period
        self._task: Optional[asyncio.Task] = None
        self.ticks_fired = 0
        self.generation = 0

    @property
    def period(self) -> float:
        return self._period

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Install the scheduling task, replacing any existing one"""
        self._cancel_current()
        self.generation += 1
        self._task = asyncio.get_running_loop().create_task(
            self._run(self._period), name=f"fleet-sim-ticks-{self.generation}"
        )
        logger.debug(f"Tick schedule #{self.generation} started, period={self._period:.3f}s")

    def reschedule(self, period: float) -> None:
        """Change the cadence; a running schedule is replaced atomically"""
        if period <= 0:
            raise ValueError(f"Tick period must be positive, got {period}")
        self._period = period
        if self.is_running:
            self.start()

    def stop(self) -> None:
        self._cancel_current()

    async def stop_and_wait(self) -> None:
        """Cancel the schedule and wait until its task has finished"""
        task = self._task
        self._cancel_current()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    def _cancel_current(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
            logger.debug(f"Tick schedule #{self.generation} cancelled")
        self._task = None

    async def _run(self, period: float) -> None:
        while True:
            await asyncio.sleep(period)
            try:
                self._tick()
            except Exception as e:
                logger.exception("Tick failed; stopping schedule")
                if self._task is asyncio.current_task():
                    self._task = None
                if self._on_error is not None:
                    self._on_error(e)
                return
            self.ticks_fired += 1
