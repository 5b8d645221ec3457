# noah/timer.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Optional
import asyncio
import datetime as dt
import logging

logger = logging.getLogger(__name__)

PILL_WAIT_SECONDS = 1800  # 30 min empty-stomach wait after the pill

IDLE = "idle"
RUNNING = "running"
EXPIRED = "expired"


@dataclass
class PillTimer:
    """
    Countdown started on pill intake, independent of the log store.
    idle -> running -> expired -> idle (next day). start() and cancel() always reset to the full duration.
    """
    active: bool = False
    remaining_seconds: int = PILL_WAIT_SECONDS
    started_on: Optional[dt.date] = None
    duration_seconds: int = PILL_WAIT_SECONDS

    @property
    def state(self) -> str:
        if self.active:
            return RUNNING
        if self.started_on is not None and self.remaining_seconds <= 0:
            return EXPIRED
        return IDLE

    @property
    def elapsed_fraction(self) -> float:
        if self.duration_seconds <= 0:
            return 1.0
        return 1.0 - (self.remaining_seconds / self.duration_seconds)

    def start(self, today: Optional[dt.date] = None) -> None:
        self.active = True
        self.remaining_seconds = self.duration_seconds
        self.started_on = today

    def tick(self) -> bool:
        """One second elapsed. Returns True only on the tick that expires the countdown."""
        if not self.active or self.remaining_seconds <= 0:
            return False
        self.remaining_seconds -= 1
        if self.remaining_seconds <= 0:
            self.remaining_seconds = 0
            self.active = False
            return True
        return False

    def cancel(self) -> None:
        self.active = False
        self.remaining_seconds = self.duration_seconds

    def roll_over(self, today: dt.date) -> None:
        if self.started_on is not None and self.started_on != today:
            self.cancel()
            self.started_on = None

    def remaining_text(self) -> str:
        m, s = divmod(max(0, int(self.remaining_seconds)), 60)
        return f"{m:02d}:{s:02d}"


TickHook = Callable[[PillTimer], Optional[Awaitable[None]]]


class CountdownTicker:
    """
    Drives PillTimer.tick() once per interval on the running asyncio loop.
    cancel() stops future ticks; no task is left pending afterwards.
    """

    def __init__(
        self,
        timer: PillTimer,
        interval: float = 1.0,
        on_tick: Optional[TickHook] = None,
        on_expire: Optional[TickHook] = None,
    ):
        self.timer = timer
        self.interval = interval
        self.on_tick = on_tick
        self.on_expire = on_expire
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def begin(self, today: Optional[dt.date] = None) -> asyncio.Task:
        """Reset the timer to the full duration and (re)schedule the tick loop."""
        self._stop_task()
        self.timer.start(today)
        self._task = asyncio.get_running_loop().create_task(self._run())
        return self._task

    def cancel(self) -> None:
        self._stop_task()
        self.timer.cancel()

    async def wait(self) -> None:
        """Wait until the current loop finishes (expired or cancelled)."""
        if self._task is None:
            return
        await asyncio.wait([self._task])

    def _stop_task(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def _run(self) -> None:
        while self.timer.active:
            await asyncio.sleep(self.interval)
            expired = self.timer.tick()
            await _call_hook(self.on_tick, self.timer)
            if expired:
                logger.info("pill timer expired")
                await _call_hook(self.on_expire, self.timer)


async def _call_hook(hook: Optional[TickHook], timer: PillTimer) -> None:
    if hook is None:
        return
    res = hook(timer)
    if asyncio.iscoroutine(res):
        await res
