# skyq/scheduler.py
from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import StrEnum

from .consts import SDK_LOGGER

CycleAction = Callable[[], Awaitable[bool]]


class CycleState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCESS = "success"
    FAILURE = "failure"
    ARMED = "armed"


class RefreshCycle:
    """A self-rearming periodic task.

    Each tick cancels the pending timer, awaits the action and arms the next
    timer once the action has finished, whatever its outcome. The action
    reports success as a bool; an exception escaping it is logged and
    counted as a failure. A cycle therefore never overlaps itself and never
    stops on its own; only ``cancel()`` ends it.
    """

    def __init__(
        self,
        name: str,
        interval: float,
        action: CycleAction,
        logger: logging.Logger = SDK_LOGGER,
    ) -> None:
        self.name = name
        self.interval = interval
        self._action = action
        self.logger = logger

        self.state: CycleState = CycleState.IDLE
        self.last_success: bool | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._task: asyncio.Task | None = None
        self._stopped = False
        # Bumped by every start and cancel; ticks from an older run never rearm.
        self._generation = 0

    @property
    def timer(self) -> asyncio.TimerHandle | None:
        """The pending timer, if the cycle is armed."""
        return self._timer

    @property
    def stopped(self) -> bool:
        return self._stopped

    def start(self) -> None:
        """Schedule the first tick right away on the running loop."""
        self._restart()
        self._spawn(self._generation)

    async def async_start(self) -> bool:
        """Run the first tick inline, then keep rearming."""
        self._restart()
        return await self.async_run_once()

    def _restart(self) -> None:
        self._stopped = False
        self._generation += 1
        self._cancel_timer()

    def _spawn(self, generation: int) -> None:
        self._timer = None
        self._task = asyncio.create_task(self._async_tick(generation))

    async def _async_tick(self, generation: int) -> None:
        # A tick spawned just before cancel() or a restart must not start the action.
        if self._stopped or generation != self._generation:
            return
        await self.async_run_once()

    def _cancel_timer(self) -> None:
        if self._timer:
            self._timer.cancel()
            self._timer = None

    def _arm(self, generation: int) -> None:
        if self._stopped:
            self.state = CycleState.IDLE
            return
        if generation != self._generation:
            self.logger.debug(
                "Refresh cycle %s: restarted while running, not rearming.", self.name
            )
            return
        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.interval, self._spawn, generation)
        self.state = CycleState.ARMED
        self.logger.debug(
            "Refresh cycle %s: next run in %s seconds.", self.name, self.interval
        )

    async def async_run_once(self) -> bool:
        generation = self._generation
        self._cancel_timer()
        self.state = CycleState.RUNNING
        success = False
        try:
            success = bool(await self._action())
        except Exception as err:
            self.logger.warning(
                "Refresh cycle %s: unexpected error: %s", self.name, err, exc_info=True
            )
        if generation == self._generation:
            self.last_success = success
            self.state = CycleState.SUCCESS if success else CycleState.FAILURE
        self._arm(generation)
        return success

    def cancel(self) -> None:
        """Cancel the pending timer; a tick already running finishes without rearming."""
        self._stopped = True
        self._generation += 1
        self._cancel_timer()
        if self.state != CycleState.RUNNING:
            self.state = CycleState.IDLE
