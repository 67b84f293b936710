"""
Expiry watcher: one cancellable timer task per pending payment.

Each task polls `now >= expires_at` every tick_interval seconds and calls
on_due once when the deadline passes. cancel() stops a task the moment
its payment reaches a terminal state, so no late tick can attempt a
second transition.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Awaitable, Callable
from datetime import datetime

from combinators import RepeatPolicy, repeat_until

from pakasir._errors import PosError
from pakasir._types import Clock, Error, LazyCoroResult, Ok, OrderId, Result

logger = logging.getLogger("pakasir.expiry")

type OnDue = Callable[[OrderId], Awaitable[Result[object, PosError]]]


class ExpiryWatcher:
    def __init__(
        self,
        on_due: OnDue,
        *,
        clock: Clock = datetime.now,
        tick_interval: float = 1.0,
    ) -> None:
        self._on_due = on_due
        self._clock = clock
        self._tick = tick_interval
        self._tasks: dict[OrderId, asyncio.Task[None]] = {}

    @property
    def watching(self) -> frozenset[OrderId]:
        return frozenset(self._tasks)

    def is_watching(self, order_id: OrderId) -> bool:
        return order_id in self._tasks

    def watch(self, order_id: OrderId, expires_at: datetime) -> asyncio.Task[None]:
        """Start (or restart) the timer for an order. Needs a running loop."""
        self.cancel(order_id)
        task = asyncio.create_task(self._run(order_id, expires_at), name=f"expiry:{order_id}")
        self._tasks[order_id] = task
        task.add_done_callback(lambda t: self._forget(order_id, t))
        return task

    def cancel(self, order_id: OrderId) -> bool:
        """
        Stop an order's timer. Returns whether one was running.

        Called from inside the timer task itself (its own expiry fired),
        the task is only forgotten, not cancelled, so on_due can finish.
        """
        task = self._tasks.pop(order_id, None)
        if task is None:
            return False
        if task is not asyncio.current_task() and not task.done():
            task.cancel()
            logger.debug("expiry timer for %s cancelled", order_id)
        return True

    async def close(self) -> None:
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def _forget(self, order_id: OrderId, task: asyncio.Task[None]) -> None:
        if self._tasks.get(order_id) is task:
            del self._tasks[order_id]

    async def _run(self, order_id: OrderId, expires_at: datetime) -> None:
        async def tick() -> Result[bool, PosError]:
            now = self._clock()
            logger.debug("expiry tick %s: %s left", order_id, expires_at - now)
            return Ok(now >= expires_at)

        while True:
            remaining = (expires_at - self._clock()).total_seconds()
            rounds = max(1, math.ceil(remaining / self._tick) + 1)
            poll = repeat_until(
                LazyCoroResult(tick),
                condition=lambda due: due,
                policy=RepeatPolicy(max_rounds=rounds, delay_seconds=self._tick),
            )
            match await poll:
                case Ok(_):
                    break
                case Error(_):
                    # clock lagged behind the sleeps; poll again
                    continue

        match await self._on_due(order_id):
            case Ok(_):
                logger.info("payment for %s expired by timer", order_id)
            case Error(e):
                logger.debug("expiry for %s skipped: %s", order_id, e)


__all__ = ("ExpiryWatcher",)
