"""
In-memory stock ledger.
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Mapping
from datetime import datetime

from pakasir._errors import Errors, PosError
from pakasir._types import Clock, Error, ItemId, Ok, Result
from pakasir.ledger._types import (
    MovementKind,
    StockMovement,
    check_quantity,
    log_level,
    logger,
)


class MemoryLedger:
    """
    In-memory stock ledger.

    Note: Only for a single process / tests. Check-and-decrement runs
    under one asyncio.Lock, so concurrent debits of the last unit are
    serialized and exactly one of them wins.
    """

    def __init__(
        self,
        levels: Mapping[ItemId, int] | None = None,
        *,
        min_stock: Mapping[ItemId, int] | None = None,
        clock: Clock = datetime.now,
    ) -> None:
        self._levels: dict[ItemId, int] = dict(levels or {})
        self._min_stock: dict[ItemId, int] = dict(min_stock or {})
        self._journal: list[StockMovement] = []
        self._clock = clock
        self._lock = asyncio.Lock()

    def set_level(self, item_id: ItemId, available: int, *, min_stock: int | None = None) -> None:
        """Seed or overwrite an item's level. Not journaled."""
        if available < 0:
            raise ValueError("available must be >= 0")
        self._levels[item_id] = available
        if min_stock is not None:
            self._min_stock[item_id] = min_stock

    async def available(self, item_id: ItemId) -> Result[int, PosError]:
        async with self._lock:
            if item_id not in self._levels:
                return Error(Errors.not_found("item", item_id))
            return Ok(self._levels[item_id])

    async def min_stock(self, item_id: ItemId) -> int:
        return self._min_stock.get(item_id, 0)

    async def debit(
        self,
        item_id: ItemId,
        quantity: int,
        *,
        reason: str = "",
        order_id: str | None = None,
    ) -> Result[StockMovement, PosError]:
        check_quantity(quantity)
        async with self._lock:
            current = self._levels.get(item_id)
            if current is None:
                return Error(Errors.not_found("item", item_id))
            if quantity > current:
                logger.warning("debit of %d x %s rejected: %d available", quantity, item_id, current)
                return Error(Errors.stock_conflict(item_id, quantity, current))

            self._levels[item_id] = current - quantity
            movement = self._record(item_id, MovementKind.OUT, quantity, reason, order_id)

        log_level(item_id, movement.balance_after, self._min_stock.get(item_id, 0))
        return Ok(movement)

    async def credit(
        self,
        item_id: ItemId,
        quantity: int,
        *,
        reason: str = "",
        order_id: str | None = None,
    ) -> Result[StockMovement, PosError]:
        check_quantity(quantity)
        async with self._lock:
            if item_id not in self._levels:
                return Error(Errors.not_found("item", item_id))
            self._levels[item_id] += quantity
            return Ok(self._record(item_id, MovementKind.IN, quantity, reason, order_id))

    async def movements(self, item_id: ItemId | None = None) -> list[StockMovement]:
        async with self._lock:
            if item_id is None:
                return list(self._journal)
            return [m for m in self._journal if m.item_id == item_id]

    def _record(
        self,
        item_id: ItemId,
        kind: MovementKind,
        quantity: int,
        reason: str,
        order_id: str | None,
    ) -> StockMovement:
        movement = StockMovement(
            id=f"mov_{uuid.uuid4().hex[:12]}",
            item_id=item_id,
            kind=kind,
            quantity=quantity,
            balance_after=self._levels[item_id],
            reason=reason,
            order_id=order_id,
            created_at=self._clock(),
        )
        self._journal.append(movement)
        logger.info("stock %s %d x %s -> %d", kind.value, quantity, item_id, movement.balance_after)
        return movement


__all__ = ("MemoryLedger",)
