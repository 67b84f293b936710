"""
Order and reseller stores.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import Protocol

from pakasir._errors import Errors, PosError
from pakasir._types import Error, Ok, OrderId, PaymentStatus, Result
from pakasir.order._types import Order, Reseller


# ═══════════════════════════════════════════════════════════════════════════════
# Order Store
# ═══════════════════════════════════════════════════════════════════════════════


class OrderStore(Protocol):
    async def save(self, order: Order) -> Result[Order, PosError]:
        """Insert or overwrite by id."""
        ...

    async def get(self, order_id: OrderId) -> Result[Order, PosError]:
        """NOT_FOUND when unknown."""
        ...

    async def transition(self, order_id: OrderId, expected: PaymentStatus, updated: Order) -> Result[Order, PosError]:
        """
        Compare-and-set on payment status.

        Replaces the stored order only while its status is still
        `expected`; INVALID_TRANSITION otherwise. A SQL store does this
        as one `UPDATE ... WHERE payment_status = :expected`.
        """
        ...

    async def list_orders(self, status: PaymentStatus | None = None) -> list[Order]:
        ...


class MemoryOrderStore:
    """
    In-memory order store.

    Note: Only for a single process / tests.
    """

    def __init__(self) -> None:
        self._orders: dict[OrderId, Order] = {}
        self._lock = asyncio.Lock()

    async def save(self, order: Order) -> Result[Order, PosError]:
        async with self._lock:
            self._orders[order.id] = order
            return Ok(order)

    async def get(self, order_id: OrderId) -> Result[Order, PosError]:
        async with self._lock:
            order = self._orders.get(order_id)
            if order is None:
                return Error(Errors.not_found("order", order_id))
            return Ok(order)

    async def transition(self, order_id: OrderId, expected: PaymentStatus, updated: Order) -> Result[Order, PosError]:
        async with self._lock:
            current = self._orders.get(order_id)
            if current is None:
                return Error(Errors.not_found("order", order_id))
            if current.payment_status is not expected:
                return Error(
                    Errors.invalid_transition(order_id, current.payment_status.value, updated.payment_status.value)
                )
            self._orders[order_id] = updated
            return Ok(updated)

    async def list_orders(self, status: PaymentStatus | None = None) -> list[Order]:
        async with self._lock:
            orders = list(self._orders.values())
        if status is None:
            return orders
        return [o for o in orders if o.payment_status is status]


# ═══════════════════════════════════════════════════════════════════════════════
# Reseller Registry
# ═══════════════════════════════════════════════════════════════════════════════


class ResellerRegistry(Protocol):
    def get(self, reseller_id: str) -> Reseller | None:
        ...


class MemoryResellerRegistry:
    def __init__(self, resellers: Iterable[Reseller] = ()) -> None:
        self._resellers = {r.id: r for r in resellers}

    def add(self, reseller: Reseller) -> None:
        self._resellers[reseller.id] = reseller

    def get(self, reseller_id: str) -> Reseller | None:
        return self._resellers.get(reseller_id)

    def exists(self, reseller_id: str) -> bool:
        return reseller_id in self._resellers


__all__ = (
    "OrderStore",
    "MemoryOrderStore",
    "ResellerRegistry",
    "MemoryResellerRegistry",
)
