"""
Payment lifecycle: the state machine behind every order.

    PENDING ──confirm──▶ PAID        (debits stock, the only debit for QRIS)
            ──timeout──▶ EXPIRED     (no stock effect)
            ──cancel───▶ CANCELLED   (no stock effect)

PAID, EXPIRED and CANCELLED are terminal: any further transition is
rejected with INVALID_TRANSITION and leaves the order untouched.
Transitions on one order are serialized by a per-order lock, so a
timer firing while a confirm is in flight sees the confirmed state.
Across lifecycles sharing an order store, the store's compare-and-set
transition decides which one wins.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from pakasir._errors import ErrorKind, Errors, PosError
from pakasir._settings import Settings
from pakasir._types import Error, Ok, OrderId, PaymentStatus, Result
from pakasir.ledger import StockLedger, compensate, debit_all
from pakasir.order import Order, OrderStore, sale_reason
from pakasir.payment._watcher import ExpiryWatcher
from pakasir.price import format_money

logger = logging.getLogger("pakasir.payment")


# ═══════════════════════════════════════════════════════════════════════════════
# Transition Table
# ═══════════════════════════════════════════════════════════════════════════════

ALLOWED_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.PAID, PaymentStatus.EXPIRED, PaymentStatus.CANCELLED}),
    PaymentStatus.PAID: frozenset(),
    PaymentStatus.EXPIRED: frozenset(),
    PaymentStatus.CANCELLED: frozenset(),
}


def can_transition(current: PaymentStatus, target: PaymentStatus) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def transition(order: Order, target: PaymentStatus, at: datetime) -> Result[Order, PosError]:
    """Pure step of the state machine."""
    if not can_transition(order.payment_status, target):
        return Error(Errors.invalid_transition(order.id, order.payment_status.value, target.value))
    return Ok(order.with_status(target, at))


# ═══════════════════════════════════════════════════════════════════════════════
# Payment Lifecycle
# ═══════════════════════════════════════════════════════════════════════════════


class PaymentLifecycle:
    """
    Drives pending orders to a terminal state.

    Example:
        lifecycle = PaymentLifecycle(orders, ledger)
        lifecycle.track(order)                  # starts the expiry timer
        match await lifecycle.confirm(order.id):
            case Ok(paid): ...
            case Error(e): ...                  # INVALID_TRANSITION, STOCK_CONFLICT
    """

    def __init__(
        self,
        orders: OrderStore,
        ledger: StockLedger,
        *,
        settings: Settings = Settings(),
    ) -> None:
        self._orders = orders
        self._ledger = ledger
        self._settings = settings
        self._locks: dict[OrderId, asyncio.Lock] = {}
        self._watcher = ExpiryWatcher(
            self.expire,
            clock=settings.clock,
            tick_interval=settings.tick_interval,
        )

    @property
    def watcher(self) -> ExpiryWatcher:
        return self._watcher

    def track(self, order: Order) -> None:
        """Schedule the timeout transition for a pending order."""
        if order.payment is not None and not order.is_terminal:
            self._watcher.watch(order.id, order.payment.expires_at)

    async def confirm(self, order_id: OrderId) -> Result[Order, PosError]:
        """
        PENDING → PAID, debiting every line exactly once.

        A confirm arriving at or after the deadline expires the order
        first and is then rejected. If the debit fails (stock ran out
        meanwhile) the order stays PENDING and nothing is debited.
        The PAID status is claimed through the store's compare-and-set;
        a confirm that loses the claim to another lifecycle sharing the
        store credits its debit back.
        """
        async with self._lock(order_id):
            match await self._orders.get(order_id):
                case Ok(order):
                    pass
                case Error(e):
                    return Error(e)

            now = self._settings.clock()
            if not can_transition(order.payment_status, PaymentStatus.PAID):
                return Error(Errors.invalid_transition(order_id, order.payment_status.value, PaymentStatus.PAID.value))

            if order.payment is not None and order.payment.is_due(now):
                await self._commit(order, PaymentStatus.EXPIRED, now)
                return Error(Errors.invalid_transition(order_id, PaymentStatus.EXPIRED.value, PaymentStatus.PAID.value))

            reason = sale_reason(order.buyer)
            match await debit_all(self._ledger, order.debit_lines, reason=reason, order_id=order_id):
                case Ok(movements):
                    pass
                case Error(e):
                    logger.warning("confirm of %s failed, order stays pending: %s", order_id, e)
                    return Error(e)

            match await self._commit(order, PaymentStatus.PAID, now):
                case Ok(paid):
                    return Ok(paid)
                case Error(e):
                    await compensate(self._ledger, list(movements), reason=reason)
                    logger.warning("confirm of %s lost the claim, debit credited back: %s", order_id, e)
                    return Error(e)

    async def cancel(self, order_id: OrderId) -> Result[Order, PosError]:
        """PENDING → CANCELLED. An overdue order expires instead and the cancel is rejected."""
        async with self._lock(order_id):
            match await self._orders.get(order_id):
                case Ok(order):
                    pass
                case Error(e):
                    return Error(e)

            now = self._settings.clock()
            if order.payment is not None and not order.is_terminal and order.payment.is_due(now):
                await self._commit(order, PaymentStatus.EXPIRED, now)
                return Error(
                    Errors.invalid_transition(order_id, PaymentStatus.EXPIRED.value, PaymentStatus.CANCELLED.value)
                )
            return await self._commit(order, PaymentStatus.CANCELLED, now)

    async def expire(self, order_id: OrderId) -> Result[Order, PosError]:
        """PENDING → EXPIRED, only once the deadline has passed."""
        async with self._lock(order_id):
            match await self._orders.get(order_id):
                case Ok(order):
                    pass
                case Error(e):
                    return Error(e)

            now = self._settings.clock()
            if order.payment is not None and not order.is_terminal and not order.payment.is_due(now):
                return Error(
                    Errors.invalid_transition(order_id, order.payment_status.value, PaymentStatus.EXPIRED.value)
                )
            return await self._commit(order, PaymentStatus.EXPIRED, now)

    async def expire_due(self) -> list[Order]:
        """Sweep every pending order whose deadline has passed."""
        now = self._settings.clock()
        expired: list[Order] = []
        for order in await self._orders.list_orders(PaymentStatus.PENDING):
            if order.payment is None or not order.payment.is_due(now):
                continue
            match await self.expire(order.id):
                case Ok(done):
                    expired.append(done)
                case Error(_):
                    continue
        return expired

    async def close(self) -> None:
        await self._watcher.close()

    def _lock(self, order_id: OrderId) -> asyncio.Lock:
        return self._locks.setdefault(order_id, asyncio.Lock())

    async def _commit(self, order: Order, target: PaymentStatus, now: datetime) -> Result[Order, PosError]:
        match transition(order, target, now):
            case Ok(updated):
                pass
            case Error(e):
                return Error(e)

        match await self._orders.transition(order.id, order.payment_status, updated):
            case Ok(saved):
                self._watcher.cancel(saved.id)
                self._locks.pop(saved.id, None)
                logger.info("order %s %s -> %s (%s)", saved.id, order.payment_status.value, target.value, format_money(saved.total))
                return Ok(saved)
            case Error(e):
                if e.kind is ErrorKind.INVALID_TRANSITION:
                    self._watcher.cancel(order.id)
                return Error(e)


__all__ = (
    "ALLOWED_TRANSITIONS",
    "can_transition",
    "transition",
    "PaymentLifecycle",
)
