"""
Order types: immutable snapshots of a priced cart.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from pakasir._types import ItemId, Money, OrderId, PaymentMethod, PaymentStatus

TERMINAL_STATUSES = frozenset({PaymentStatus.PAID, PaymentStatus.CANCELLED, PaymentStatus.EXPIRED})


# ═══════════════════════════════════════════════════════════════════════════════
# Buyer / Reseller
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class BuyerInfo:
    name: str = ""
    phone: str | None = None
    email: str | None = None
    notes: str | None = None

    def missing(self, required: tuple[str, ...]) -> tuple[str, ...]:
        """Required field names that are absent or blank."""
        out: list[str] = []
        for name in required:
            value = getattr(self, name, None)
            if value is None or not str(value).strip():
                out.append(name)
        return tuple(out)

    def describe(self) -> str:
        return f"{self.name} ({self.phone})" if self.phone else self.name


@dataclass(frozen=True, slots=True)
class Reseller:
    id: str
    name: str
    phone: str | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Order Line / Payment / Order
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class OrderLine:
    """Name and price are copied at creation; later catalog edits do not reach here."""

    item_id: ItemId
    item_name: str
    quantity: int
    unit_price: Money
    line_subtotal: Money


@dataclass(frozen=True, slots=True)
class Payment:
    """Asynchronous payment attached to exactly one order."""

    id: str
    order_id: OrderId
    amount: Money
    status: PaymentStatus
    created_at: datetime
    expires_at: datetime
    paid_at: datetime | None = None
    qr_payload: str = ""

    def is_due(self, now: datetime) -> bool:
        return now >= self.expires_at


@dataclass(frozen=True, slots=True)
class Order:
    """
    Created once at checkout.

    Only payment_status, completed_at and the attached payment's status
    ever change, and only through with_status().
    """

    id: OrderId
    lines: tuple[OrderLine, ...]
    subtotal: Money
    discount_amount: Money
    total: Money
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    created_at: datetime
    discount_code: str | None = None
    buyer: BuyerInfo | None = None
    reseller_id: str | None = None
    reseller_name: str | None = None
    completed_at: datetime | None = None
    payment: Payment | None = None

    @property
    def is_terminal(self) -> bool:
        return self.payment_status in TERMINAL_STATUSES

    @property
    def debit_lines(self) -> list[tuple[ItemId, int]]:
        return [(line.item_id, line.quantity) for line in self.lines]

    def with_status(self, status: PaymentStatus, at: datetime) -> Order:
        paid = status is PaymentStatus.PAID
        payment = self.payment
        if payment is not None:
            payment = replace(payment, status=status, paid_at=at if paid else payment.paid_at)
        return replace(
            self,
            payment_status=status,
            completed_at=at if paid else self.completed_at,
            payment=payment,
        )


__all__ = (
    "TERMINAL_STATUSES",
    "BuyerInfo",
    "Reseller",
    "OrderLine",
    "Payment",
    "Order",
)
