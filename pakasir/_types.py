"""
Core types for pakasir.

Re-exports from kungfu + domain aliases shared by every component.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from enum import Enum

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Domain Aliases
# ═══════════════════════════════════════════════════════════════════════════════

type Money = int
"""Non-negative amount in minor currency units (rupiah has no sub-unit)."""

type ItemId = str
"""Catalog item identity."""

type OrderId = str

type Clock = Callable[[], datetime]
"""Time source. Injected so lifecycle code can be tested with a fake clock."""

# ═══════════════════════════════════════════════════════════════════════════════
# Payment Enums
# ═══════════════════════════════════════════════════════════════════════════════


class PaymentMethod(Enum):
    """Checkout channel. Only QRIS settles asynchronously."""

    CASH = "CASH"
    QRIS = "QRIS"
    TRANSFER = "TRANSFER"
    WHATSAPP = "WHATSAPP"

    @property
    def is_async(self) -> bool:
        return self is PaymentMethod.QRIS


class PaymentStatus(Enum):
    """
    Order payment status.

    Lifecycle:
        PENDING → PAID (confirm)
                → EXPIRED (deadline passed)
                → CANCELLED (explicit cancel)
    """

    PENDING = "PENDING"
    PAID = "PAID"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"

    @property
    def is_terminal(self) -> bool:
        return self is not PaymentStatus.PENDING


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Aliases
    "Money",
    "ItemId",
    "OrderId",
    "Clock",
    # Enums
    "PaymentMethod",
    "PaymentStatus",
)
