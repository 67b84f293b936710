"""
Stock ledger types: movements, levels, backend contract.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto
from typing import Protocol

from pakasir._errors import PosError
from pakasir._types import ItemId, Result

logger = logging.getLogger("pakasir.ledger")


# ═══════════════════════════════════════════════════════════════════════════════
# Stock Movement: Journal Entry
# ═══════════════════════════════════════════════════════════════════════════════


class MovementKind(Enum):
    IN = "IN"
    OUT = "OUT"


@dataclass(frozen=True, slots=True)
class StockMovement:
    """
    One applied change to an item's availability.

    balance_after is the availability right after this movement, so the
    journal alone can reconstruct the level history of an item.
    """

    id: str
    item_id: ItemId
    kind: MovementKind
    quantity: int
    balance_after: int
    reason: str
    order_id: str | None
    created_at: datetime


# ═══════════════════════════════════════════════════════════════════════════════
# Stock Level: Restock Signal
# ═══════════════════════════════════════════════════════════════════════════════


class StockLevel(Enum):
    """
    Availability relative to an item's minimum stock.

    CRITICAL: nothing left
    LOW:      at or below min_stock
    WARNING:  within 25% above min_stock
    NORMAL:   comfortably stocked
    """

    CRITICAL = auto()
    LOW = auto()
    WARNING = auto()
    NORMAL = auto()


def classify_level(available: int, min_stock: int) -> StockLevel:
    if available <= 0:
        return StockLevel.CRITICAL
    if available <= min_stock:
        return StockLevel.LOW
    if available <= min_stock * 1.25:
        return StockLevel.WARNING
    return StockLevel.NORMAL


def log_level(item_id: ItemId, balance: int, min_stock: int) -> None:
    level = classify_level(balance, min_stock)
    if level in (StockLevel.CRITICAL, StockLevel.LOW):
        logger.warning("stock %s for %s: %d left (min %d)", level.name, item_id, balance, min_stock)


# ═══════════════════════════════════════════════════════════════════════════════
# Ledger Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class StockLedger(Protocol):
    """
    Authoritative per-item availability.

    debit() is a single indivisible check-and-decrement: it either takes
    `quantity` units and returns the movement, or fails with STOCK_CONFLICT
    and leaves the level untouched. Availability never goes negative.
    """

    async def available(self, item_id: ItemId) -> Result[int, PosError]:
        """Current availability. NOT_FOUND for unknown items."""
        ...

    async def min_stock(self, item_id: ItemId) -> int:
        """Restock threshold, 0 when unset."""
        ...

    async def debit(
        self,
        item_id: ItemId,
        quantity: int,
        *,
        reason: str = "",
        order_id: str | None = None,
    ) -> Result[StockMovement, PosError]:
        ...

    async def credit(
        self,
        item_id: ItemId,
        quantity: int,
        *,
        reason: str = "",
        order_id: str | None = None,
    ) -> Result[StockMovement, PosError]:
        ...

    async def movements(self, item_id: ItemId | None = None) -> list[StockMovement]:
        """Journal, oldest first, optionally for one item."""
        ...


def check_quantity(quantity: int) -> None:
    if quantity <= 0:
        raise ValueError(f"quantity must be positive, got {quantity}")


__all__ = (
    "MovementKind",
    "StockMovement",
    "StockLevel",
    "classify_level",
    "log_level",
    "StockLedger",
    "check_quantity",
)
