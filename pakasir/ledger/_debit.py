"""
All-or-nothing multi-line debit with compensation.

Each line is debited atomically by the ledger; across lines the debit is
a saga: applied movements are recorded, and if a later line fails they
are credited back in reverse order before the error is returned.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

from pakasir._errors import PosError
from pakasir._types import Error, ItemId, Ok, Result
from pakasir.ledger._types import StockLedger, StockMovement, logger


# ═══════════════════════════════════════════════════════════════════════════════
# merge_lines(): one debit per item
# ═══════════════════════════════════════════════════════════════════════════════


def merge_lines(lines: Iterable[tuple[ItemId, int]]) -> list[tuple[ItemId, int]]:
    """Sum quantities per item, keeping first-seen order."""
    merged: dict[ItemId, int] = {}
    for item_id, quantity in lines:
        merged[item_id] = merged.get(item_id, 0) + quantity
    return [(item_id, qty) for item_id, qty in merged.items() if qty > 0]


# ═══════════════════════════════════════════════════════════════════════════════
# compensate(): Rollback
# ═══════════════════════════════════════════════════════════════════════════════


async def compensate(
    ledger: StockLedger,
    applied: list[StockMovement],
    *,
    reason: str,
) -> tuple[int, int]:
    """Credit applied debits back in reverse. Returns (run, failed)."""
    comp_run = 0
    comp_failed = 0

    for movement in reversed(applied):
        match await ledger.credit(
            movement.item_id,
            movement.quantity,
            reason=f"Rollback: {reason}",
            order_id=movement.order_id,
        ):
            case Ok(_):
                comp_run += 1
            case Error(e):
                comp_failed += 1
                logger.error("rollback of %s failed: %s", movement.id, e)

    return comp_run, comp_failed


# ═══════════════════════════════════════════════════════════════════════════════
# debit_all(): Execute
# ═══════════════════════════════════════════════════════════════════════════════


async def debit_all(
    ledger: StockLedger,
    lines: Iterable[tuple[ItemId, int]],
    *,
    reason: str,
    order_id: str | None = None,
) -> Result[tuple[StockMovement, ...], PosError]:
    """
    Debit every line or none of them.

    On failure: credits back what was taken, returns the first error.
    On cancellation: credits back what was taken, re-raises.
    """
    applied: list[StockMovement] = []

    try:
        for item_id, quantity in merge_lines(lines):
            match await ledger.debit(item_id, quantity, reason=reason, order_id=order_id):
                case Ok(movement):
                    applied.append(movement)
                case Error(e):
                    if applied:
                        run, failed = await compensate(ledger, applied, reason=reason)
                        logger.info("debit for %s rolled back (%d credited, %d failed)", order_id, run, failed)
                    return Error(e)
    except asyncio.CancelledError:
        if applied:
            await compensate(ledger, applied, reason=reason)
        raise

    return Ok(tuple(applied))


__all__ = (
    "merge_lines",
    "compensate",
    "debit_all",
)
