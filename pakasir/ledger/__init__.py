"""
Stock ledger: authoritative availability with atomic debit.

    from pakasir import ledger as LG

    ledger = LG.MemoryLedger({"spotify-1m": 5})
    await ledger.debit("spotify-1m", 2, reason="Sale to Budi")

    # Several lines, all or nothing
    await LG.debit_all(ledger, [("a", 1), ("b", 2)], reason="...", order_id="ord_1")
"""

from pakasir.ledger._types import (
    MovementKind,
    StockMovement,
    StockLevel,
    StockLedger,
    classify_level,
)
from pakasir.ledger._memory import MemoryLedger
from pakasir.ledger._sqlalchemy import (
    SQLAlchemyLedger,
    create_ledger_database,
)
from pakasir.ledger._debit import debit_all, compensate, merge_lines

__all__ = (
    # Types
    "MovementKind",
    "StockMovement",
    "StockLevel",
    "StockLedger",
    "classify_level",
    # Backends
    "MemoryLedger",
    "SQLAlchemyLedger",
    "create_ledger_database",
    # Multi-line debit
    "debit_all",
    "compensate",
    "merge_lines",
)
