"""
SQLAlchemy stock ledger: check-and-decrement as one conditional UPDATE.

Usage:
    session_factory, engine = await create_ledger_database()
    ledger = SQLAlchemyLedger(session_factory)
    await ledger.seed({"netflix-1m": 10}, min_stock={"netflix-1m": 3})

    match await ledger.debit("netflix-1m", 2, reason="Sale to Budi"):
        case Ok(movement): ...
        case Error(e): ...   # STOCK_CONFLICT, NOT_FOUND or STORE_ERROR

The debit is a single statement:

    UPDATE stock_levels SET available = available - :q
    WHERE item_id = :id AND available >= :q

so two sessions racing for the last unit cannot both succeed: the loser
sees rowcount == 0 and gets STOCK_CONFLICT.
"""

from __future__ import annotations

import uuid
from collections.abc import Awaitable, Callable, Mapping
from datetime import datetime
from typing import cast

from combinators import retry, RetryPolicy
from sqlalchemy import DateTime, Integer, String, Text, select, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from pakasir._errors import ErrorKind, Errors, PosError
from pakasir._types import Clock, Error, ItemId, LazyCoroResult, Ok, Result
from pakasir.ledger._types import (
    MovementKind,
    StockMovement,
    check_quantity,
    log_level,
    logger,
)


# ═══════════════════════════════════════════════════════════════════════════════
# Tables
# ═══════════════════════════════════════════════════════════════════════════════


class Base(DeclarativeBase):
    pass


class StockTable(Base):
    __tablename__ = "stock_levels"

    item_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    available: Mapped[int] = mapped_column(Integer, nullable=False)
    min_stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class MovementTable(Base):
    __tablename__ = "stock_movements"

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(40), nullable=False, unique=True)
    item_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    kind: Mapped[str] = mapped_column(String(3), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    balance_after: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False, default="")
    order_id: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    def to_movement(self) -> StockMovement:
        return StockMovement(
            id=self.id,
            item_id=self.item_id,
            kind=MovementKind(self.kind),
            quantity=self.quantity,
            balance_after=self.balance_after,
            reason=self.reason,
            order_id=self.order_id,
            created_at=self.created_at,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Database Setup
# ═══════════════════════════════════════════════════════════════════════════════


async def create_ledger_database(
    url: str = "sqlite+aiosqlite:///:memory:",
) -> tuple[async_sessionmaker[AsyncSession], AsyncEngine]:
    """Create ledger tables and return (session_factory, engine)."""
    engine = create_async_engine(url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    return async_sessionmaker(engine, expire_on_commit=False), engine


def _is_transient(error: PosError) -> bool:
    return error.kind is ErrorKind.STORE_ERROR


# ═══════════════════════════════════════════════════════════════════════════════
# SQLAlchemy Ledger
# ═══════════════════════════════════════════════════════════════════════════════


class SQLAlchemyLedger:
    """
    Stock ledger backed by any SQLAlchemy async engine.

    Driver errors become STORE_ERROR and are retried with a fixed policy;
    STOCK_CONFLICT and NOT_FOUND are final and returned on first sight.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        clock: Clock = datetime.now,
        retry_attempts: int = 3,
        retry_delay: float = 0.05,
    ) -> None:
        self._session = session_factory
        self._clock = clock
        self._policy: RetryPolicy[PosError] = RetryPolicy.fixed(
            retry_attempts, retry_delay, retry_on=_is_transient
        )

    def _guarded[T](
        self, op: Callable[[], Awaitable[Result[T, PosError]]]
    ) -> LazyCoroResult[T, PosError]:
        async def run() -> Result[T, PosError]:
            try:
                return await op()
            except SQLAlchemyError as e:
                logger.error("ledger store error: %s", e)
                return Error(Errors.store_error(str(e)))

        return retry(LazyCoroResult(run), policy=self._policy)

    async def seed(
        self,
        levels: Mapping[ItemId, int],
        *,
        min_stock: Mapping[ItemId, int] | None = None,
    ) -> None:
        """Insert or overwrite item levels. Not journaled."""
        thresholds = min_stock or {}
        async with self._session() as session, session.begin():
            for item_id, available in levels.items():
                await session.merge(
                    StockTable(
                        item_id=item_id,
                        available=available,
                        min_stock=thresholds.get(item_id, 0),
                    )
                )

    async def available(self, item_id: ItemId) -> Result[int, PosError]:
        async def op() -> Result[int, PosError]:
            async with self._session() as session:
                value = (
                    await session.execute(
                        select(StockTable.available).where(StockTable.item_id == item_id)
                    )
                ).scalar_one_or_none()
            if value is None:
                return Error(Errors.not_found("item", item_id))
            return Ok(value)

        return await self._guarded(op)

    async def min_stock(self, item_id: ItemId) -> int:
        async with self._session() as session:
            value = (
                await session.execute(
                    select(StockTable.min_stock).where(StockTable.item_id == item_id)
                )
            ).scalar_one_or_none()
        return value or 0

    async def debit(
        self,
        item_id: ItemId,
        quantity: int,
        *,
        reason: str = "",
        order_id: str | None = None,
    ) -> Result[StockMovement, PosError]:
        check_quantity(quantity)

        async def op() -> Result[StockMovement, PosError]:
            async with self._session() as session, session.begin():
                result = cast(
                    CursorResult,
                    await session.execute(
                        update(StockTable)
                        .where(StockTable.item_id == item_id, StockTable.available >= quantity)
                        .values(available=StockTable.available - quantity)
                    ),
                )
                row = (
                    await session.execute(
                        select(StockTable.available, StockTable.min_stock).where(
                            StockTable.item_id == item_id
                        )
                    )
                ).one_or_none()

                if row is None:
                    return Error(Errors.not_found("item", item_id))
                if result.rowcount == 0:
                    logger.warning("debit of %d x %s rejected: %d available", quantity, item_id, row.available)
                    return Error(Errors.stock_conflict(item_id, quantity, row.available))

                movement = self._journal(session, item_id, MovementKind.OUT, quantity, row.available, reason, order_id)

            log_level(item_id, row.available, row.min_stock)
            return Ok(movement)

        return await self._guarded(op)

    async def credit(
        self,
        item_id: ItemId,
        quantity: int,
        *,
        reason: str = "",
        order_id: str | None = None,
    ) -> Result[StockMovement, PosError]:
        check_quantity(quantity)

        async def op() -> Result[StockMovement, PosError]:
            async with self._session() as session, session.begin():
                result = cast(
                    CursorResult,
                    await session.execute(
                        update(StockTable)
                        .where(StockTable.item_id == item_id)
                        .values(available=StockTable.available + quantity)
                    ),
                )
                if result.rowcount == 0:
                    return Error(Errors.not_found("item", item_id))
                balance = (
                    await session.execute(
                        select(StockTable.available).where(StockTable.item_id == item_id)
                    )
                ).scalar_one()
                movement = self._journal(session, item_id, MovementKind.IN, quantity, balance, reason, order_id)
            return Ok(movement)

        return await self._guarded(op)

    async def movements(self, item_id: ItemId | None = None) -> list[StockMovement]:
        stmt = select(MovementTable).order_by(MovementTable.seq)
        if item_id is not None:
            stmt = stmt.where(MovementTable.item_id == item_id)
        async with self._session() as session:
            rows = (await session.execute(stmt)).scalars().all()
        return [row.to_movement() for row in rows]

    def _journal(
        self,
        session: AsyncSession,
        item_id: ItemId,
        kind: MovementKind,
        quantity: int,
        balance: int,
        reason: str,
        order_id: str | None,
    ) -> StockMovement:
        row = MovementTable(
            id=f"mov_{uuid.uuid4().hex[:12]}",
            item_id=item_id,
            kind=kind.value,
            quantity=quantity,
            balance_after=balance,
            reason=reason,
            order_id=order_id,
            created_at=self._clock(),
        )
        session.add(row)
        logger.info("stock %s %d x %s -> %d", kind.value, quantity, item_id, balance)
        return row.to_movement()


__all__ = (
    "Base",
    "StockTable",
    "MovementTable",
    "create_ledger_database",
    "SQLAlchemyLedger",
)
