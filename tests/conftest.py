"""Shared fixtures: a small digital-goods catalog, a fake clock, wired engines."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from datetime import datetime, timedelta

import pytest

from pakasir import PointOfSale, Settings
from pakasir import catalog as CT
from pakasir import discount as D
from pakasir import ledger as LG
from pakasir import order as O

T0 = datetime(2026, 3, 1, 10, 0, 0)


class FakeClock:
    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class SlowLedger:
    """Delegates to another ledger; debits of `slow_items` suspend first and set `entered`."""

    def __init__(self, inner: LG.StockLedger, *, delay: float = 0.01, slow_items: Iterable[str] | None = None) -> None:
        self._inner = inner
        self._delay = delay
        self._slow = None if slow_items is None else frozenset(slow_items)
        self.entered = asyncio.Event()

    async def available(self, item_id):
        return await self._inner.available(item_id)

    async def min_stock(self, item_id):
        return await self._inner.min_stock(item_id)

    async def debit(self, item_id, quantity, **kwargs):
        if self._slow is None or item_id in self._slow:
            self.entered.set()
            await asyncio.sleep(self._delay)
        return await self._inner.debit(item_id, quantity, **kwargs)

    async def credit(self, item_id, quantity, **kwargs):
        return await self._inner.credit(item_id, quantity, **kwargs)

    async def movements(self, item_id=None):
        return await self._inner.movements(item_id)


ITEMS = [
    CT.CatalogItem("netflix-1m", "Netflix Premium 1 Bulan", "30k", "Netflix", plan_name="1 Bulan"),
    CT.CatalogItem("spotify-1m", "Spotify Premium 1 Bulan", "25K", "Spotify", plan_name="1 Bulan"),
    CT.CatalogItem("youtube-1m", "YouTube Premium 1 Bulan", "Rp 10.000", "YouTube", plan_name="1 Bulan"),
    CT.CatalogItem("canva-1m", "Canva Pro 1 Bulan", "20k", "Canva", plan_name="1 Bulan", min_stock=1),
    CT.CatalogItem("canva-1y", "Canva Pro 1 Tahun", "150k", "Canva", plan_name="1 Tahun"),
    CT.CatalogItem("chatgpt-1m", "ChatGPT Plus 1 Bulan", "40k", "ChatGPT", plan_name="1 Bulan"),
    CT.CatalogItem("vidio-1m", "Vidio Platinum 1 Bulan", "15k", "Vidio", plan_name="1 Bulan"),
    CT.CatalogItem("disney-1m", "Disney+ 1 Bulan", "35k", "Disney", plan_name="1 Bulan"),
    CT.CatalogItem("hidden-1m", "Internal Test Item", "1k", "Hidden", is_visible=False),
]

LEVELS = {
    "netflix-1m": 10,
    "spotify-1m": 5,
    "youtube-1m": 3,
    "canva-1m": 1,
    "canva-1y": 2,
    "chatgpt-1m": 5,
    "vidio-1m": 5,
    "disney-1m": 0,
    "hidden-1m": 9,
}

COUPONS = [
    D.Coupon("HEMAT10", D.DiscountKind.PERCENTAGE, 10, min_purchase=50_000),
    D.Coupon("FUTOPREMIUM", D.DiscountKind.FIXED, 15_000, min_purchase=100_000),
    D.Coupon("BIGSALE", D.DiscountKind.FIXED, 20_000, min_purchase=100_000),
    D.Coupon("GRATIS", D.DiscountKind.FIXED, 1_000_000),
    D.Coupon("EXPIRED50", D.DiscountKind.PERCENTAGE, 50, is_active=False),
]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings(clock: FakeClock) -> Settings:
    return Settings().with_clock(clock).with_tick_interval(0.01)


@pytest.fixture
def catalog() -> CT.MemoryCatalog:
    return CT.MemoryCatalog(ITEMS)


@pytest.fixture
def ledger(clock: FakeClock) -> LG.MemoryLedger:
    return LG.MemoryLedger(LEVELS, min_stock={"canva-1m": 1}, clock=clock)


@pytest.fixture
def coupons() -> D.MemoryCouponRegistry:
    return D.MemoryCouponRegistry(COUPONS)


@pytest.fixture
def view(catalog: CT.MemoryCatalog, ledger: LG.MemoryLedger) -> CT.CatalogView:
    return CT.CatalogView(catalog, ledger)


@pytest.fixture
def orders() -> O.MemoryOrderStore:
    return O.MemoryOrderStore()


@pytest.fixture
def resellers() -> O.MemoryResellerRegistry:
    return O.MemoryResellerRegistry([O.Reseller("rs-01", "Toko Andi", phone="081200001111")])


@pytest.fixture
async def pos(catalog, ledger, coupons, orders, resellers, settings):
    engine = PointOfSale(catalog, ledger, coupons, orders=orders, resellers=resellers, settings=settings)
    yield engine
    await engine.close()


async def ref(view: CT.CatalogView, item_id: str) -> CT.CatalogItemRef:
    return (await view.ref(item_id)).unwrap()
