"""Shared infrastructure for examples."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine

from pakasir import PosError, Settings, PointOfSale
from pakasir import catalog as CT
from pakasir import discount as D
from pakasir import ledger as LG
from pakasir.price import format_money


# Demo catalog
ITEMS = [
    CT.CatalogItem("netflix-1m", "Netflix Premium 1 Bulan", "30k", "Netflix"),
    CT.CatalogItem("spotify-1m", "Spotify Premium 1 Bulan", "25k", "Spotify"),
    CT.CatalogItem("youtube-1m", "YouTube Premium 1 Bulan", "10k", "YouTube"),
    CT.CatalogItem("canva-1m", "Canva Pro 1 Bulan", "20k", "Canva", min_stock=1),
    CT.CatalogItem("chatgpt-1m", "ChatGPT Plus 1 Bulan", "40k", "ChatGPT"),
]

LEVELS = {"netflix-1m": 10, "spotify-1m": 5, "youtube-1m": 3, "canva-1m": 1, "chatgpt-1m": 5}

COUPONS = [
    D.Coupon("HEMAT10", D.DiscountKind.PERCENTAGE, 10, min_purchase=50_000),
    D.Coupon("FUTOPREMIUM", D.DiscountKind.FIXED, 15_000, min_purchase=100_000),
]


def demo_pos(ledger: LG.StockLedger | None = None, settings: Settings = Settings()) -> PointOfSale:
    return PointOfSale(
        CT.MemoryCatalog(ITEMS),
        ledger or LG.MemoryLedger(LEVELS, min_stock={"canva-1m": 1}),
        D.MemoryCouponRegistry(COUPONS),
        settings=settings,
    )


# Helpers
def banner(title: str) -> None:
    print(f"\n{'─' * 50}\n{title}\n{'─' * 50}")


def show_summary(pos: PointOfSale) -> None:
    s = pos.compute_summary()
    print(f"  subtotal {format_money(s.subtotal)} | discount {format_money(s.discount_amount)} | total {format_money(s.total)}")


def show_error(e: PosError) -> None:
    print(f"  ✗ {e.kind.name}: {e.message}")


def run(main: Callable[[], Coroutine[object, object, None]]) -> None:
    logging.basicConfig(level=logging.INFO, format="  [%(name)s] %(message)s")
    asyncio.run(main())
