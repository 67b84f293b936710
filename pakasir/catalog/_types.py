"""
Catalog types: the read-only view the engine has of sellable items.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from pakasir._types import ItemId, Money


@dataclass(frozen=True, slots=True)
class CatalogItem:
    """
    Item as maintained by the catalog.

    price is the free-text token entered by the operator ("15k",
    "Rp 25.000"); it is only turned into Money through the price parser.
    group_name ties together plans of one product (e.g. every Netflix
    plan) for bundle assembly.
    """

    id: ItemId
    name: str
    price: str
    group_name: str
    plan_name: str = ""
    category: str = ""
    is_visible: bool = True
    min_stock: int = 0


@dataclass(frozen=True, slots=True)
class CatalogItemRef:
    """Projection of an item at the moment of query: price parsed, stock read from the ledger."""

    id: ItemId
    name: str
    unit_price: Money
    available_stock: int
    group_name: str
    is_visible: bool = True

    @property
    def in_stock(self) -> bool:
        return self.available_stock > 0


class Catalog(Protocol):
    async def get(self, item_id: ItemId) -> CatalogItem | None:
        """Item by id, None when unknown."""
        ...

    async def list_items(self) -> list[CatalogItem]:
        ...


__all__ = (
    "CatalogItem",
    "CatalogItemRef",
    "Catalog",
)
