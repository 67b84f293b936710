"""
In-memory catalog.
"""

from __future__ import annotations

from collections.abc import Iterable

from pakasir._types import ItemId
from pakasir.catalog._types import CatalogItem


class MemoryCatalog:
    def __init__(self, items: Iterable[CatalogItem] = ()) -> None:
        self._items: dict[ItemId, CatalogItem] = {item.id: item for item in items}

    def put(self, item: CatalogItem) -> None:
        self._items[item.id] = item

    async def get(self, item_id: ItemId) -> CatalogItem | None:
        return self._items.get(item_id)

    async def list_items(self) -> list[CatalogItem]:
        return list(self._items.values())


__all__ = ("MemoryCatalog",)
