"""
Catalog view: joins catalog items with live ledger availability.
"""

from __future__ import annotations

from collections.abc import Iterable

from pakasir._errors import Errors, PosError
from pakasir._types import Error, ItemId, Ok, Result
from pakasir.catalog._types import Catalog, CatalogItem, CatalogItemRef
from pakasir.ledger import StockLedger
from pakasir.price import parse_price


class CatalogView:
    """
    Produces CatalogItemRef snapshots for pricing and checkout.

    Every call reads the ledger again, so a ref is only as fresh as the
    moment it was taken. Checkout re-reads refs right before committing.
    """

    def __init__(self, catalog: Catalog, ledger: StockLedger, *, thousands_marker: str = "k") -> None:
        self._catalog = catalog
        self._ledger = ledger
        self._marker = thousands_marker

    @property
    def ledger(self) -> StockLedger:
        return self._ledger

    async def ref(self, item_id: ItemId) -> Result[CatalogItemRef, PosError]:
        item = await self._catalog.get(item_id)
        if item is None:
            return Error(Errors.not_found("item", item_id))
        return await self._project(item)

    async def refs(self, item_ids: Iterable[ItemId]) -> Result[list[CatalogItemRef], PosError]:
        """Refs in the given order; first missing item fails the whole call."""
        out: list[CatalogItemRef] = []
        for item_id in item_ids:
            match await self.ref(item_id):
                case Ok(ref):
                    out.append(ref)
                case Error(e):
                    return Error(e)
        return Ok(out)

    async def all_refs(self) -> list[CatalogItemRef]:
        """Every catalog item the ledger knows about."""
        out: list[CatalogItemRef] = []
        for item in await self._catalog.list_items():
            match await self._project(item):
                case Ok(ref):
                    out.append(ref)
                case Error(_):
                    continue
        return out

    async def unit_price(self, item_id: ItemId) -> Result[int, PosError]:
        return (await self.ref(item_id)).map(lambda r: r.unit_price)

    async def _project(self, item: CatalogItem) -> Result[CatalogItemRef, PosError]:
        match await self._ledger.available(item.id):
            case Ok(stock):
                return Ok(
                    CatalogItemRef(
                        id=item.id,
                        name=item.name,
                        unit_price=parse_price(item.price, self._marker),
                        available_stock=stock,
                        group_name=item.group_name,
                        is_visible=item.is_visible,
                    )
                )
            case Error(e):
                return Error(e)


__all__ = ("CatalogView",)
