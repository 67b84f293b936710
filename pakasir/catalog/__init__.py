"""
Catalog: read-only item source for the engine.

    from pakasir import catalog as CT

    view = CT.CatalogView(CT.MemoryCatalog(items), ledger)
    match await view.ref("netflix-1m"):
        case Ok(ref): ref.unit_price, ref.available_stock
"""

from pakasir.catalog._types import CatalogItem, CatalogItemRef, Catalog
from pakasir.catalog._memory import MemoryCatalog
from pakasir.catalog._view import CatalogView

__all__ = (
    "CatalogItem",
    "CatalogItemRef",
    "Catalog",
    "MemoryCatalog",
    "CatalogView",
)
