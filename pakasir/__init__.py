"""
pakasir: point-of-sale pricing and order lifecycle.

    from pakasir import PointOfSale, Settings
    from pakasir import discount as D   # Coupons, bundles
    from pakasir import ledger as LG    # Stock ledger
    from pakasir import payment as PY   # Payment lifecycle
"""

from pakasir import price
from pakasir import catalog
from pakasir import ledger
from pakasir import discount
from pakasir import cart
from pakasir import pricing
from pakasir import order
from pakasir import payment
from pakasir import records
from pakasir._types import (
    Result,
    Ok,
    Error,
    Money,
    ItemId,
    OrderId,
    PaymentMethod,
    PaymentStatus,
)
from pakasir._errors import ErrorKind, PosError, Errors, NoticeKind, Notice
from pakasir._settings import Settings
from pakasir._pos import Mutation, PointOfSale

__version__ = "0.1.0"

__all__ = (
    # Subpackages
    "price",
    "catalog",
    "ledger",
    "discount",
    "cart",
    "pricing",
    "order",
    "payment",
    "records",
    # Types
    "Result",
    "Ok",
    "Error",
    "Money",
    "ItemId",
    "OrderId",
    "PaymentMethod",
    "PaymentStatus",
    # Errors
    "ErrorKind",
    "PosError",
    "Errors",
    "NoticeKind",
    "Notice",
    # Engine
    "Settings",
    "Mutation",
    "PointOfSale",
)
