"""
Orders: snapshots created at checkout.

    from pakasir import order as O

    checkout = O.Checkout(view, pricing, O.MemoryOrderStore())
    match await checkout.run(cart, O.BuyerInfo("Budi", phone="0812"), PaymentMethod.CASH):
        case Ok(order): order.payment_status   # PAID
        case Error(e): e.kind                  # EMPTY_CART, STOCK_CONFLICT, ...
"""

from pakasir.order._types import (
    TERMINAL_STATUSES,
    BuyerInfo,
    Reseller,
    OrderLine,
    Payment,
    Order,
)
from pakasir.order._store import (
    OrderStore,
    MemoryOrderStore,
    ResellerRegistry,
    MemoryResellerRegistry,
)
from pakasir.order._checkout import Checkout, sale_reason, new_order_id

__all__ = (
    # Types
    "TERMINAL_STATUSES",
    "BuyerInfo",
    "Reseller",
    "OrderLine",
    "Payment",
    "Order",
    # Stores
    "OrderStore",
    "MemoryOrderStore",
    "ResellerRegistry",
    "MemoryResellerRegistry",
    # Checkout
    "Checkout",
    "sale_reason",
    "new_order_id",
)
