"""
Plain records: engine entities as dicts of str/int/bool/None/list.

Any storage layer can persist these and hand them back; from_record
rebuilds an equal entity. Datetimes are ISO-8601 strings, enums are
stored by value.

    data = records.to_record(order)
    assert records.order_from_record(data) == order
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pakasir._types import PaymentMethod, PaymentStatus
from pakasir.cart import Cart, CartLine
from pakasir.catalog import CatalogItemRef
from pakasir.discount import (
    NO_DISCOUNT,
    BundleDiscount,
    Coupon,
    CouponDiscount,
    DiscountKind,
    DiscountSelection,
    NoDiscount,
)
from pakasir.order import BuyerInfo, Order, OrderLine, Payment

type Record = dict[str, Any]


def _dt(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value is not None else None


# ═══════════════════════════════════════════════════════════════════════════════
# Coupon
# ═══════════════════════════════════════════════════════════════════════════════


def coupon_to_record(coupon: Coupon) -> Record:
    return {
        "code": coupon.code,
        "kind": coupon.kind.value,
        "value": coupon.value,
        "min_purchase": coupon.min_purchase,
        "is_active": coupon.is_active,
    }


def coupon_from_record(data: Record) -> Coupon:
    return Coupon(
        code=data["code"],
        kind=DiscountKind(data["kind"]),
        value=data["value"],
        min_purchase=data.get("min_purchase", 0),
        is_active=data.get("is_active", True),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Cart
# ═══════════════════════════════════════════════════════════════════════════════


def selection_to_record(selection: DiscountSelection) -> Record:
    match selection:
        case CouponDiscount(code):
            return {"kind": "coupon", "code": code}
        case BundleDiscount(amount, groups):
            return {"kind": "bundle", "amount": amount, "groups": groups}
        case NoDiscount():
            return {"kind": "none"}


def selection_from_record(data: Record | None) -> DiscountSelection:
    match (data or {}).get("kind", "none"):
        case "coupon":
            return CouponDiscount(data["code"])
        case "bundle":
            return BundleDiscount(amount=data["amount"], groups=data.get("groups", 0))
        case "none":
            return NO_DISCOUNT
        case other:
            raise ValueError(f"unknown discount selection {other!r}")


def cart_to_record(cart: Cart) -> Record:
    return {
        "lines": [
            {
                "item": {
                    "id": line.item.id,
                    "name": line.item.name,
                    "unit_price": line.item.unit_price,
                    "available_stock": line.item.available_stock,
                    "group_name": line.item.group_name,
                    "is_visible": line.item.is_visible,
                },
                "quantity": line.quantity,
            }
            for line in cart.lines
        ],
        "selection": selection_to_record(cart.selection),
    }


def cart_from_record(data: Record, *, clear_coupon_on_mutation: bool = False) -> Cart:
    lines = [
        CartLine(item=CatalogItemRef(**raw["item"]), quantity=raw["quantity"])
        for raw in data.get("lines", [])
    ]
    return Cart.restore(
        lines,
        selection_from_record(data.get("selection")),
        clear_coupon_on_mutation=clear_coupon_on_mutation,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Payment / Order
# ═══════════════════════════════════════════════════════════════════════════════


def payment_to_record(payment: Payment) -> Record:
    return {
        "id": payment.id,
        "order_id": payment.order_id,
        "amount": payment.amount,
        "status": payment.status.value,
        "created_at": _dt(payment.created_at),
        "expires_at": _dt(payment.expires_at),
        "paid_at": _dt(payment.paid_at),
        "qr_payload": payment.qr_payload,
    }


def payment_from_record(data: Record) -> Payment:
    return Payment(
        id=data["id"],
        order_id=data["order_id"],
        amount=data["amount"],
        status=PaymentStatus(data["status"]),
        created_at=datetime.fromisoformat(data["created_at"]),
        expires_at=datetime.fromisoformat(data["expires_at"]),
        paid_at=_parse_dt(data.get("paid_at")),
        qr_payload=data.get("qr_payload", ""),
    )


def order_to_record(order: Order) -> Record:
    buyer = order.buyer
    return {
        "id": order.id,
        "lines": [
            {
                "item_id": line.item_id,
                "item_name": line.item_name,
                "quantity": line.quantity,
                "unit_price": line.unit_price,
                "line_subtotal": line.line_subtotal,
            }
            for line in order.lines
        ],
        "subtotal": order.subtotal,
        "discount_amount": order.discount_amount,
        "discount_code": order.discount_code,
        "total": order.total,
        "payment_method": order.payment_method.value,
        "payment_status": order.payment_status.value,
        "buyer": (
            {"name": buyer.name, "phone": buyer.phone, "email": buyer.email, "notes": buyer.notes}
            if buyer is not None
            else None
        ),
        "reseller_id": order.reseller_id,
        "reseller_name": order.reseller_name,
        "created_at": _dt(order.created_at),
        "completed_at": _dt(order.completed_at),
        "payment": payment_to_record(order.payment) if order.payment else None,
    }


def order_from_record(data: Record) -> Order:
    buyer = data.get("buyer")
    payment = data.get("payment")
    return Order(
        id=data["id"],
        lines=tuple(OrderLine(**line) for line in data["lines"]),
        subtotal=data["subtotal"],
        discount_amount=data["discount_amount"],
        discount_code=data.get("discount_code"),
        total=data["total"],
        payment_method=PaymentMethod(data["payment_method"]),
        payment_status=PaymentStatus(data["payment_status"]),
        buyer=BuyerInfo(**buyer) if buyer is not None else None,
        reseller_id=data.get("reseller_id"),
        reseller_name=data.get("reseller_name"),
        created_at=datetime.fromisoformat(data["created_at"]),
        completed_at=_parse_dt(data.get("completed_at")),
        payment=payment_from_record(payment) if payment is not None else None,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Dispatch
# ═══════════════════════════════════════════════════════════════════════════════


def to_record(entity: Cart | Coupon | Order | Payment) -> Record:
    match entity:
        case Cart():
            return cart_to_record(entity)
        case Coupon():
            return coupon_to_record(entity)
        case Order():
            return order_to_record(entity)
        case Payment():
            return payment_to_record(entity)
        case _:
            raise TypeError(f"no record form for {type(entity).__name__}")


__all__ = (
    "Record",
    "to_record",
    "coupon_to_record",
    "coupon_from_record",
    "selection_to_record",
    "selection_from_record",
    "cart_to_record",
    "cart_from_record",
    "payment_to_record",
    "payment_from_record",
    "order_to_record",
    "order_from_record",
)
