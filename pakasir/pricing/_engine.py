"""
Pricing engine: cart + discount selection → priced summary.
"""

from __future__ import annotations

from dataclasses import dataclass

from pakasir._errors import PosError
from pakasir._types import Error, Money, Ok
from pakasir.cart import Cart
from pakasir.discount import (
    BundleDiscount,
    CouponDiscount,
    CouponRegistry,
    DiscountSelection,
    NoDiscount,
    resolve_coupon,
)


@dataclass(frozen=True, slots=True)
class PricedSummary:
    """
    Derived, never stored.

    coupon_dropped is set when a selected coupon no longer resolves
    (e.g. the subtotal fell below its minimum); the coupon then
    contributes 0 and drop_reason says why.
    """

    subtotal: Money
    discount_amount: Money
    total: Money
    selection: DiscountSelection
    coupon_dropped: bool = False
    drop_reason: PosError | None = None

    @property
    def discount_code(self) -> str | None:
        match self.selection:
            case CouponDiscount(code) if not self.coupon_dropped:
                return code
            case _:
                return None


def compute_summary(cart: Cart, registry: CouponRegistry) -> PricedSummary:
    """
    Price a cart.

    Pure: reads the cart and the registry, mutates neither, never fails.
    total = max(0, subtotal - discount).
    """
    subtotal = sum(line.line_subtotal for line in cart.lines)
    selection = cart.selection
    discount = 0
    dropped: PosError | None = None

    match selection:
        case NoDiscount():
            discount = 0
        case BundleDiscount(amount):
            discount = amount
        case CouponDiscount(code):
            match resolve_coupon(registry, code, subtotal):
                case Ok(quote):
                    discount = quote.amount
                case Error(e):
                    dropped = e

    return PricedSummary(
        subtotal=subtotal,
        discount_amount=discount,
        total=max(0, subtotal - discount),
        selection=selection,
        coupon_dropped=dropped is not None,
        drop_reason=dropped,
    )


class PricingEngine:
    """compute_summary bound to one coupon registry."""

    def __init__(self, registry: CouponRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> CouponRegistry:
        return self._registry

    def compute_summary(self, cart: Cart) -> PricedSummary:
        return compute_summary(cart, self._registry)


__all__ = (
    "PricedSummary",
    "compute_summary",
    "PricingEngine",
)
