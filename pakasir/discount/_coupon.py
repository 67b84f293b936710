"""
Coupon registry and resolution.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from pakasir._errors import Errors, PosError
from pakasir._types import Error, Money, Ok, Result
from pakasir.discount._types import Coupon, CouponQuote, CouponRegistry, normalize_code


class MemoryCouponRegistry:
    """Coupons keyed by upper-cased code."""

    def __init__(self, coupons: Iterable[Coupon] = ()) -> None:
        self._coupons: dict[str, Coupon] = {}
        for coupon in coupons:
            self.upsert(coupon)

    def find(self, code: str) -> Coupon | None:
        return self._coupons.get(normalize_code(code))

    def coupons(self) -> list[Coupon]:
        return list(self._coupons.values())

    def upsert(self, coupon: Coupon) -> Coupon:
        stored = replace(coupon, code=normalize_code(coupon.code))
        self._coupons[stored.code] = stored
        return stored

    def set_active(self, code: str, active: bool) -> Result[Coupon, PosError]:
        coupon = self.find(code)
        if coupon is None:
            return Error(Errors.invalid_code(code))
        return Ok(self.upsert(replace(coupon, is_active=active)))

    def remove(self, code: str) -> bool:
        return self._coupons.pop(normalize_code(code), None) is not None


def resolve_coupon(
    registry: CouponRegistry,
    code: str,
    subtotal: Money,
) -> Result[CouponQuote, PosError]:
    """
    Resolve a code against a subtotal.

    Checks run in order: exists → active → minimum purchase.
    The amount is not clamped to the subtotal; pricing clamps the total.
    """
    coupon = registry.find(code)
    if coupon is None:
        return Error(Errors.invalid_code(code))
    if not coupon.is_active:
        return Error(Errors.inactive(coupon.code))
    if subtotal < coupon.min_purchase:
        return Error(Errors.below_minimum(coupon.code, subtotal, coupon.min_purchase))
    return Ok(CouponQuote(code=coupon.code, amount=coupon.amount_for(subtotal)))


__all__ = (
    "MemoryCouponRegistry",
    "resolve_coupon",
)
