"""
Discount types: coupons and the cart's discount selection.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from pakasir._types import Money


# ═══════════════════════════════════════════════════════════════════════════════
# Coupon
# ═══════════════════════════════════════════════════════════════════════════════


class DiscountKind(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


def normalize_code(code: str) -> str:
    return code.strip().upper()


@dataclass(frozen=True, slots=True)
class Coupon:
    """
    Independently managed discount code.

    value is a percent for PERCENTAGE, an amount for FIXED.
    """

    code: str
    kind: DiscountKind
    value: int | float
    min_purchase: Money = 0
    is_active: bool = True

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("coupon value must be >= 0")
        if self.min_purchase < 0:
            raise ValueError("min_purchase must be >= 0")

    def amount_for(self, subtotal: Money) -> Money:
        """Discount for a subtotal, floored. FIXED is not clamped here."""
        match self.kind:
            case DiscountKind.PERCENTAGE:
                return math.floor(subtotal * self.value / 100)
            case DiscountKind.FIXED:
                return math.floor(self.value)


@dataclass(frozen=True, slots=True)
class CouponQuote:
    """A coupon that resolved against a subtotal."""

    code: str
    amount: Money


class CouponRegistry(Protocol):
    def find(self, code: str) -> Coupon | None:
        """Case-insensitive lookup, active or not."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Discount Selection: tagged variant, at most one per cart
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class NoDiscount:
    pass


@dataclass(frozen=True, slots=True)
class CouponDiscount:
    code: str


@dataclass(frozen=True, slots=True)
class BundleDiscount:
    """Amount frozen at assembly time; never recomputed from a live subtotal."""

    amount: Money
    groups: int = 0


type DiscountSelection = NoDiscount | CouponDiscount | BundleDiscount

NO_DISCOUNT = NoDiscount()


__all__ = (
    "DiscountKind",
    "normalize_code",
    "Coupon",
    "CouponQuote",
    "CouponRegistry",
    "NoDiscount",
    "CouponDiscount",
    "BundleDiscount",
    "DiscountSelection",
    "NO_DISCOUNT",
)
