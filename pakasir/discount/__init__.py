"""
Discounts: coupons and bundles, never combined.

    from pakasir import discount as D

    registry = D.MemoryCouponRegistry([
        D.Coupon("HEMAT10", D.DiscountKind.PERCENTAGE, 10, min_purchase=50_000),
    ])
    D.resolve_coupon(registry, "hemat10", 60_000)   # Ok(CouponQuote("HEMAT10", 6000))

    D.assemble_bundle(refs)                          # Ok(BundleQuote(...))
"""

from pakasir.discount._types import (
    DiscountKind,
    Coupon,
    CouponQuote,
    CouponRegistry,
    NoDiscount,
    CouponDiscount,
    BundleDiscount,
    DiscountSelection,
    NO_DISCOUNT,
    normalize_code,
)
from pakasir.discount._coupon import MemoryCouponRegistry, resolve_coupon
from pakasir.discount._bundle import (
    BundleQuote,
    tier_percent,
    bundle_candidates,
    assemble_bundle,
)

__all__ = (
    # Coupons
    "DiscountKind",
    "Coupon",
    "CouponQuote",
    "CouponRegistry",
    "MemoryCouponRegistry",
    "resolve_coupon",
    "normalize_code",
    # Selection
    "NoDiscount",
    "CouponDiscount",
    "BundleDiscount",
    "DiscountSelection",
    "NO_DISCOUNT",
    # Bundles
    "BundleQuote",
    "tier_percent",
    "bundle_candidates",
    "assemble_bundle",
)
