"""
Pricing: subtotal, discount, total.

    from pakasir import pricing as PR

    summary = PR.compute_summary(cart, registry)
    summary.total, summary.coupon_dropped
"""

from pakasir.pricing._engine import PricedSummary, compute_summary, PricingEngine

__all__ = (
    "PricedSummary",
    "compute_summary",
    "PricingEngine",
)
