"""
Bundle assembly: one item per product group, tiered discount.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from pakasir._errors import Errors, PosError
from pakasir._settings import DEFAULT_BUNDLE_TIERS
from pakasir._types import Error, Money, Ok, Result
from pakasir.catalog import CatalogItemRef


@dataclass(frozen=True, slots=True)
class BundleQuote:
    members: tuple[CatalogItemRef, ...]
    groups: int
    subtotal: Money
    percent: int
    amount: Money

    @property
    def total(self) -> Money:
        return max(0, self.subtotal - self.amount)


def tier_percent(groups: int, tiers: Mapping[int, int] = DEFAULT_BUNDLE_TIERS, *, min_groups: int = 2) -> int:
    """
    Discount percent for a count of distinct groups.

    Below min_groups → 0. Counts past the highest tier use the highest tier.
    """
    if groups < min_groups:
        return 0
    eligible = [percent for threshold, percent in tiers.items() if threshold <= groups]
    return max(eligible, default=0)


def bundle_candidates(refs: Iterable[CatalogItemRef]) -> list[CatalogItemRef]:
    """Cheapest visible, in-stock item of every group, groups in first-seen order."""
    best: dict[str, CatalogItemRef] = {}
    for ref in refs:
        if not ref.is_visible or not ref.in_stock:
            continue
        current = best.get(ref.group_name)
        if current is None or ref.unit_price < current.unit_price:
            best[ref.group_name] = ref
    return list(best.values())


def assemble_bundle(
    members: Iterable[CatalogItemRef],
    tiers: Mapping[int, int] = DEFAULT_BUNDLE_TIERS,
    *,
    min_groups: int = 2,
) -> Result[BundleQuote, PosError]:
    """
    Price a set of bundle members.

    Members are deduplicated by id. Every member must be in stock and
    they must span at least min_groups distinct groups. The discount is
    floor(subtotal * percent / 100) over the bundle's own subtotal.
    """
    unique: dict[str, CatalogItemRef] = {}
    for ref in members:
        unique.setdefault(ref.id, ref)
    chosen = tuple(unique.values())

    for ref in chosen:
        if not ref.in_stock:
            return Error(Errors.out_of_stock(ref.id))

    groups = len({ref.group_name for ref in chosen})
    if groups < min_groups:
        return Error(Errors.insufficient_bundle_members(groups, min_groups))

    subtotal = sum(ref.unit_price for ref in chosen)
    percent = tier_percent(groups, tiers, min_groups=min_groups)
    return Ok(
        BundleQuote(
            members=chosen,
            groups=groups,
            subtotal=subtotal,
            percent=percent,
            amount=subtotal * percent // 100,
        )
    )


__all__ = (
    "BundleQuote",
    "tier_percent",
    "bundle_candidates",
    "assemble_bundle",
)
