"""
Cart: ordered lines bounded by available stock, plus one discount selection.

Cart operations are synchronous and take CatalogItemRef snapshots that
the caller has just read; they never touch the ledger.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace

from pakasir._errors import Errors, Notice, NoticeKind, PosError
from pakasir._types import Error, ItemId, Money, Ok, Result
from pakasir.catalog import CatalogItemRef
from pakasir.discount import (
    NO_DISCOUNT,
    BundleDiscount,
    CouponDiscount,
    DiscountSelection,
    normalize_code,
)


# ═══════════════════════════════════════════════════════════════════════════════
# Cart Line
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CartLine:
    """A line never has quantity 0: removal deletes it."""

    item: CatalogItemRef
    quantity: int

    @property
    def item_id(self) -> ItemId:
        return self.item.id

    @property
    def line_subtotal(self) -> Money:
        return self.item.unit_price * self.quantity


def _clamped(item: CatalogItemRef, requested: int, applied: int) -> Notice:
    return Notice(
        NoticeKind.QUANTITY_CLAMPED,
        f"only {item.available_stock} of {item.name} available",
        item_id=item.id,
        requested=requested,
        applied=applied,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Cart
# ═══════════════════════════════════════════════════════════════════════════════


class Cart:
    """
    Session-owned cart.

    Mutations return Ok(notices) for soft outcomes (clamped quantity,
    dropped bundle) and Error(PosError) for rejected operations, which
    leave the cart untouched.

    Example:
        cart = Cart()
        cart.add_item(netflix_ref)          # Ok([])
        cart.set_quantity(netflix_ref, 99)  # Ok([Notice(QUANTITY_CLAMPED, ...)])
    """

    def __init__(self, *, clear_coupon_on_mutation: bool = False) -> None:
        self._lines: dict[ItemId, CartLine] = {}
        self._selection: DiscountSelection = NO_DISCOUNT
        self._clear_coupon_on_mutation = clear_coupon_on_mutation

    @property
    def lines(self) -> tuple[CartLine, ...]:
        return tuple(self._lines.values())

    @property
    def selection(self) -> DiscountSelection:
        return self._selection

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def quantity_of(self, item_id: ItemId) -> int:
        line = self._lines.get(item_id)
        return line.quantity if line else 0

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._lines

    # ───────────────────────────────────────────────────────────────────────────
    # Manual mutations
    # ───────────────────────────────────────────────────────────────────────────

    def add_item(self, item: CatalogItemRef) -> Result[list[Notice], PosError]:
        """
        Insert with quantity 1 or increment. OUT_OF_STOCK when nothing is available.

        An add clamped at the line's current quantity leaves the cart,
        and its discount selection, untouched.
        """
        if item.available_stock <= 0:
            return Error(Errors.out_of_stock(item.id))

        before = self.quantity_of(item.id)
        notices = self._put(item, before + 1)
        if self.quantity_of(item.id) == before:
            return Ok(notices)
        return Ok(notices + self._after_manual_mutation())

    def set_quantity(self, item: CatalogItemRef, quantity: int) -> Result[list[Notice], PosError]:
        """qty <= 0 removes the line; qty above availability is clamped with a notice."""
        if quantity <= 0:
            if self._lines.pop(item.id, None) is None:
                return Ok([])
            return Ok(self._after_manual_mutation())

        before = self.quantity_of(item.id)
        notices = self._put(item, quantity)
        if self.quantity_of(item.id) == before:
            return Ok(notices)
        return Ok(notices + self._after_manual_mutation())

    def remove_item(self, item_id: ItemId) -> Result[list[Notice], PosError]:
        if item_id not in self._lines:
            return Error(Errors.not_found("cart line", item_id))
        del self._lines[item_id]
        return Ok(self._after_manual_mutation())

    def _put(self, item: CatalogItemRef, requested: int) -> list[Notice]:
        applied = min(requested, item.available_stock)
        if applied <= 0:
            self._lines.pop(item.id, None)
        elif item.id in self._lines:
            self._lines[item.id] = replace(self._lines[item.id], item=item, quantity=applied)
        else:
            self._lines[item.id] = CartLine(item=item, quantity=applied)

        if applied < requested:
            return [_clamped(item, requested, applied)]
        return []

    def _after_manual_mutation(self) -> list[Notice]:
        match self._selection:
            case BundleDiscount():
                self._selection = NO_DISCOUNT
                return [Notice(NoticeKind.BUNDLE_CLEARED, "cart edited by hand, bundle discount removed")]
            case CouponDiscount(code) if self._clear_coupon_on_mutation:
                self._selection = NO_DISCOUNT
                return [Notice(NoticeKind.COUPON_CLEARED, f"cart edited by hand, coupon {code} removed")]
            case _:
                return []

    # ───────────────────────────────────────────────────────────────────────────
    # Discount selection
    # ───────────────────────────────────────────────────────────────────────────

    def replace_with_bundle(
        self,
        items: Iterable[CatalogItemRef],
        discount_amount: Money,
        *,
        groups: int = 0,
    ) -> None:
        """Swap every line for one unit of each distinct item and freeze the bundle discount."""
        if discount_amount < 0:
            raise ValueError("bundle discount must be >= 0")
        lines: dict[ItemId, CartLine] = {}
        for item in items:
            lines.setdefault(item.id, CartLine(item=item, quantity=1))
        self._lines = lines
        self._selection = BundleDiscount(amount=discount_amount, groups=groups)

    def select_coupon(self, code: str) -> None:
        """Make a coupon the active selection, replacing a bundle. Validation is the caller's job."""
        self._selection = CouponDiscount(normalize_code(code))

    def clear_discount(self) -> None:
        self._selection = NO_DISCOUNT

    def clear(self) -> None:
        self._lines.clear()
        self._selection = NO_DISCOUNT

    # ───────────────────────────────────────────────────────────────────────────
    # Snapshots
    # ───────────────────────────────────────────────────────────────────────────

    @classmethod
    def restore(
        cls,
        lines: Iterable[CartLine],
        selection: DiscountSelection = NO_DISCOUNT,
        *,
        clear_coupon_on_mutation: bool = False,
    ) -> Cart:
        cart = cls(clear_coupon_on_mutation=clear_coupon_on_mutation)
        for line in lines:
            if line.quantity <= 0:
                raise ValueError(f"line {line.item_id} has quantity {line.quantity}")
            cart._lines[line.item_id] = line
        cart._selection = selection
        return cart

    def __repr__(self) -> str:
        lines = ", ".join(f"{l.item_id}x{l.quantity}" for l in self._lines.values())
        return f"Cart([{lines}], {self._selection!r})"


__all__ = (
    "CartLine",
    "Cart",
)
