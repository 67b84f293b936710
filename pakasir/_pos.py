"""
PointOfSale: one session's cart wired to shared stock, coupons and orders.

Cart operations reprice immediately and return the fresh summary with
any notices. Checkout and payment operations return the Order.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from pakasir._errors import Notice, NoticeKind, PosError
from pakasir._settings import Settings
from pakasir._types import Error, ItemId, Ok, OrderId, PaymentMethod, Result
from pakasir.cart import Cart
from pakasir.catalog import Catalog, CatalogView
from pakasir.discount import (
    CouponDiscount,
    CouponRegistry,
    assemble_bundle,
    bundle_candidates,
    resolve_coupon,
)
from pakasir.ledger import StockLedger
from pakasir.order import (
    BuyerInfo,
    Checkout,
    MemoryOrderStore,
    Order,
    OrderStore,
    ResellerRegistry,
)
from pakasir.payment import PaymentLifecycle
from pakasir.pricing import PricedSummary, PricingEngine


@dataclass(frozen=True, slots=True)
class Mutation:
    """Outcome of a cart operation: the repriced summary plus soft notices."""

    summary: PricedSummary
    notices: tuple[Notice, ...] = ()

    def has(self, kind: NoticeKind) -> bool:
        return any(n.kind is kind for n in self.notices)


class PointOfSale:
    """
    Facade over the engine for one cart.

    Several PointOfSale instances (one per terminal or customer
    session) may share a ledger, order store and lifecycle; stock
    contention between them is settled by the ledger's atomic debit.

    Example:
        pos = PointOfSale(catalog, ledger, coupons)
        await pos.add_to_cart("netflix-1m")
        pos.apply_coupon("HEMAT10")
        match await pos.checkout(BuyerInfo("Budi"), PaymentMethod.QRIS):
            case Ok(order):
                await pos.confirm_payment(order.id)
    """

    def __init__(
        self,
        catalog: Catalog,
        ledger: StockLedger,
        coupons: CouponRegistry,
        *,
        orders: OrderStore | None = None,
        resellers: ResellerRegistry | None = None,
        lifecycle: PaymentLifecycle | None = None,
        settings: Settings = Settings(),
    ) -> None:
        self._settings = settings
        self._view = CatalogView(catalog, ledger, thousands_marker=settings.thousands_marker)
        self._pricing = PricingEngine(coupons)
        self._orders = orders if orders is not None else MemoryOrderStore()
        self._cart = Cart(clear_coupon_on_mutation=settings.clear_coupon_on_mutation)
        self._checkout = Checkout(
            self._view,
            self._pricing,
            self._orders,
            resellers=resellers,
            settings=settings,
        )
        self._lifecycle = lifecycle or PaymentLifecycle(self._orders, ledger, settings=settings)

    @property
    def cart(self) -> Cart:
        return self._cart

    @property
    def orders(self) -> OrderStore:
        return self._orders

    @property
    def lifecycle(self) -> PaymentLifecycle:
        return self._lifecycle

    @property
    def view(self) -> CatalogView:
        return self._view

    # ═══════════════════════════════════════════════════════════════════════════
    # Cart
    # ═══════════════════════════════════════════════════════════════════════════

    async def add_to_cart(self, item_id: ItemId) -> Result[Mutation, PosError]:
        match await self._view.ref(item_id):
            case Ok(ref):
                return self._settle(self._cart.add_item(ref))
            case Error(e):
                return Error(e)

    async def set_quantity(self, item_id: ItemId, quantity: int) -> Result[Mutation, PosError]:
        if quantity <= 0 and item_id in self._cart:
            return self._settle(self._cart.remove_item(item_id))
        match await self._view.ref(item_id):
            case Ok(ref):
                return self._settle(self._cart.set_quantity(ref, quantity))
            case Error(e):
                return Error(e)

    def remove_from_cart(self, item_id: ItemId) -> Result[Mutation, PosError]:
        return self._settle(self._cart.remove_item(item_id))

    def reset(self) -> None:
        self._cart.clear()

    # ═══════════════════════════════════════════════════════════════════════════
    # Discounts
    # ═══════════════════════════════════════════════════════════════════════════

    def apply_coupon(self, code: str) -> Result[Mutation, PosError]:
        """Validate against the current subtotal, then replace any bundle or coupon."""
        subtotal = self.compute_summary().subtotal
        match resolve_coupon(self._pricing.registry, code, subtotal):
            case Ok(quote):
                self._cart.select_coupon(quote.code)
                return Ok(self._reprice([]))
            case Error(e):
                return Error(e)

    def remove_coupon(self) -> Mutation:
        if isinstance(self._cart.selection, CouponDiscount):
            self._cart.clear_discount()
        return self._reprice([])

    async def assemble_bundle(self, item_ids: Iterable[ItemId] | None = None) -> Result[Mutation, PosError]:
        """
        Replace the cart with a bundle.

        item_ids=None picks the cheapest in-stock item of every group.
        """
        if item_ids is None:
            members = bundle_candidates(await self._view.all_refs())
        else:
            match await self._view.refs(item_ids):
                case Ok(members):
                    pass
                case Error(e):
                    return Error(e)

        match assemble_bundle(
            members,
            self._settings.bundle_tiers,
            min_groups=self._settings.min_bundle_groups,
        ):
            case Ok(quote):
                self._cart.replace_with_bundle(quote.members, quote.amount, groups=quote.groups)
                return Ok(self._reprice([]))
            case Error(e):
                return Error(e)

    # ═══════════════════════════════════════════════════════════════════════════
    # Pricing
    # ═══════════════════════════════════════════════════════════════════════════

    def compute_summary(self) -> PricedSummary:
        return self._pricing.compute_summary(self._cart)

    def _settle(self, result: Result[list[Notice], PosError]) -> Result[Mutation, PosError]:
        match result:
            case Ok(notices):
                return Ok(self._reprice(notices))
            case Error(e):
                return Error(e)

    def _reprice(self, notices: list[Notice]) -> Mutation:
        """Reprice; a coupon that no longer resolves is deactivated and reported."""
        summary = self.compute_summary()
        selection = self._cart.selection
        if summary.coupon_dropped and isinstance(selection, CouponDiscount):
            self._cart.clear_discount()
            reason = summary.drop_reason.message if summary.drop_reason else "no longer applicable"
            notices = [*notices, Notice(NoticeKind.COUPON_DROPPED, f"coupon {selection.code} removed: {reason}")]
        return Mutation(summary=summary, notices=tuple(notices))

    # ═══════════════════════════════════════════════════════════════════════════
    # Checkout / Payment
    # ═══════════════════════════════════════════════════════════════════════════

    async def checkout(
        self,
        buyer: BuyerInfo | None,
        method: PaymentMethod,
        *,
        reseller_id: str | None = None,
    ) -> Result[Order, PosError]:
        result = await self._checkout.run(self._cart, buyer, method, reseller_id=reseller_id)
        match result:
            case Ok(order) if not order.is_terminal:
                self._lifecycle.track(order)
        return result

    async def get_order(self, order_id: OrderId) -> Result[Order, PosError]:
        return await self._orders.get(order_id)

    async def confirm_payment(self, order_id: OrderId) -> Result[Order, PosError]:
        return await self._lifecycle.confirm(order_id)

    async def cancel_payment(self, order_id: OrderId) -> Result[Order, PosError]:
        return await self._lifecycle.cancel(order_id)

    async def expire_due(self) -> list[Order]:
        return await self._lifecycle.expire_due()

    async def close(self) -> None:
        """Stop every pending expiry timer."""
        await self._lifecycle.close()


__all__ = (
    "Mutation",
    "PointOfSale",
)
