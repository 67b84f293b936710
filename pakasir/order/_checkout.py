"""
Checkout: turn a cart into an Order snapshot.

Synchronous channels (cash, transfer, WhatsApp) are PAID on creation and
debit stock before the order exists. QRIS orders start PENDING with a
Payment and leave stock alone until the payment is confirmed.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace

from pakasir._errors import Errors, PosError
from pakasir._qris import build_qris_payload
from pakasir._settings import Settings
from pakasir._types import Error, Ok, PaymentMethod, PaymentStatus, Result
from pakasir.cart import Cart
from pakasir.catalog import CatalogItemRef, CatalogView
from pakasir.ledger import compensate, debit_all
from pakasir.order._store import OrderStore, ResellerRegistry
from pakasir.order._types import BuyerInfo, Order, OrderLine, Payment, Reseller
from pakasir.price import format_money
from pakasir.pricing import PricedSummary, PricingEngine

logger = logging.getLogger("pakasir.checkout")


def sale_reason(buyer: BuyerInfo | None) -> str:
    """Journal text for a sale debit."""
    return f"Sale to {buyer.describe()}" if buyer and buyer.name else "Sale"


def new_order_id() -> str:
    return f"ord_{uuid.uuid4().hex[:12]}"


class Checkout:
    """
    Order creation.

    On any failure the cart is left exactly as it was and no stock has
    moved. On success the cart is cleared. A selected coupon that fails
    to resolve against the fresh prices rejects the checkout with the
    coupon's own error (INACTIVE, BELOW_MINIMUM, INVALID_CODE).
    """

    def __init__(
        self,
        view: CatalogView,
        pricing: PricingEngine,
        orders: OrderStore,
        *,
        resellers: ResellerRegistry | None = None,
        settings: Settings = Settings(),
    ) -> None:
        self._view = view
        self._pricing = pricing
        self._orders = orders
        self._resellers = resellers
        self._settings = settings

    async def run(
        self,
        cart: Cart,
        buyer: BuyerInfo | None,
        method: PaymentMethod,
        *,
        reseller_id: str | None = None,
    ) -> Result[Order, PosError]:
        if cart.is_empty:
            return Error(Errors.empty_cart())

        missing = (buyer or BuyerInfo()).missing(self._settings.buyer_fields_for(method))
        if missing:
            return Error(Errors.incomplete_buyer_info(missing))

        reseller: Reseller | None = None
        if reseller_id is not None:
            reseller = self._resellers.get(reseller_id) if self._resellers is not None else None
            if reseller is None:
                return Error(Errors.unknown_reseller(reseller_id))

        match await self._fresh_cart(cart):
            case Ok(priced_cart):
                pass
            case Error(e):
                return Error(e)

        summary = self._pricing.compute_summary(priced_cart)
        if summary.coupon_dropped and summary.drop_reason is not None:
            logger.warning("checkout rejected, coupon no longer applies: %s", summary.drop_reason)
            return Error(summary.drop_reason)

        order = self._snapshot(priced_cart, summary, buyer, method, reseller)

        if method.is_async:
            result = await self._open_pending(order)
        else:
            result = await self._settle_now(order)

        if result:
            cart.clear()
        return result

    async def _fresh_cart(self, cart: Cart) -> Result[Cart, PosError]:
        """Copy of the cart with current prices and stock; STOCK_CONFLICT if a line no longer fits."""
        match await self._view.refs(line.item_id for line in cart.lines):
            case Ok(refs):
                pass
            case Error(e):
                return Error(e)

        fresh: dict[str, CatalogItemRef] = {ref.id: ref for ref in refs}
        for line in cart.lines:
            current = fresh[line.item_id]
            if line.quantity > current.available_stock:
                return Error(Errors.stock_conflict(line.item_id, line.quantity, current.available_stock))

        return Ok(
            Cart.restore(
                [replace(line, item=fresh[line.item_id]) for line in cart.lines],
                cart.selection,
            )
        )

    def _snapshot(
        self,
        cart: Cart,
        summary: PricedSummary,
        buyer: BuyerInfo | None,
        method: PaymentMethod,
        reseller: Reseller | None,
    ) -> Order:
        now = self._settings.clock()
        order_id = new_order_id()
        payment: Payment | None = None
        status = PaymentStatus.PAID

        if method.is_async:
            status = PaymentStatus.PENDING
            payment = Payment(
                id=f"pay_{uuid.uuid4().hex[:12]}",
                order_id=order_id,
                amount=summary.total,
                status=PaymentStatus.PENDING,
                created_at=now,
                expires_at=now + self._settings.payment_ttl,
                qr_payload=build_qris_payload(
                    amount=summary.total,
                    reference=order_id,
                    merchant_name=self._settings.merchant_name,
                    merchant_city=self._settings.merchant_city,
                ),
            )

        return Order(
            id=order_id,
            lines=tuple(
                OrderLine(
                    item_id=line.item_id,
                    item_name=line.item.name,
                    quantity=line.quantity,
                    unit_price=line.item.unit_price,
                    line_subtotal=line.line_subtotal,
                )
                for line in cart.lines
            ),
            subtotal=summary.subtotal,
            discount_amount=summary.discount_amount,
            discount_code=summary.discount_code,
            total=summary.total,
            payment_method=method,
            payment_status=status,
            buyer=buyer,
            reseller_id=reseller.id if reseller else None,
            reseller_name=reseller.name if reseller else None,
            created_at=now,
            completed_at=None if method.is_async else now,
            payment=payment,
        )

    async def _open_pending(self, order: Order) -> Result[Order, PosError]:
        match await self._orders.save(order):
            case Ok(saved):
                assert saved.payment is not None
                logger.info(
                    "order %s pending via %s, %s due by %s",
                    saved.id,
                    saved.payment_method.value,
                    format_money(saved.total),
                    saved.payment.expires_at.isoformat(),
                )
                return Ok(saved)
            case Error(e):
                return Error(e)

    async def _settle_now(self, order: Order) -> Result[Order, PosError]:
        reason = sale_reason(order.buyer)
        match await debit_all(self._view.ledger, order.debit_lines, reason=reason, order_id=order.id):
            case Ok(movements):
                pass
            case Error(e):
                logger.warning("checkout %s rejected: %s", order.id, e)
                return Error(e)

        match await self._orders.save(order):
            case Ok(saved):
                logger.info("order %s paid via %s, %s", saved.id, saved.payment_method.value, format_money(saved.total))
                return Ok(saved)
            case Error(e):
                await compensate(self._view.ledger, list(movements), reason=reason)
                return Error(e)


__all__ = (
    "Checkout",
    "sale_reason",
    "new_order_id",
)
