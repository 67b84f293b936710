from pakasir import ErrorKind
from pakasir.cart import Cart
from pakasir.catalog import CatalogItemRef
from pakasir.pricing import PricingEngine, compute_summary


def item(item_id, price, stock=10):
    return CatalogItemRef(item_id, item_id, price, stock, item_id)


def test_empty_cart():
    summary = compute_summary(Cart(), None)
    assert (summary.subtotal, summary.discount_amount, summary.total) == (0, 0, 0)


def test_coupon_scenario(coupons):
    cart = Cart()
    cart.set_quantity(item("netflix", 30_000), 2)
    cart.select_coupon("HEMAT10")
    summary = compute_summary(cart, coupons)
    assert (summary.subtotal, summary.discount_amount, summary.total) == (60_000, 6_000, 54_000)
    assert summary.discount_code == "HEMAT10"
    assert not summary.coupon_dropped


def test_bundle_amount_is_frozen(coupons):
    cart = Cart()
    cart.replace_with_bundle([item("a", 25_000), item("b", 10_000), item("c", 20_000)], 5_500)
    assert compute_summary(cart, coupons).total == 49_500
    # a price change after assembly does not rescale the bundle discount
    cart.replace_with_bundle([item("a", 50_000), item("b", 10_000), item("c", 20_000)], 5_500)
    assert compute_summary(cart, coupons).discount_amount == 5_500


def test_total_never_negative(coupons):
    cart = Cart()
    cart.add_item(item("cheap", 5_000))
    cart.select_coupon("GRATIS")
    summary = compute_summary(cart, coupons)
    assert summary.discount_amount == 1_000_000
    assert summary.total == 0


def test_idempotent(coupons):
    cart = Cart()
    cart.set_quantity(item("netflix", 30_000), 3)
    cart.select_coupon("HEMAT10")
    engine = PricingEngine(coupons)
    first = engine.compute_summary(cart)
    second = engine.compute_summary(cart)
    assert first == second
    assert cart.selection.code == "HEMAT10"


def test_stale_coupon_is_dropped_not_failed(coupons):
    cart = Cart()
    cart.set_quantity(item("netflix", 30_000), 2)
    cart.set_quantity(item("canva", 20_000), 1)
    cart.set_quantity(item("chatgpt", 40_000), 1)
    cart.select_coupon("BIGSALE")
    assert compute_summary(cart, coupons).discount_amount == 20_000

    cart.remove_item("chatgpt")
    summary = compute_summary(cart, coupons)
    assert summary.subtotal == 80_000
    assert summary.discount_amount == 0
    assert summary.total == 80_000
    assert summary.coupon_dropped
    assert summary.drop_reason.kind is ErrorKind.BELOW_MINIMUM
    assert summary.discount_code is None
    # pricing reports, it does not deactivate
    assert cart.selection.code == "BIGSALE"
