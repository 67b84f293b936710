"""End-to-end flows through the PointOfSale facade."""

import asyncio

from pakasir import ErrorKind, NoticeKind, PaymentMethod, PaymentStatus, PointOfSale
from pakasir import discount as D
from pakasir import ledger as LG
from pakasir.order import BuyerInfo

from conftest import SlowLedger

BUDI = BuyerInfo("Budi", phone="081234567890")


async def test_coupon_on_single_line(pos):
    await pos.set_quantity("netflix-1m", 2)
    mutation = pos.apply_coupon("HEMAT10").unwrap()
    assert (mutation.summary.subtotal, mutation.summary.discount_amount, mutation.summary.total) == (60_000, 6_000, 54_000)


async def test_coupon_below_minimum_leaves_no_discount(pos):
    await pos.add_to_cart("vidio-1m")
    err = pos.apply_coupon("FUTOPREMIUM").unwrap_err()
    assert err.kind is ErrorKind.BELOW_MINIMUM
    assert pos.cart.selection == D.NO_DISCOUNT
    assert pos.compute_summary().total == 15_000


async def test_bundle_then_manual_add(pos):
    mutation = (await pos.assemble_bundle(["spotify-1m", "youtube-1m", "canva-1m"])).unwrap()
    assert (mutation.summary.subtotal, mutation.summary.discount_amount, mutation.summary.total) == (55_000, 5_500, 49_500)
    assert pos.cart.selection == D.BundleDiscount(5_500, groups=3)

    after = (await pos.add_to_cart("netflix-1m")).unwrap()
    assert after.has(NoticeKind.BUNDLE_CLEARED)
    assert pos.cart.selection == D.NO_DISCOUNT
    assert after.summary.discount_amount == 0
    assert after.summary.total == 85_000


async def test_add_at_stock_limit_keeps_bundle(pos):
    bundled = (await pos.assemble_bundle(["canva-1m", "netflix-1m"])).unwrap()
    after = (await pos.add_to_cart("canva-1m")).unwrap()
    assert after.has(NoticeKind.QUANTITY_CLAMPED)
    assert not after.has(NoticeKind.BUNDLE_CLEARED)
    assert pos.cart.quantity_of("canva-1m") == 1
    assert pos.cart.selection == D.BundleDiscount(bundled.summary.discount_amount, groups=2)
    assert after.summary == bundled.summary


async def test_automatic_bundle_uses_cheapest_per_group(pos):
    mutation = (await pos.assemble_bundle()).unwrap()
    ids = {line.item_id for line in pos.cart.lines}
    assert "canva-1m" in ids and "canva-1y" not in ids
    assert "disney-1m" not in ids and "hidden-1m" not in ids
    # netflix, spotify, youtube, canva, chatgpt, vidio
    assert mutation.summary.selection.groups == 6
    assert mutation.summary.discount_amount == mutation.summary.subtotal * 15 // 100


async def test_bundle_needs_two_groups(pos):
    err = (await pos.assemble_bundle(["canva-1m", "canva-1y"])).unwrap_err()
    assert err.kind is ErrorKind.INSUFFICIENT_BUNDLE_MEMBERS
    assert pos.cart.is_empty


async def test_coupon_replaces_bundle(pos):
    await pos.assemble_bundle(["netflix-1m", "chatgpt-1m", "spotify-1m"])
    mutation = pos.apply_coupon("HEMAT10").unwrap()
    assert pos.cart.selection == D.CouponDiscount("HEMAT10")
    assert mutation.summary.discount_amount == 9_500


async def test_bundle_replaces_coupon(pos):
    await pos.set_quantity("netflix-1m", 2)
    pos.apply_coupon("HEMAT10")
    await pos.assemble_bundle(["netflix-1m", "spotify-1m"])
    assert isinstance(pos.cart.selection, D.BundleDiscount)


async def test_stale_coupon_is_deactivated_with_notice(pos):
    await pos.set_quantity("netflix-1m", 2)
    await pos.add_to_cart("canva-1m")
    await pos.add_to_cart("chatgpt-1m")
    assert pos.apply_coupon("BIGSALE").unwrap().summary.discount_amount == 20_000

    mutation = pos.remove_from_cart("chatgpt-1m").unwrap()

    assert mutation.summary.subtotal == 80_000
    assert mutation.summary.discount_amount == 0
    assert mutation.summary.coupon_dropped
    assert mutation.has(NoticeKind.COUPON_DROPPED)
    assert pos.cart.selection == D.NO_DISCOUNT


async def test_add_out_of_stock_and_clamp(pos):
    assert (await pos.add_to_cart("disney-1m")).unwrap_err().kind is ErrorKind.OUT_OF_STOCK
    await pos.add_to_cart("canva-1m")
    assert (await pos.add_to_cart("canva-1m")).unwrap().has(NoticeKind.QUANTITY_CLAMPED)
    assert (await pos.set_quantity("youtube-1m", 7)).unwrap().has(NoticeKind.QUANTITY_CLAMPED)
    assert pos.cart.quantity_of("youtube-1m") == 3
    assert (await pos.add_to_cart("nope")).unwrap_err().kind is ErrorKind.NOT_FOUND


async def test_remove_coupon(pos):
    await pos.set_quantity("netflix-1m", 2)
    pos.apply_coupon("HEMAT10")
    assert pos.remove_coupon().summary.discount_amount == 0
    assert pos.cart.selection == D.NO_DISCOUNT


async def test_qris_expiry_then_confirm(pos, ledger, clock):
    await pos.set_quantity("netflix-1m", 2)
    await pos.add_to_cart("chatgpt-1m")
    order = (await pos.checkout(BUDI, PaymentMethod.QRIS)).unwrap()
    assert order.total == 100_000
    assert pos.cart.is_empty
    assert pos.lifecycle.watcher.is_watching(order.id)

    clock.advance(300)
    for _ in range(100):
        await asyncio.sleep(0.01)
        if not pos.lifecycle.watcher.is_watching(order.id):
            break

    assert (await pos.get_order(order.id)).unwrap().payment_status is PaymentStatus.EXPIRED
    assert (await pos.confirm_payment(order.id)).unwrap_err().kind is ErrorKind.INVALID_TRANSITION
    assert (await ledger.available("netflix-1m")).unwrap() == 10
    assert (await ledger.available("chatgpt-1m")).unwrap() == 5


async def test_qris_confirm(pos, ledger):
    await pos.add_to_cart("spotify-1m")
    order = (await pos.checkout(BUDI, PaymentMethod.QRIS)).unwrap()
    paid = (await pos.confirm_payment(order.id)).unwrap()
    assert paid.payment_status is PaymentStatus.PAID
    assert (await ledger.available("spotify-1m")).unwrap() == 4
    assert (await pos.cancel_payment(order.id)).unwrap_err().kind is ErrorKind.INVALID_TRANSITION


async def test_two_terminals_race_for_last_unit(catalog, ledger, coupons, orders, settings):
    first = PointOfSale(catalog, ledger, coupons, orders=orders, settings=settings)
    second = PointOfSale(catalog, ledger, coupons, orders=orders, settings=settings)
    await first.add_to_cart("canva-1m")
    await second.add_to_cart("canva-1m")

    results = await asyncio.gather(
        first.checkout(BUDI, PaymentMethod.CASH),
        second.checkout(BuyerInfo("Sari"), PaymentMethod.TRANSFER),
    )

    assert sorted(bool(r) for r in results) == [False, True]
    loser_cart = first.cart if not results[0] else second.cart
    assert [l.item_id for l in loser_cart.lines] == ["canva-1m"]
    assert next(r for r in results if not r).unwrap_err().kind is ErrorKind.STOCK_CONFLICT
    assert (await ledger.available("canva-1m")).unwrap() == 0
    assert len(await orders.list_orders()) == 1
    await first.close()
    await second.close()


async def test_two_terminals_confirm_one_order_once(catalog, ledger, coupons, orders, settings):
    slow = SlowLedger(ledger)
    first = PointOfSale(catalog, slow, coupons, orders=orders, settings=settings)
    second = PointOfSale(catalog, slow, coupons, orders=orders, settings=settings)
    await first.set_quantity("netflix-1m", 2)
    order = (await first.checkout(BUDI, PaymentMethod.QRIS)).unwrap()

    results = await asyncio.gather(first.confirm_payment(order.id), second.confirm_payment(order.id))

    assert sorted(bool(r) for r in results) == [False, True]
    assert next(r for r in results if not r).unwrap_err().kind is ErrorKind.INVALID_TRANSITION
    assert (await ledger.available("netflix-1m")).unwrap() == 8
    assert (await orders.get(order.id)).unwrap().payment_status is PaymentStatus.PAID
    assert not first.lifecycle.watcher.is_watching(order.id)
    await first.close()
    await second.close()


async def test_two_terminals_confirm_over_sql_ledger(tmp_path, catalog, coupons, orders, settings):
    session_factory, engine = await LG.create_ledger_database(f"sqlite+aiosqlite:///{tmp_path / 'pos.db'}")
    ledger = LG.SQLAlchemyLedger(session_factory, clock=settings.clock)
    await ledger.seed({"netflix-1m": 10})
    first = PointOfSale(catalog, ledger, coupons, orders=orders, settings=settings)
    second = PointOfSale(catalog, ledger, coupons, orders=orders, settings=settings)
    await first.set_quantity("netflix-1m", 2)
    order = (await first.checkout(BUDI, PaymentMethod.QRIS)).unwrap()

    results = await asyncio.gather(first.confirm_payment(order.id), second.confirm_payment(order.id))

    assert sorted(bool(r) for r in results) == [False, True]
    assert (await ledger.available("netflix-1m")).unwrap() == 8
    await first.close()
    await second.close()
    await engine.dispose()

async def test_reset(pos):
    await pos.add_to_cart("netflix-1m")
    pos.reset()
    assert pos.cart.is_empty
    assert (await pos.checkout(BUDI, PaymentMethod.CASH)).unwrap_err().kind is ErrorKind.EMPTY_CART
