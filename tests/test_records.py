import json

from pakasir import PaymentMethod, records
from pakasir import discount as D
from pakasir.order import BuyerInfo


async def test_order_survives_json(pos):
    await pos.set_quantity("netflix-1m", 2)
    pos.apply_coupon("hemat10")
    order = (await pos.checkout(BuyerInfo("Budi", phone="0812", notes="kirim via WA"), PaymentMethod.QRIS)).unwrap()

    data = json.loads(json.dumps(records.to_record(order)))

    assert data["payment_status"] == "PENDING"
    assert data["payment"]["expires_at"].startswith("2026-03-01T10:05:00")
    assert records.order_from_record(data) == order


async def test_cart_with_bundle(pos):
    await pos.assemble_bundle(["spotify-1m", "youtube-1m"])
    data = json.loads(json.dumps(records.to_record(pos.cart)))

    assert data["selection"] == {"kind": "bundle", "amount": 1_750, "groups": 2}
    restored = records.cart_from_record(data)
    assert restored.lines == pos.cart.lines
    assert restored.selection == pos.cart.selection


def test_coupon_and_selection_records():
    coupon = D.Coupon("HEMAT10", D.DiscountKind.PERCENTAGE, 10, min_purchase=50_000)
    assert records.coupon_from_record(records.to_record(coupon)) == coupon
    assert records.selection_from_record(None) == D.NO_DISCOUNT
    assert records.selection_from_record({"kind": "coupon", "code": "X"}) == D.CouponDiscount("X")
