"""
QRIS: pending payment, confirm, and timer-driven expiry.
"""

import asyncio

from kungfu import Ok, Error

from pakasir import PaymentMethod, Settings
from pakasir.order import BuyerInfo
from examples._infra import banner, run, demo_pos, show_error


async def main() -> None:
    # short window so the expiry path is visible
    pos = demo_pos(settings=Settings().with_payment_ttl(seconds=0.3).with_tick_interval(0.05))
    buyer = BuyerInfo("Sari", phone="085700002222")

    banner("QRIS confirmed in time")
    await pos.add_to_cart("chatgpt-1m")
    order = (await pos.checkout(buyer, PaymentMethod.QRIS)).unwrap()
    print(f"  QR: {order.payment.qr_payload[:40]}...")
    match await pos.confirm_payment(order.id):
        case Ok(paid):
            print(f"  ✓ {paid.id} {paid.payment_status.value}")
        case Error(e):
            show_error(e)

    banner("QRIS left to expire")
    await pos.add_to_cart("netflix-1m")
    order = (await pos.checkout(buyer, PaymentMethod.QRIS)).unwrap()
    await asyncio.sleep(0.5)
    print(f"  status: {(await pos.get_order(order.id)).unwrap().payment_status.value}")
    match await pos.confirm_payment(order.id):
        case Ok(_):
            print("  ✓ paid")
        case Error(e):
            show_error(e)

    await pos.close()


if __name__ == "__main__":
    run(main)
