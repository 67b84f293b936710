"""
Point of sale: cart, coupon, bundle, cash checkout.
"""

from kungfu import Ok, Error

from pakasir import PaymentMethod
from pakasir.order import BuyerInfo
from examples._infra import banner, run, demo_pos, show_summary, show_error


async def main() -> None:
    pos = demo_pos()

    banner("Cart + coupon")
    await pos.set_quantity("netflix-1m", 2)
    show_summary(pos)
    match pos.apply_coupon("hemat10"):
        case Ok(m):
            print(f"  ✓ HEMAT10 applied, total {m.summary.total}")
        case Error(e):
            show_error(e)

    banner("Coupon below minimum")
    match pos.apply_coupon("FUTOPREMIUM"):
        case Ok(_):
            print("  ✓ applied")
        case Error(e):
            show_error(e)

    banner("Bundle replaces the coupon")
    match await pos.assemble_bundle(["spotify-1m", "youtube-1m", "canva-1m"]):
        case Ok(m):
            print(f"  ✓ {m.summary.selection.groups} groups, discount {m.summary.discount_amount}")
        case Error(e):
            show_error(e)
    show_summary(pos)

    banner("Cash checkout")
    match await pos.checkout(BuyerInfo("Budi", phone="081234567890"), PaymentMethod.CASH):
        case Ok(order):
            print(f"  ✓ {order.id} {order.payment_status.value} total {order.total}")
        case Error(e):
            show_error(e)

    banner("Last Canva unit is gone")
    match await pos.add_to_cart("canva-1m"):
        case Ok(_):
            print("  ✓ added")
        case Error(e):
            show_error(e)

    await pos.close()


if __name__ == "__main__":
    run(main)
