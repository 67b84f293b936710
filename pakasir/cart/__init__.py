"""
Cart: session-owned lines and discount selection.

    from pakasir import cart as CA

    cart = CA.Cart()
    match cart.add_item(ref):
        case Ok(notices): ...
        case Error(e): ...   # OUT_OF_STOCK
"""

from pakasir.cart._cart import CartLine, Cart

__all__ = (
    "CartLine",
    "Cart",
)
