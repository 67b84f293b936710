"""
Price parser: free-text catalog price tokens to Money.
"""

from __future__ import annotations

import re

from pakasir._types import Money

_NON_DIGITS = re.compile(r"\D+")


def parse_price(token: str | int | None, marker: str = "k") -> Money:
    """
    Normalize a human-entered price into minor units.

    All non-digit characters are stripped; if the token contains the
    thousands marker (case-insensitive) the result is multiplied by 1000.
    Empty or digit-less input yields 0 instead of failing: catalog prices
    are free text and must never break pricing.

    Example:
        parse_price("15k")       # 15000
        parse_price("15K")       # 15000
        parse_price("Rp 7.500")  # 7500
        parse_price("gratis")    # 0
    """
    if token is None:
        return 0
    if isinstance(token, int):
        return max(0, token)

    digits = _NON_DIGITS.sub("", token)
    if not digits:
        return 0

    try:
        amount = int(digits)
    except ValueError:
        # longer than the interpreter's int conversion limit
        return 0
    if marker and marker.lower() in token.lower():
        amount *= 1000
    return amount


def format_money(amount: Money) -> str:
    """Rupiah display with dot thousands separators: 15000 → 'Rp 15.000'."""
    sign = "-" if amount < 0 else ""
    return f"{sign}Rp {abs(amount):,}".replace(",", ".")


__all__ = (
    "parse_price",
    "format_money",
)
