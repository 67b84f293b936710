"""
Price parsing and display.

    from pakasir import price as P

    P.parse_price("15k")        # 15000
    P.parse_price("Rp 25.000")  # 25000
    P.format_money(15000)       # "Rp 15.000"
"""

from pakasir.price._parse import parse_price, format_money

__all__ = (
    "parse_price",
    "format_money",
)
