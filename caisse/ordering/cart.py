# caisse/ordering/cart.py
from __future__ import annotations

from typing import Iterable, List, Tuple

from ..schemas import OrderItemOut


def line_total(unit_price: int, quantity: int) -> int:
    return unit_price * quantity


def order_total(lines: Iterable[OrderItemOut]) -> int:
    return sum(line.total for line in lines)


def format_price(cents: int, currency_symbol: str = "€") -> str:
    """150 -> '1,50 €'"""
    sign = "-" if cents < 0 else ""
    euros, rest = divmod(abs(cents), 100)
    return f"{sign}{euros},{rest:02d} {currency_symbol}"


def build_summary(items: List[OrderItemOut], currency_symbol: str = "€") -> Tuple[str, int]:
    if not items:
        return ("Empty order.", 0)

    lines: List[str] = []
    for i, line in enumerate(items, start=1):
        lines.append(
            f"{i}. x{line.quantity} {line.product_name} = {format_price(line.total, currency_symbol)}"
        )

    total = order_total(items)
    return (
        "Order summary:\n" + "\n".join(lines) + f"\n\nTotal: {format_price(total, currency_symbol)}",
        total,
    )
