"""Cart arithmetic.

All amounts are integer cents. Tax is rounded half-up to the cent so that
the server, the pages and the API client agree on every total.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Tuple

SHIPPING_FLAT_CENTS = 1500
TAX_RATE = Decimal("0.08")


def unit_price_cents(price_cents: int, sale_price_cents: Optional[int] = None) -> int:
    """Sale price wins over list price when present."""
    return price_cents if sale_price_cents is None else sale_price_cents


def discount_percent(price_cents: int, sale_price_cents: Optional[int] = None) -> int:
    if sale_price_cents is None or price_cents <= 0:
        return 0
    pct = Decimal(price_cents - sale_price_cents) * 100 / Decimal(price_cents)
    return int(pct.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def shipping_cents(subtotal_cents: int) -> int:
    return SHIPPING_FLAT_CENTS if subtotal_cents > 0 else 0


def tax_cents(subtotal_cents: int) -> int:
    return int((Decimal(subtotal_cents) * TAX_RATE).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_money(cents: int) -> str:
    return f"{Decimal(cents) / 100:.2f}"


@dataclass(frozen=True)
class CartSummary:
    item_count: int
    subtotal_cents: int
    shipping_cents: int
    tax_cents: int
    total_cents: int

    def to_dict(self) -> dict:
        return {
            "item_count": self.item_count,
            "subtotal_cents": self.subtotal_cents,
            "shipping_cents": self.shipping_cents,
            "tax_cents": self.tax_cents,
            "total_cents": self.total_cents,
            "subtotal": format_money(self.subtotal_cents),
            "shipping": format_money(self.shipping_cents),
            "tax": format_money(self.tax_cents),
            "total": format_money(self.total_cents),
        }


def summarize(lines: Iterable[Tuple[int, int]]) -> CartSummary:
    """Totals for (unit_price_cents, quantity) pairs."""
    item_count = 0
    subtotal = 0
    for unit, qty in lines:
        item_count += qty
        subtotal += unit * qty

    shipping = shipping_cents(subtotal)
    tax = tax_cents(subtotal)
    return CartSummary(
        item_count=item_count,
        subtotal_cents=subtotal,
        shipping_cents=shipping,
        tax_cents=tax,
        total_cents=subtotal + shipping + tax,
    )
