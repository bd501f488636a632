"""Cart totals: subtotal, tax and grand total from line items alone."""
from decimal import Decimal
from typing import Iterable, Optional

from storefront import config
from storefront.services.money import ZERO, add, multiply, round_money, to_decimal
from .models import CartTotals, LineItem


def calculate_totals(items: Iterable[LineItem], tax_rate: Optional[Decimal] = None) -> CartTotals:
    """
    Compute cart totals.

    Subtotal is rounded before tax is taken so that ``total == subtotal + tax``
    holds to the cent. All rounding is half up.

    Args:
        items: Line items in any order
        tax_rate: Fraction (0.05 == 5%); defaults to ``config.TAX_RATE``

    Returns:
        CartTotals, all zero for an empty cart
    """
    rate = config.TAX_RATE if tax_rate is None else to_decimal(tax_rate)

    raw_subtotal = ZERO
    item_count = 0
    for item in items:
        raw_subtotal = add(raw_subtotal, multiply(item.unit_price, item.quantity))
        item_count += item.quantity

    subtotal = round_money(raw_subtotal)
    tax = round_money(multiply(subtotal, rate))
    total = round_money(add(subtotal, tax))

    return CartTotals(subtotal=subtotal, tax=tax, total=total, item_count=item_count)
