"""Cash input helpers for the "amount in ten-thousands" entry convention"""

from decimal import Decimal, localcontext
from typing import Any

from savings_allocator.domain.allocation import normalize_cash


def parse_cash_input(text: Any, unit: int = 10_000) -> Decimal:
    """Convert user-entered text such as "100" (= 1,000,000 with unit 10,000) to cash"""
    if isinstance(text, str):
        text = text.replace(",", "").strip()
    amount = normalize_cash(text)
    with localcontext() as ctx:
        # a product never needs more digits than its two factors together
        ctx.prec = max(ctx.prec, len(amount.as_tuple().digits) + len(str(unit)))
        return amount * unit


def to_input_units(cash_amount: Decimal, unit: int = 10_000) -> Decimal:
    """Inverse of parse_cash_input, for pre-filling the entry field"""
    return normalize_cash(cash_amount) / unit
