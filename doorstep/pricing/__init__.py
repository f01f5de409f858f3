"""
Pricing — totals and savings for cart lines.

    from doorstep import pricing as P

    totals = P.summarize(cart.items)
"""

from __future__ import annotations

from doorstep.pricing._calc import (
    Priced,
    Totals,
    reference_price,
    line_total,
    line_reference_total,
    total,
    reference_total,
    savings,
    summarize,
)

__all__ = (
    "Priced",
    "Totals",
    "reference_price",
    "line_total",
    "line_reference_total",
    "total",
    "reference_total",
    "savings",
    "summarize",
)
