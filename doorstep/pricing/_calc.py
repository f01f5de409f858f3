"""
Pricing — line totals, aggregate totals and savings.

Pure functions over anything shaped like a priced, quantified line.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

ZERO = Decimal(0)

# ═══════════════════════════════════════════════════════════════════════════════
# Priced Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class Priced(Protocol):
    """A line with a selling price, an optional reference price and a quantity."""

    @property
    def price(self) -> Decimal: ...

    @property
    def actual_price(self) -> Decimal | None: ...

    @property
    def quantity(self) -> int: ...


# ═══════════════════════════════════════════════════════════════════════════════
# Per-line
# ═══════════════════════════════════════════════════════════════════════════════


def reference_price(item: Priced) -> Decimal:
    """actual_price when it is a real discount reference, else price."""
    actual = item.actual_price
    if actual is None or actual < item.price:
        return item.price
    return actual


def line_total(item: Priced) -> Decimal:
    return item.price * item.quantity


def line_reference_total(item: Priced) -> Decimal:
    return reference_price(item) * item.quantity


# ═══════════════════════════════════════════════════════════════════════════════
# Aggregates
# ═══════════════════════════════════════════════════════════════════════════════


def total(items: Iterable[Priced]) -> Decimal:
    return sum((line_total(i) for i in items), ZERO)


def reference_total(items: Iterable[Priced]) -> Decimal:
    return sum((line_reference_total(i) for i in items), ZERO)


def savings(items: Iterable[Priced]) -> Decimal:
    """reference_total - total; per line never below zero."""
    lines = tuple(items)
    return reference_total(lines) - total(lines)


@dataclass(frozen=True, slots=True)
class Totals:
    """Everything the cart and checkout views display."""

    total: Decimal
    reference_total: Decimal
    savings: Decimal
    count: int


def summarize(items: Iterable[Priced]) -> Totals:
    lines = tuple(items)
    grand = total(lines)
    reference = reference_total(lines)
    return Totals(
        total=grand,
        reference_total=reference,
        savings=reference - grand,
        count=sum(i.quantity for i in lines),
    )


__all__ = (
    "Priced",
    "reference_price",
    "line_total",
    "line_reference_total",
    "total",
    "reference_total",
    "savings",
    "Totals",
    "summarize",
)
