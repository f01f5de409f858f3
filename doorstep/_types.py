"""
Core types for doorstep.

Re-exports from kungfu + the JSON alias and money parsing.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

# Re-export from kungfu
from kungfu import Result, Ok, Error, Option, Some, Nothing, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Wire Shapes
# ═══════════════════════════════════════════════════════════════════════════════

type Json = dict[str, Any]
"""A decoded JSON object as it arrives from the backend."""

# ═══════════════════════════════════════════════════════════════════════════════
# Money
# ═══════════════════════════════════════════════════════════════════════════════


def to_money(raw: object) -> Decimal | None:
    """
    Parse a backend price into Decimal.

    Accepts ints, floats and numeric strings. Returns None for anything
    missing or unparsable; bools are rejected even though they are ints.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, Decimal):
        return raw
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "Option",
    "Some",
    "Nothing",
    "LazyCoroResult",
    # Wire shapes
    "Json",
    # Money
    "to_money",
)
