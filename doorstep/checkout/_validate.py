"""
Submission gating.
"""

from __future__ import annotations

from collections.abc import Sequence

from doorstep.cart import CartItem
from doorstep.checkout._types import CheckoutForm

REQUIRED_FIELDS: tuple[str, ...] = ("full_name", "mobile", "address", "city", "pincode")
"""Fields that must be non-blank before a cart can be submitted."""

SERVICE_ENQUIRY_FIELDS: tuple[str, ...] = ("full_name", "mobile", "address")

FIELD_LABELS: dict[str, str] = {
    "full_name": "Full name",
    "mobile": "Mobile",
    "address": "Address",
    "city": "City",
    "pincode": "Pincode",
}


def missing_fields(
    form: CheckoutForm,
    required: Sequence[str] = REQUIRED_FIELDS,
) -> tuple[str, ...]:
    """Required field names that are blank, in form order."""
    return tuple(name for name in required if not getattr(form, name).strip())


def can_submit(items: Sequence[CartItem], form: CheckoutForm) -> bool:
    return bool(items) and not missing_fields(form)


def describe_missing(fields: Sequence[str]) -> str:
    labels = ", ".join(FIELD_LABELS.get(f, f) for f in fields)
    return f"Please fill in: {labels}"


__all__ = (
    "REQUIRED_FIELDS",
    "SERVICE_ENQUIRY_FIELDS",
    "FIELD_LABELS",
    "missing_fields",
    "can_submit",
    "describe_missing",
)
