"""
Checkout — cart plus contact data submitted as one enquiry.

    from doorstep import checkout as Co

    pipeline = Co.CheckoutPipeline(store, client, resolver, notify=toasts.append)
    form = Co.CheckoutForm(full_name="Asha", mobile="9800000000", address="12 MG Road")
    form = pipeline.complete_pincode(dataclasses.replace(form, pincode="431602"))
    match await pipeline.submit(form):
        case Ok(confirmation): ...
"""

from __future__ import annotations

from doorstep.checkout._types import (
    BookedFor,
    CheckoutForm,
    Enquiry,
    ServiceEnquiry,
    Confirmation,
    CheckoutErrorKind,
    CheckoutError,
)
from doorstep.checkout._validate import (
    REQUIRED_FIELDS,
    SERVICE_ENQUIRY_FIELDS,
    FIELD_LABELS,
    missing_fields,
    can_submit,
    describe_missing,
)
from doorstep.checkout._pipeline import CheckoutPipeline, SUBMIT_FAILED

__all__ = (
    # Types
    "BookedFor",
    "CheckoutForm",
    "Enquiry",
    "ServiceEnquiry",
    "Confirmation",
    "CheckoutErrorKind",
    "CheckoutError",
    # Validation
    "REQUIRED_FIELDS",
    "SERVICE_ENQUIRY_FIELDS",
    "FIELD_LABELS",
    "missing_fields",
    "can_submit",
    "describe_missing",
    # Pipeline
    "CheckoutPipeline",
    "SUBMIT_FAILED",
)
