"""
Checkout types — the form, the enquiry snapshot, the confirmation.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum, auto

from doorstep import pricing as P
from doorstep._types import Json
from doorstep.address import Locality
from doorstep.cart import CartItem
from doorstep.catalog import Category, CatalogItem

# ═══════════════════════════════════════════════════════════════════════════════
# Form
# ═══════════════════════════════════════════════════════════════════════════════


class BookedFor(Enum):
    MYSELF = "myself"
    OTHERS = "others"


# profile key -> form field
_PROFILE_FIELDS = (
    ("name", "full_name"),
    ("phone", "mobile"),
    ("address", "address"),
    ("city", "city"),
    ("state", "state"),
    ("pincode", "pincode"),
)


@dataclass(frozen=True, slots=True)
class CheckoutForm:
    """
    Contact and address data collected at checkout.

    Frozen: every edit produces a new form, so a locality selection can only
    ever land as a whole (city, state and pincode together).
    """

    full_name: str = ""
    mobile: str = ""
    address: str = ""
    landmark: str = ""
    city: str = ""
    state: str = ""
    pincode: str = ""
    brand: str = ""
    message: str = ""
    booked_for: BookedFor = BookedFor.MYSELF

    def with_locality(self, locality: Locality) -> CheckoutForm:
        return dataclasses.replace(
            self,
            city=locality.city,
            state=locality.state,
            pincode=locality.pincode,
        )

    def prefilled(self, profile: Json) -> CheckoutForm:
        """Fill blank fields from the customer profile; typed values win."""
        changes: dict[str, str] = {}
        for key, field in _PROFILE_FIELDS:
            value = profile.get(key)
            if value is None or getattr(self, field).strip():
                continue
            value = str(value).strip()
            if value:
                changes[field] = value
        return dataclasses.replace(self, **changes) if changes else self


# ═══════════════════════════════════════════════════════════════════════════════
# Enquiries
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Enquiry:
    """A cart submitted as one enquiry. Prices are frozen in the item snapshot."""

    items: tuple[CartItem, ...]
    message: str
    address: str
    landmark: str
    city: str
    state: str
    pincode: str
    booked_for: BookedFor
    brand: str

    @classmethod
    def snapshot(cls, items: tuple[CartItem, ...], form: CheckoutForm) -> Enquiry:
        return cls(
            items=tuple(items),
            message=form.message.strip(),
            address=form.address.strip(),
            landmark=form.landmark.strip(),
            city=form.city.strip(),
            state=form.state.strip(),
            pincode=form.pincode.strip(),
            booked_for=form.booked_for,
            brand=form.brand.strip(),
        )

    @property
    def totals(self) -> P.Totals:
        return P.summarize(self.items)

    def to_payload(self) -> Json:
        return {
            "items": [item.to_payload() for item in self.items],
            "message": self.message,
            "address": self.address,
            "landmark": self.landmark,
            "city": self.city,
            "state": self.state,
            "pincode": self.pincode,
            "bookedFor": self.booked_for.value,
            "brand": self.brand,
        }


@dataclass(frozen=True, slots=True)
class ServiceEnquiry:
    """An enquiry about one catalog item, sent without going through the cart."""

    service_type: str
    appliance_type: str
    message: str
    address: str
    city: str
    brand: str

    @classmethod
    def for_item(cls, category: Category, item: CatalogItem, form: CheckoutForm) -> ServiceEnquiry:
        lines = (
            f"Location: {form.address.strip()}",
            f"Brand: {form.brand.strip()}",
            f"Issue: {form.message.strip()}",
            f"Contact: {form.full_name.strip()} ({form.mobile.strip()})",
        )
        return cls(
            service_type=item.name or "Service",
            appliance_type=category.title or "Appliance",
            message="\n".join(lines),
            address=form.address.strip(),
            city=form.city.strip(),
            brand=form.brand.strip(),
        )

    def to_payload(self) -> Json:
        return {
            "serviceType": self.service_type,
            "applianceType": self.appliance_type,
            "message": self.message,
            "address": self.address,
            "city": self.city,
            "brand": self.brand,
        }


@dataclass(frozen=True, slots=True)
class Confirmation:
    """
    What the confirmation view shows.

    cart_cleared is False when the enquiry went through but the follow-up
    cart deletion did not; the enquiry itself is never in doubt.
    """

    enquiry_id: str | None
    items: tuple[CartItem, ...]
    totals: P.Totals
    cart_cleared: bool


# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════


class CheckoutErrorKind(Enum):
    EMPTY_CART = auto()
    MISSING_FIELDS = auto()
    UNAUTHENTICATED = auto()
    BUSY = auto()
    SERVER = auto()


@dataclass(frozen=True, slots=True)
class CheckoutError:
    kind: CheckoutErrorKind
    message: str
    fields: tuple[str, ...] = ()


__all__ = (
    "BookedFor",
    "CheckoutForm",
    "Enquiry",
    "ServiceEnquiry",
    "Confirmation",
    "CheckoutErrorKind",
    "CheckoutError",
)
