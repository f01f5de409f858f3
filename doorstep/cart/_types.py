"""
Cart types — lines, lifecycle phases, errors and notices.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, auto

from doorstep._types import Json, to_money
from doorstep.catalog import Category, CatalogItem

logger = logging.getLogger(__name__)

ZERO = Decimal(0)

# ═══════════════════════════════════════════════════════════════════════════════
# Cart Line
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CartItem:
    """
    One cart line. Identity for deduplication is sub_service_id.

    Frozen, so a tuple of these is already a price-frozen snapshot.
    """

    service_id: str
    sub_service_id: str
    name: str
    category: str
    price: Decimal
    actual_price: Decimal | None = None
    image_url: str = ""
    quantity: int = 1

    @classmethod
    def from_catalog(cls, category: Category, item: CatalogItem, quantity: int = 1) -> CartItem:
        return cls(
            service_id=item.service_id,
            sub_service_id=item.id,
            name=item.name,
            category=category.title,
            price=item.price,
            actual_price=item.actual_price,
            image_url=item.image_url,
            quantity=max(1, quantity),
        )

    @classmethod
    def from_payload(cls, raw: Json) -> CartItem | None:
        """
        Parse one server cart line.

        Lines without an id are dropped; a missing price degrades to zero and
        is logged, so the cart still renders.
        """
        sub_id = raw.get("subServiceId")
        if not isinstance(sub_id, str) or not sub_id:
            logger.warning("Dropping cart line without subServiceId: %r", raw.get("name"))
            return None

        price = to_money(raw.get("price"))
        if price is None:
            logger.warning("Cart line %s has no price", sub_id)
            price = ZERO
        actual = to_money(raw.get("actualPrice"))
        if actual is not None and actual < price:
            actual = None

        quantity = raw.get("quantity")
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            quantity = 1

        service_id = raw.get("serviceId")
        return cls(
            service_id=service_id if isinstance(service_id, str) else sub_id.rsplit("-", 1)[0],
            sub_service_id=sub_id,
            name=str(raw.get("name") or ""),
            category=str(raw.get("category") or ""),
            price=price,
            actual_price=actual,
            image_url=str(raw.get("imageUrl") or ""),
            quantity=quantity,
        )

    def to_payload(self) -> Json:
        payload: Json = {
            "serviceId": self.service_id,
            "subServiceId": self.sub_service_id,
            "name": self.name,
            "category": self.category,
            "price": _json_number(self.price),
            "quantity": self.quantity,
        }
        if self.actual_price is not None:
            payload["actualPrice"] = _json_number(self.actual_price)
        if self.image_url:
            payload["imageUrl"] = self.image_url
        return payload


def _json_number(value: Decimal) -> int | float:
    return int(value) if value == value.to_integral_value() else float(value)


# ═══════════════════════════════════════════════════════════════════════════════
# Lifecycle
# ═══════════════════════════════════════════════════════════════════════════════


class CartPhase(Enum):
    UNINITIALIZED = auto()
    LOADING = auto()
    READY = auto()


# ═══════════════════════════════════════════════════════════════════════════════
# Errors & Notices
# ═══════════════════════════════════════════════════════════════════════════════


class CartErrorKind(Enum):
    UNAUTHENTICATED = auto()
    DUPLICATE = auto()
    INVALID_QUANTITY = auto()
    NOT_IN_CART = auto()
    BUSY = auto()
    SERVER = auto()


@dataclass(frozen=True, slots=True)
class CartError:
    kind: CartErrorKind
    message: str


class NoticeLevel(Enum):
    SUCCESS = auto()
    INFO = auto()
    ERROR = auto()


@dataclass(frozen=True, slots=True)
class Notice:
    """Non-blocking, user-visible message (a toast)."""

    level: NoticeLevel
    message: str


__all__ = (
    "CartItem",
    "CartPhase",
    "CartErrorKind",
    "CartError",
    "NoticeLevel",
    "Notice",
)
