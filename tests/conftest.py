from __future__ import annotations

from decimal import Decimal
from typing import Any

import pytest

from doorstep import cart as C
from doorstep.testing import InMemoryBackend


def sub(name: str, price: Any, actual: Any = None, **extra: Any) -> dict[str, Any]:
    row: dict[str, Any] = {"name": name, "price": price, **extra}
    if actual is not None:
        row["actualPrice"] = actual
    return row


def doc(doc_id: str, category: str, *subs: dict[str, Any], **extra: Any) -> dict[str, Any]:
    return {"_id": doc_id, "category": category, "subServices": list(subs), **extra}


def category(cat_id: str, name: str, order: int | None = None, **extra: Any) -> dict[str, Any]:
    row: dict[str, Any] = {"_id": cat_id, "name": name, **extra}
    if order is not None:
        row["order"] = order
    return row


@pytest.fixture
def backend() -> InMemoryBackend:
    return InMemoryBackend(
        categories_rows=[
            category("c-ac", "Air Conditioner", order=1, imageUrl="ac.png"),
            category("c-wm", "Washing Machine", order=2),
        ],
        services_rows=[
            doc(
                "ac1", "Air Conditioner",
                sub("AC Gas Refill", 449, 599, imageUrl="gas.png"),
                sub("AC Servicing", 499),
            ),
            doc("wm1", "Washing Machine", sub("Drum Repair", 699, 899, imageUrl="drum.png")),
            doc("rf1", "Refrigerator", sub("Fridge Gas Charge", 1199), description="Cooling fixes"),
        ],
        profile_row={
            "name": "Asha Patil",
            "phone": "9800000000",
            "address": "12 Station Road",
            "city": "Nanded",
            "state": "Maharashtra",
            "pincode": "431602",
        },
    )


@pytest.fixture
def notices() -> list[C.Notice]:
    return []


@pytest.fixture
def store(backend: InMemoryBackend, notices: list[C.Notice]) -> C.CartStore:
    return C.CartStore(backend, notify=notices.append)


@pytest.fixture
def gas_refill() -> C.CartItem:
    return C.CartItem(
        service_id="ac1",
        sub_service_id="ac1-0",
        name="AC Gas Refill",
        category="Air Conditioner",
        price=Decimal(449),
        actual_price=Decimal(599),
    )


@pytest.fixture
def servicing() -> C.CartItem:
    return C.CartItem(
        service_id="ac1",
        sub_service_id="ac1-1",
        name="AC Servicing",
        category="Air Conditioner",
        price=Decimal(499),
    )
