"""
Cart — client-side mirror of the server cart.

    from doorstep import cart as C

    store = C.CartStore(client, notify=toasts.append)
    await store.identify(user_id)
    match await store.add(C.CartItem.from_catalog(category, item)):
        case Ok(items): ...
        case Error(e) if e.kind is C.CartErrorKind.DUPLICATE: ...
"""

from __future__ import annotations

from doorstep.cart._types import (
    CartItem,
    CartPhase,
    CartErrorKind,
    CartError,
    NoticeLevel,
    Notice,
)
from doorstep.cart._store import CartStore, NoticeSink

__all__ = (
    "CartItem",
    "CartPhase",
    "CartErrorKind",
    "CartError",
    "NoticeLevel",
    "Notice",
    "CartStore",
    "NoticeSink",
)
