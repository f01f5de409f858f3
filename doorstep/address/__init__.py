"""
Address — city / pincode auto-completion from a bundled table.

    from doorstep import address as A

    resolver = A.AddressResolver(limit=8)
    resolver.by_pincode("431602")
"""

from __future__ import annotations

from doorstep.address._types import Locality
from doorstep.address._table import LOCALITIES
from doorstep.address._resolve import AddressResolver, is_pincode, PINCODE_LENGTH

__all__ = (
    "Locality",
    "LOCALITIES",
    "AddressResolver",
    "is_pincode",
    "PINCODE_LENGTH",
)
