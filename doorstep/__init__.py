"""
doorstep — storefront core for a doorstep appliance-repair service.

    from doorstep import catalog as Cat   # Categories, slugs, aggregation
    from doorstep import cart as C        # Server-mirrored cart
    from doorstep import checkout as Co   # Cart to enquiry
    from doorstep import pricing as P     # Totals and savings
    from doorstep import address as A     # City / pincode completion
"""

from doorstep import pricing
from doorstep import address
from doorstep import saga
from doorstep import lift
from doorstep import api
from doorstep import catalog
from doorstep import cart
from doorstep import checkout
from doorstep import search
from doorstep._types import (
    Json,
    to_money,
)

__version__ = "0.1.0"

__all__ = (
    "pricing",
    "address",
    "saga",
    "lift",
    "api",
    "catalog",
    "cart",
    "checkout",
    "search",
    "Json",
    "to_money",
)
