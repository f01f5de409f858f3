"""
Lift — helpers for lifting values and calls into LazyCoroResult.

Re-exports from combinators.lift.

    from doorstep import lift as L

    L.pure(line)                                   # always Ok
    L.fail(error)                                  # always Error
    L.catching_async(call, on_error=to_api_error)  # exceptions become Error
"""

from __future__ import annotations

from combinators.lift import (
    pure,
    fail,
    catching_async,
)

__all__ = (
    "pure",
    "fail",
    "catching_async",
)
