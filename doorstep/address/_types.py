"""
Address types.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Locality:
    """One row of the reference table; selected as a unit."""

    city: str
    state: str
    pincode: str


__all__ = ("Locality",)
