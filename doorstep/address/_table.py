"""
Bundled city / state / pincode reference table.
"""

from __future__ import annotations

from doorstep.address._types import Locality

_ROWS: tuple[tuple[str, str, str], ...] = (
    # Maharashtra
    ("Nanded", "Maharashtra", "431602"),
    ("Mumbai", "Maharashtra", "400001"),
    ("Pune", "Maharashtra", "411001"),
    ("Nagpur", "Maharashtra", "440001"),
    ("Nashik", "Maharashtra", "422001"),
    ("Aurangabad", "Maharashtra", "431001"),
    ("Latur", "Maharashtra", "413512"),
    ("Parbhani", "Maharashtra", "431401"),
    ("Hingoli", "Maharashtra", "431513"),
    ("Solapur", "Maharashtra", "413001"),
    ("Kolhapur", "Maharashtra", "416001"),
    ("Amravati", "Maharashtra", "444601"),
    ("Akola", "Maharashtra", "444001"),
    ("Jalna", "Maharashtra", "431203"),
    ("Beed", "Maharashtra", "431122"),
    ("Thane", "Maharashtra", "400601"),
    # Telangana / Andhra Pradesh
    ("Hyderabad", "Telangana", "500001"),
    ("Nizamabad", "Telangana", "503001"),
    ("Adilabad", "Telangana", "504001"),
    ("Vijayawada", "Andhra Pradesh", "520001"),
    ("Visakhapatnam", "Andhra Pradesh", "530001"),
    # Karnataka
    ("Bengaluru", "Karnataka", "560001"),
    ("Bidar", "Karnataka", "585401"),
    ("Mysuru", "Karnataka", "570001"),
    # Others
    ("New Delhi", "Delhi", "110001"),
    ("Chennai", "Tamil Nadu", "600001"),
    ("Kolkata", "West Bengal", "700001"),
    ("Ahmedabad", "Gujarat", "380001"),
    ("Surat", "Gujarat", "395003"),
    ("Jaipur", "Rajasthan", "302001"),
    ("Lucknow", "Uttar Pradesh", "226001"),
    ("Kanpur", "Uttar Pradesh", "208001"),
    ("Indore", "Madhya Pradesh", "452001"),
    ("Bhopal", "Madhya Pradesh", "462001"),
    ("Patna", "Bihar", "800001"),
    ("Chandigarh", "Chandigarh", "160017"),
    ("Kochi", "Kerala", "682001"),
    ("Bhubaneswar", "Odisha", "751001"),
    ("Guwahati", "Assam", "781001"),
    ("Panaji", "Goa", "403001"),
)

LOCALITIES: tuple[Locality, ...] = tuple(
    Locality(city=city, state=state, pincode=pincode) for city, state, pincode in _ROWS
)

__all__ = ("LOCALITIES",)
