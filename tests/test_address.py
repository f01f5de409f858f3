from __future__ import annotations

import pytest
from kungfu import Some, Nothing

from doorstep import address as A


@pytest.fixture
def resolver() -> A.AddressResolver:
    return A.AddressResolver()


def test_pincode_exact_match(resolver):
    match resolver.by_pincode("431602"):
        case Some(loc):
            assert loc == A.Locality("Nanded", "Maharashtra", "431602")
        case _:
            pytest.fail("expected Nanded")


@pytest.mark.parametrize("code", ["43160", "4316021", "", "43160a", "４３１６０２"])
def test_partial_or_malformed_pincode_matches_nothing(resolver, code):
    assert resolver.by_pincode(code) == Nothing()


def test_pincode_surrounding_whitespace(resolver):
    assert resolver.by_pincode(" 431602 ") != Nothing()


def test_city_fragment_is_case_insensitive_substring(resolver):
    cities = [loc.city for loc in resolver.by_city("NAN")]
    assert "Nanded" in cities
    assert all("nan" in c.lower() for c in cities)


def test_city_blank_fragment(resolver):
    assert resolver.by_city("   ") == ()


def test_city_limit():
    resolver = A.AddressResolver(limit=2)
    assert len(resolver.by_city("a")) == 2
    assert len(resolver.by_city("a", limit=1)) == 1


def test_custom_table():
    resolver = A.AddressResolver([A.Locality("Testpur", "Nowhere", "123456")])
    assert [loc.city for loc in resolver.by_city("test")] == ["Testpur"]
    assert resolver.by_city("nanded") == ()


def test_suggest_routes_by_input(resolver):
    assert [loc.city for loc in resolver.suggest("431602")] == ["Nanded"]
    assert resolver.suggest("4316") == ()
    assert "Pune" in [loc.city for loc in resolver.suggest("pun")]


def test_table_pincodes_are_unique():
    codes = [loc.pincode for loc in A.LOCALITIES]
    assert len(codes) == len(set(codes))
    assert all(A.is_pincode(c) for c in codes)
