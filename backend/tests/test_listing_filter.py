"""
Tests for the listing search predicate.
"""

from types import SimpleNamespace

import pytest

from pg_finder.schemas.listing import FilterOptions, PriceRange
from pg_finder.services.listing_filter import matches_listing, filter_listings


def make_listing(**overrides):
    fields = {
        "price": 8000,
        "address": "12 MG Road, Bengaluru",
        "gender_preference": "any",
        "amenities": ["WiFi", "Food", "Laundry"],
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


def test_empty_filter_matches():
    assert matches_listing(make_listing(), FilterOptions())


@pytest.mark.parametrize("price", [0, 4999, 10001, 50000])
def test_price_outside_range_never_matches(price):
    listing = make_listing(price=price)
    filters = FilterOptions(
        price_range=PriceRange(min=5000, max=10000),
        location="bengaluru",
        gender_preference="any",
        amenities={"WiFi"},
    )
    assert matches_listing(listing, filters) is False


@pytest.mark.parametrize("price", [5000, 7500, 10000])
def test_price_bounds_are_inclusive(price):
    filters = FilterOptions(price_range=PriceRange(min=5000, max=10000))
    assert matches_listing(make_listing(price=price), filters)


def test_location_is_case_insensitive_substring():
    listing = make_listing(address="12 MG Road, Bengaluru")
    assert matches_listing(listing, FilterOptions(location="mg road"))
    assert matches_listing(listing, FilterOptions(location="BENGALURU"))
    assert not matches_listing(listing, FilterOptions(location="Pune"))


def test_gender_any_listing_matches_female_filter():
    assert matches_listing(make_listing(gender_preference="any"), FilterOptions(gender_preference="female"))


def test_gender_male_listing_does_not_match_female_filter():
    assert not matches_listing(make_listing(gender_preference="male"), FilterOptions(gender_preference="female"))


def test_gender_exact_match():
    assert matches_listing(make_listing(gender_preference="female"), FilterOptions(gender_preference="female"))


def test_any_filter_only_matches_any_listings():
    assert matches_listing(make_listing(gender_preference="any"), FilterOptions(gender_preference="any"))
    assert not matches_listing(make_listing(gender_preference="male"), FilterOptions(gender_preference="any"))


def test_all_requested_amenities_required():
    listing = make_listing(amenities=["WiFi", "Food"])
    assert matches_listing(listing, FilterOptions(amenities={"WiFi"}))
    assert matches_listing(listing, FilterOptions(amenities={"WiFi", "Food"}))
    assert not matches_listing(listing, FilterOptions(amenities={"WiFi", "Gym"}))


def test_amenities_are_case_sensitive():
    listing = make_listing(amenities=["WiFi"])
    assert not matches_listing(listing, FilterOptions(amenities={"wifi"}))


def test_missing_amenities_fail_non_empty_filter():
    listing = make_listing(amenities=None)
    assert matches_listing(listing, FilterOptions())
    assert not matches_listing(listing, FilterOptions(amenities={"AC"}))


def test_filter_listings_preserves_order():
    listings = [
        make_listing(price=3000),
        make_listing(price=9000, gender_preference="male"),
        make_listing(price=6000),
    ]
    filters = FilterOptions(price_range=PriceRange(min=2000, max=12000), gender_preference="female")
    assert [item.price for item in filter_listings(listings, filters)] == [3000, 6000]


def test_inverted_price_range_rejected():
    with pytest.raises(ValueError):
        PriceRange(min=10, max=5)
