"""
Listing search predicate.

Pure functions: no I/O, no mutation. The service layer loads listings and
applies these; they are also usable on any object exposing the listing
attributes (price, address, gender_preference, amenities).
"""

from typing import Any, Iterable

from pg_finder.schemas.listing import FilterOptions


def matches_listing(listing: Any, filters: FilterOptions) -> bool:
    """
    True when the listing satisfies every filter.

    - price within [min, max], inclusive
    - location: case-insensitive substring of the address; empty matches all
    - gender: empty matches all, else equal preference or a listing open to "any"
    - amenities: every requested label present (exact match); empty matches all
    """
    price_range = filters.price_range
    if listing.price < price_range.min or listing.price > price_range.max:
        return False

    if filters.location:
        address = listing.address or ""
        if filters.location.lower() not in address.lower():
            return False

    if filters.gender_preference:
        preference = listing.gender_preference
        if preference != filters.gender_preference and preference != "any":
            return False

    if filters.amenities:
        offered = set(listing.amenities or ())
        if not filters.amenities <= offered:
            return False

    return True


def filter_listings(listings: Iterable[Any], filters: FilterOptions) -> list[Any]:
    """Keep the listings that match, preserving input order."""
    return [listing for listing in listings if matches_listing(listing, filters)]
