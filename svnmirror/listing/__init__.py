"""Listing page parsing."""

from svnmirror.listing.parser import (
    HREF_PATTERN,
    PARENT_ENTRY,
    ListingEntry,
    parse_listing,
)


__all__ = [
    "HREF_PATTERN",
    "PARENT_ENTRY",
    "ListingEntry",
    "parse_listing",
]
