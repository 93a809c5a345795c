"""Parser for Subversion-style HTML directory listings.

Only the exact markup emitted by the web front-end is recognised::

    <ul>
      <li><a href="../">..</a></li>
      <li><a href="file.txt">file.txt</a></li>
      <li><a href="subdir/">subdir/</a></li>
    </ul>

This is a textual scan, not an HTML parse. Anything not written as
``<li><a href="...">`` is ignored.
"""

import re

from pydantic import BaseModel, ConfigDict, Field


HREF_PATTERN = re.compile(r'<li><a href="([^"]*)">')

PARENT_ENTRY = "../"


class ListingEntry(BaseModel):
    """One child of a listed directory."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(description="Raw href value, trailing '/' for directories")
    is_directory: bool = Field(description="Whether the href ends with '/'")

    @classmethod
    def from_href(cls, href: str) -> "ListingEntry":
        """Build an entry from a raw href value."""
        return cls(name=href, is_directory=href.endswith("/"))


def parse_listing(html: str) -> list[ListingEntry]:
    """Extract child entries from a listing page.

    Args:
        html: Listing page text.

    Returns:
        Entries in document order, without the parent ``../`` link.
        Empty when nothing matches.
    """
    return [
        ListingEntry.from_href(href)
        for href in HREF_PATTERN.findall(html)
        if href != PARENT_ENTRY
    ]
