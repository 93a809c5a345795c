"""Unit tests for the listing parser."""

from svnmirror.listing.parser import ListingEntry, parse_listing


class TestParseListing:
    """Tests for parse_listing."""

    def test_reference_listing(self) -> None:
        """Test that ../ is skipped and order is preserved."""
        html = (
            '<ul><li><a href="../">../</a></li>'
            '<li><a href="a.txt">a.txt</a></li>'
            '<li><a href="sub/">sub/</a></li></ul>'
        )

        assert parse_listing(html) == [
            ListingEntry(name="a.txt", is_directory=False),
            ListingEntry(name="sub/", is_directory=True),
        ]

    def test_mod_dav_svn_page(self) -> None:
        """Test a full page as served by Apache mod_dav_svn."""
        html = """<html><head><title>repo - Revision 1234: /trunk</title></head>
<body>
 <h2>repo - Revision 1234: /trunk</h2>
 <ul>
  <li><a href="../">..</a></li>
  <li><a href="README.md">README.md</a></li>
  <li><a href="docs/">docs/</a></li>
  <li><a href="my%20notes.txt">my notes.txt</a></li>
 </ul>
 <hr noshade><em>Powered by <a href="http://subversion.apache.org/">Apache Subversion</a> version 1.14.2.</em>
</body></html>"""

        entries = parse_listing(html)

        assert [e.name for e in entries] == ["README.md", "docs/", "my%20notes.txt"]
        assert [e.is_directory for e in entries] == [False, True, False]

    def test_empty_listing(self) -> None:
        """Test that a listing without entries yields nothing."""
        html = '<ul><li><a href="../">..</a></li></ul>'

        assert parse_listing(html) == []

    def test_no_matches(self) -> None:
        """Test that unrelated HTML yields nothing rather than failing."""
        assert parse_listing("<html><body>Not a listing</body></html>") == []
        assert parse_listing("") == []

    def test_only_exact_markup_matches(self) -> None:
        """Test that the scan is tied to the exact <li><a href="..."> form."""
        html = (
            '<a href="bare.txt">bare</a>'
            '<li> <a href="spaced.txt">spaced</a></li>'
            "<li><a href='single.txt'>single</a></li>"
            '<LI><A HREF="upper.txt">upper</A></LI>'
            '<li><a href="ok.txt">ok</a></li>'
        )

        assert parse_listing(html) == [ListingEntry(name="ok.txt", is_directory=False)]

    def test_empty_href_is_returned(self) -> None:
        """Test that an empty href is emitted; rejecting it is the caller's job."""
        assert parse_listing('<li><a href="">x</a></li>') == [
            ListingEntry(name="", is_directory=False)
        ]

    def test_from_href(self) -> None:
        """Test that a trailing slash marks a directory."""
        assert ListingEntry.from_href("lib/").is_directory is True
        assert ListingEntry.from_href("lib").is_directory is False
