# ABOUTME: Unit tests for the per-source response parsers.
# ABOUTME: Uses canned fixtures to verify OpenBD, NDL, ISBNdb, Google Books, CiNii, and Kinokuniya parsing.

import pytest

from biblioenrich.gateways.parsers import (
    ResponseParseError,
    parse_cinii_response,
    parse_google_books_response,
    parse_isbndb_response,
    parse_kinokuniya_description,
    parse_ndl_response,
    parse_openbd_response,
)
from tests.fixtures.source_responses import (
    CINII_EMPTY,
    CINII_KOKORO,
    EN_ISBN10,
    GOOGLE_EMPTY,
    GOOGLE_ROSE,
    ISBNDB_NOT_FOUND,
    ISBNDB_ROSE,
    JP_ISBN10,
    KINOKUNIYA_KOKORO_HTML,
    KINOKUNIYA_NO_DESCRIPTION_HTML,
    NDL_EMPTY_XML,
    NDL_KOKORO_XML,
    OPENBD_KOKORO,
    OPENBD_NO_ONIX_TEXT,
)


class TestOpenBD:
    """Tests for OpenBD bulk response parsing."""

    def test_aligned_results(self) -> None:
        """Entries map to requested ISBNs by position; null means not found."""
        results = parse_openbd_response([OPENBD_KOKORO, None], [JP_ISBN10, "9784000000000"])
        assert results["9784000000000"] is None
        book = results[JP_ISBN10]
        assert book is not None
        assert book.title == "こころ (岩波文庫)"
        assert book.author == "夏目漱石／著"
        assert book.publisher == "岩波書店"
        assert book.published_date == "1989-04"

    def test_description_prefers_long_text(self) -> None:
        """The ONIX long description (TextType 03) wins over the short one."""
        book = parse_openbd_response([OPENBD_KOKORO], [JP_ISBN10])[JP_ISBN10]
        assert book is not None
        assert book.description.startswith("親友を裏切って")

    def test_missing_onix_text(self) -> None:
        """Entries without ONIX text have an empty description."""
        book = parse_openbd_response([OPENBD_NO_ONIX_TEXT], [EN_ISBN10])[EN_ISBN10]
        assert book is not None
        assert book.description == ""
        assert book.title == "The Name of the Rose"

    def test_length_mismatch_raises(self) -> None:
        """A response not aligned with the request is a parse error."""
        with pytest.raises(ResponseParseError):
            parse_openbd_response([None], [JP_ISBN10, EN_ISBN10])

    @pytest.mark.parametrize(
        "entry",
        [
            "unexpected",
            {"summary": ["title"]},
            {"summary": {}, "onix": {"CollateralDetail": {"TextContent": {"Text": "x"}}}},
            {"summary": {}, "onix": {"CollateralDetail": {"TextContent": ["x"]}}},
        ],
    )
    def test_unexpected_entry_shape_raises(self, entry: object) -> None:
        """An entry whose parts are not the expected objects or arrays is a parse error."""
        with pytest.raises(ResponseParseError, match="OpenBD|ONIX"):
            parse_openbd_response([entry], [JP_ISBN10])


class TestNDL:
    """Tests for NDL OpenSearch RSS parsing."""

    def test_first_item(self) -> None:
        """The first item supplies title, volume, series, author, and publisher."""
        book = parse_ndl_response(NDL_KOKORO_XML)
        assert book is not None
        assert book.title == "こころ 上 / 岩波文庫"
        assert book.author == "夏目漱石 著"
        assert book.publisher == "岩波書店"
        assert book.published_date.startswith("Sat, 01 Apr 1989")

    def test_no_items(self) -> None:
        """A channel without items means not found."""
        assert parse_ndl_response(NDL_EMPTY_XML) is None

    def test_invalid_xml_raises(self) -> None:
        """Malformed XML is a parse error."""
        with pytest.raises(ResponseParseError, match="NDL"):
            parse_ndl_response(b"<rss><channel>")


class TestISBNdb:
    """Tests for ISBNdb response parsing."""

    def test_book(self) -> None:
        """Authors are joined and the long title is used."""
        book = parse_isbndb_response(ISBNDB_ROSE)
        assert book is not None
        assert book.title == "The Name of the Rose: including the Author's Postscript"
        assert book.author == "Eco, Umberto, Weaver, William"
        assert book.published_date == "1994"

    def test_error_message_means_not_found(self) -> None:
        """An errorMessage body is a not-found answer."""
        assert parse_isbndb_response(ISBNDB_NOT_FOUND) is None

    @pytest.mark.parametrize("book", ["The Name of the Rose", ["unexpected"]])
    def test_non_object_book_raises(self, book: object) -> None:
        """A book field that is not an object is a parse error."""
        with pytest.raises(ResponseParseError, match="ISBNdb"):
            parse_isbndb_response({"book": book})


class TestGoogleBooks:
    """Tests for Google Books response parsing."""

    def test_title_and_subtitle(self) -> None:
        """Title and subtitle are joined with a space."""
        book = parse_google_books_response(GOOGLE_ROSE)
        assert book is not None
        assert book.title == "The Name of the Rose Including the Author's Postscript"
        assert book.author == "Umberto Eco"
        assert book.description.startswith("The year is 1327")

    def test_zero_items(self) -> None:
        """totalItems == 0 means not found."""
        assert parse_google_books_response(GOOGLE_EMPTY) is None

    def test_non_object_raises(self) -> None:
        """A non-object body is a parse error."""
        with pytest.raises(ResponseParseError):
            parse_google_books_response(["unexpected"])

    @pytest.mark.parametrize(
        "data",
        [
            {"totalItems": 1, "items": ["unexpected"]},
            {"totalItems": 1, "items": {"volumeInfo": {}}},
            {"totalItems": 1, "items": [{"volumeInfo": "The Name of the Rose"}]},
        ],
    )
    def test_unexpected_item_shape_raises(self, data: dict) -> None:
        """Items that are not a list of volume objects are a parse error."""
        with pytest.raises(ResponseParseError, match="Google Books"):
            parse_google_books_response(data)


class TestCiNii:
    """Tests for CiNii Books JSON-LD parsing."""

    def test_hit_with_ncid(self) -> None:
        """The NCID is taken from the item's @id URL."""
        hit = parse_cinii_response(CINII_KOKORO)
        assert hit is not None
        assert hit.ncid == "BN03116738"
        assert hit.book.title == "こころ"
        assert hit.book.publisher == "岩波書店"

    def test_empty_graph(self) -> None:
        """A channel with no items means no holdings record."""
        assert parse_cinii_response(CINII_EMPTY) is None

    @pytest.mark.parametrize(
        "data",
        [
            {"@graph": {"items": []}},
            {"@graph": ["channel"]},
            {"@graph": [{"items": "unexpected"}]},
            {"@graph": [{"items": ["unexpected"]}]},
        ],
    )
    def test_unexpected_graph_shape_raises(self, data: dict) -> None:
        """A graph, channel, or item of the wrong JSON type is a parse error."""
        with pytest.raises(ResponseParseError, match="CiNii"):
            parse_cinii_response(data)


class TestKinokuniya:
    """Tests for Kinokuniya product page scraping."""

    def test_joins_sections(self) -> None:
        """Publisher content, summary, and first contents paragraph are joined."""
        description = parse_kinokuniya_description(KINOKUNIYA_KOKORO_HTML)
        assert description == (
            "先生の遺書を通して、明治の精神を描く。\n\n親友を裏切った先生の孤独。\n\n上 先生と私"
        )

    def test_no_sections(self) -> None:
        """Pages without the known sections yield an empty description."""
        assert parse_kinokuniya_description(KINOKUNIYA_NO_DESCRIPTION_HTML) == ""

    def test_blank_page(self) -> None:
        """A blank page yields an empty description."""
        assert parse_kinokuniya_description("   ") == ""
