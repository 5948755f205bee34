# ABOUTME: Parsing functions for every source's wire format (OpenBD, NDL, ISBNdb, Google, CiNii, Kinokuniya).
# ABOUTME: Converts source-specific JSON, RSS/XML, and HTML into SourceBook field sets.

import re
from dataclasses import asdict, dataclass
from typing import Any

from lxml import etree, html


class ResponseParseError(ValueError):
    """Raised when a source's response body does not have the expected shape."""


@dataclass(frozen=True)
class SourceBook:
    """Bibliographic fields one source supplied for one book. Empty means "not given"."""

    title: str = ""
    author: str = ""
    publisher: str = ""
    published_date: str = ""
    description: str = ""

    def as_fields(self) -> dict[str, str]:
        return asdict(self)


_NDL_NAMESPACES = {
    "dc": "http://purl.org/dc/elements/1.1/",
    "dcndl": "http://ndl.go.jp/dcndl/terms/",
    "dcterms": "http://purl.org/dc/terms/",
}

_NCID_RE = re.compile(r"https?://ci\.nii\.ac\.jp/ncid/([^/?#]+)")

# ONIX TextType codes, most descriptive first: 03 description, 02 short description, 04 TOC.
_ONIX_TEXT_PRIORITY = ("03", "02", "04")

_KINOKUNIYA_SECTIONS = ("出版社内容情報", "内容説明", "目次")
_KINOKUNIYA_XPATH = '//div[@class="career_box"]/h3[text()="{heading}"]/following-sibling::p[1]'


def _text(value: Any) -> str:
    """Flatten a JSON value that may be a string, a list of strings, or missing."""
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(_text(item) for item in value if _text(item))
    if isinstance(value, dict):
        return _text(value.get("@value"))
    return str(value).strip()


def _join_title(title: str, *parts: str, separator: str = " ") -> str:
    return separator.join(part for part in (title, *parts) if part)


def _object(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ResponseParseError(f"{what} is {type(value).__name__}, expected a JSON object")
    return value


def _array(value: Any, what: str) -> list[Any]:
    if not isinstance(value, list):
        raise ResponseParseError(f"{what} is {type(value).__name__}, expected a JSON array")
    return value


# --- OpenBD -----------------------------------------------------------------


def parse_openbd_response(data: Any, requested: list[str]) -> dict[str, SourceBook | None]:
    """Parse an OpenBD bulk response into per-ISBN results.

    OpenBD answers with a list aligned with the requested ISBNs; ``null``
    entries mean the ISBN is unknown.
    """
    if not isinstance(data, list) or len(data) != len(requested):
        raise ResponseParseError(
            f"OpenBD returned {len(data) if isinstance(data, list) else type(data).__name__} "
            f"entries for {len(requested)} ISBN(s)"
        )
    return {
        isbn: (parse_openbd_entry(entry) if entry else None) for isbn, entry in zip(requested, data)
    }


def parse_openbd_entry(entry: dict[str, Any]) -> SourceBook:
    entry = _object(entry, "OpenBD entry")
    summary = _object(entry.get("summary") or {}, "OpenBD summary")
    title = _join_title(
        _text(summary.get("title")),
        _text(summary.get("volume")),
        f"({_text(summary.get('series'))})" if _text(summary.get("series")) else "",
    )
    return SourceBook(
        title=title,
        author=_text(summary.get("author")),
        publisher=_text(summary.get("publisher")),
        published_date=_text(summary.get("pubdate")),
        description=_parse_onix_description(_object(entry.get("onix") or {}, "OpenBD onix")),
    )


def _parse_onix_description(onix: dict[str, Any]) -> str:
    detail = _object(onix.get("CollateralDetail") or {}, "ONIX CollateralDetail")
    contents = _array(detail.get("TextContent") or [], "ONIX TextContent")
    by_type: dict[str, str] = {}
    for content in contents:
        content = _object(content, "ONIX TextContent entry")
        text = _text(content.get("Text"))
        if text:
            by_type.setdefault(_text(content.get("TextType")), text)
    for text_type in _ONIX_TEXT_PRIORITY:
        if text_type in by_type:
            return by_type[text_type]
    return ""


# --- NDL --------------------------------------------------------------------


def parse_ndl_response(content: bytes) -> SourceBook | None:
    """Parse an NDL OpenSearch RSS document. Returns None when there is no item."""
    try:
        root = etree.fromstring(content)
    except etree.XMLSyntaxError as exc:
        raise ResponseParseError(f"Invalid NDL XML: {exc}") from exc

    item = root.find("./channel/item")
    if item is None:
        return None

    def child(path: str) -> str:
        node = item.find(path, _NDL_NAMESPACES)
        return (node.text or "").strip() if node is not None else ""

    title = child("title")
    volume = child("dcndl:volume")
    series = child("dcndl:seriesTitle")
    full_title = _join_title(title, volume)
    if series:
        full_title = f"{full_title} / {series}" if full_title else series

    return SourceBook(
        title=full_title,
        author=child("author") or child("dc:creator"),
        publisher=child("dc:publisher"),
        published_date=child("pubDate") or child("dcterms:issued"),
    )


# --- ISBNdb -----------------------------------------------------------------


def parse_isbndb_response(data: Any) -> SourceBook | None:
    """Parse an ISBNdb /book response. ``errorMessage`` bodies mean not found."""
    if not isinstance(data, dict) or "errorMessage" in data:
        return None
    book = data.get("book")
    if not book:
        return None
    book = _object(book, "ISBNdb book")
    return SourceBook(
        title=_text(book.get("title_long")) or _text(book.get("title")),
        author=_text(book.get("authors")),
        publisher=_text(book.get("publisher")),
        published_date=_text(book.get("date_published")),
        description=_text(book.get("synopsis")),
    )


# --- Google Books -----------------------------------------------------------


def parse_google_books_response(data: Any) -> SourceBook | None:
    """Parse a Google Books volumes search. The first item wins."""
    if not isinstance(data, dict):
        raise ResponseParseError("Google Books response is not a JSON object")
    items = _array(data.get("items") or [], "Google Books items")
    if not data.get("totalItems") or not items:
        return None
    volume = _object(items[0], "Google Books item")
    info = _object(volume.get("volumeInfo") or {}, "Google Books volumeInfo")
    return SourceBook(
        title=_join_title(_text(info.get("title")), _text(info.get("subtitle"))),
        author=_text(info.get("authors")),
        publisher=_text(info.get("publisher")),
        published_date=_text(info.get("publishedDate")),
        description=_text(info.get("description")),
    )


# --- CiNii Books ------------------------------------------------------------


@dataclass(frozen=True)
class CiNiiHit:
    """First CiNii Books item for a query: its NCID (if any) and bibliographic fields."""

    ncid: str
    book: SourceBook


def parse_cinii_response(data: Any) -> CiNiiHit | None:
    """Parse a CiNii Books OpenSearch JSON-LD response. None when there are no items."""
    if not isinstance(data, dict):
        raise ResponseParseError("CiNii response is not a JSON object")
    graph = _array(data.get("@graph") or [], "CiNii @graph")
    if not graph:
        return None
    channel = _object(graph[0], "CiNii channel")
    items = _array(channel.get("items") or [], "CiNii items")
    if not items:
        return None

    item = _object(items[0], "CiNii item")
    match = _NCID_RE.search(_text(item.get("@id")))
    return CiNiiHit(
        ncid=match.group(1) if match else "",
        book=SourceBook(
            title=_text(item.get("dc:title")),
            author=_text(item.get("dc:creator")),
            publisher=_text(item.get("dc:publisher")),
            published_date=_text(item.get("dc:pubDate")),
        ),
    )


# --- Kinokuniya -------------------------------------------------------------


def parse_kinokuniya_description(page: str) -> str:
    """Join the publisher-content, summary, and contents sections of a product page."""
    if not page or not page.strip():
        return ""
    try:
        document = html.fromstring(page)
    except (etree.ParserError, ValueError) as exc:
        raise ResponseParseError(f"Invalid Kinokuniya HTML: {exc}") from exc

    sections = []
    for heading in _KINOKUNIYA_SECTIONS:
        nodes = document.xpath(_KINOKUNIYA_XPATH.format(heading=heading))
        if nodes:
            text = nodes[0].text_content().strip()
            if text:
                sections.append(text)
    return "\n\n".join(sections)
