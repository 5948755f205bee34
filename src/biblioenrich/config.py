# ABOUTME: Configuration constants and API credentials for biblioenrich.
# ABOUTME: Endpoints, library targets, catalog sources, and concurrency defaults live here.

from dataclasses import dataclass

DEFAULT_CONCURRENCY = 5

USER_AGENT = "biblioenrich/0.1.0"
HTTP_TIMEOUT = 30.0

OPENBD_ENDPOINT = "https://api.openbd.jp/v1/get"
OPENBD_CHUNK_SIZE = 100
NDL_OPENSEARCH_ENDPOINT = "https://ndlsearch.ndl.go.jp/api/opensearch"
ISBNDB_ENDPOINT = "https://api2.isbndb.com/book"
GOOGLE_BOOKS_ENDPOINT = "https://www.googleapis.com/books/v1/volumes"
CINII_OPENSEARCH_ENDPOINT = "https://ci.nii.ac.jp/books/opensearch/search"
KINOKUNIYA_BASE_URL = "https://www.kinokuniya.co.jp/f"

MATHLIB_OPAC_SEARCH = "https://mathlib-sophia.opac.jp/opac/Advanced_search/search"
MATHLIB_BOOKLIST_PDFS: dict[str, tuple[str, ...]] = {
    "ja": (
        "https://mathlib-sophia.opac.jp/opac/file/view/1965-2023_j.pdf",
        "https://mathlib-sophia.opac.jp/opac/file/view/202404-202503.pdf",
    ),
    "en": ("https://mathlib-sophia.opac.jp/opac/file/view/1965-2023_F_1.pdf",),
}


@dataclass(frozen=True)
class LibraryTarget:
    """A university library whose holdings are checked through CiNii and its OPAC."""

    tag: str
    cinii_kid: str
    opac: str


CINII_TARGETS: dict[str, LibraryTarget] = {
    "sophia": LibraryTarget(tag="sophia", cinii_kid="KI00209X", opac="https://www.lib.sophia.ac.jp"),
    "utokyo": LibraryTarget(
        tag="utokyo", cinii_kid="KI000221", opac="https://opac.dl.itc.u-tokyo.ac.jp"
    ),
}

ENV_CINII_APP_ID = "CINII_API_APPID"
ENV_GOOGLE_BOOKS_API_KEY = "GOOGLE_BOOKS_API_KEY"
ENV_ISBNDB_API_KEY = "ISBNDB_API_KEY"


@dataclass(frozen=True)
class ApiCredentials:
    """Keys for the sources that need one. Empty strings mean "not configured"."""

    cinii_app_id: str = ""
    google_books_api_key: str = ""
    isbndb_api_key: str = ""
