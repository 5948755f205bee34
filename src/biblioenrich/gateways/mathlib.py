# ABOUTME: Sophia University mathematics library collection gateway, backed by its PDF holdings lists.
# ABOUTME: The ISBN catalog is built lazily, once, and shared by every caller that awaits it.

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable

import fitz

from biblioenrich.config import MATHLIB_BOOKLIST_PDFS, MATHLIB_OPAC_SEARCH
from biblioenrich.core.context import EnrichContext
from biblioenrich.gateways.base import GatewayDescriptor, GatewayShape
from biblioenrich.gateways.http import HttpClient, SourceFetchError
from biblioenrich.records.isbn import find_isbns, is_isbn, normalize_isbn, to_isbn13
from biblioenrich.records.types import BookCollection, BookRecord, LookupStatus, OwnershipStatus

logger = logging.getLogger(__name__)

SOURCE = "SophiaMathLib"

CatalogBuilder = Callable[[], Awaitable[frozenset[str]]]


class CatalogBuildError(Exception):
    """Raised when the math-library holdings catalog cannot be built."""


class LazyCatalog:
    """Memoized asynchronous build of an ISBN set.

    The first ``get()`` starts the build; concurrent callers await the same
    in-flight future. The outcome, success or failure, is kept for the
    lifetime of the object, so a failed build is never retried.
    """

    def __init__(self, builder: CatalogBuilder) -> None:
        self._builder = builder
        self._build: asyncio.Future[frozenset[str]] | None = None

    @property
    def started(self) -> bool:
        return self._build is not None

    async def get(self) -> frozenset[str]:
        if self._build is None:
            self._build = asyncio.ensure_future(self._builder())
        # Shielded so one cancelled caller does not cancel the shared build.
        return await asyncio.shield(self._build)


def extract_pdf_text(content: bytes) -> str:
    """Extract the text of every page of an in-memory PDF."""
    with fitz.open(stream=content, filetype="pdf") as document:
        return "\n".join(page.get_text() for page in document)


async def fetch_catalog_isbns(http_client: HttpClient, urls: Iterable[str]) -> frozenset[str]:
    """Download each holdings PDF and collect every ISBN printed in it.

    Raises:
        CatalogBuildError: If any list cannot be downloaded or read.
    """
    isbns: set[str] = set()
    for url in urls:
        try:
            response = await http_client.get(url, response_type="bytes")
            text = await asyncio.to_thread(extract_pdf_text, response.data)
        except SourceFetchError as exc:
            raise CatalogBuildError(f"Could not download {url}: {exc}") from exc
        except (RuntimeError, ValueError) as exc:
            raise CatalogBuildError(f"Could not read PDF {url}: {exc}") from exc
        found = find_isbns(text)
        logger.info("Math library list %s: %d ISBN(s)", url, len(found))
        isbns |= found
    return frozenset(isbns)


def mathlib_opac_url(isbn13: str) -> str:
    return f"{MATHLIB_OPAC_SEARCH}?isbn={isbn13}&mtl1=1&mtl2=1&mtl3=1&mtl4=1&mtl5=1"


def default_catalog_urls() -> tuple[str, ...]:
    return tuple(url for urls in MATHLIB_BOOKLIST_PDFS.values() for url in urls)


class MathLibCatalogGateway:
    """Collection gateway marking books held by the Sophia mathematics library.

    A record whose ISBN-10 or ISBN-13 appears in the catalog gets
    ``exist_in_sophia = YES`` and a link to the math-library OPAC search.
    Records not in the catalog keep their ownership as-is. If the catalog
    cannot be built, the gateway leaves collections unchanged.
    """

    def __init__(
        self,
        http_client: HttpClient,
        *,
        catalog: LazyCatalog | None = None,
        urls: Iterable[str] | None = None,
    ) -> None:
        if catalog is None:
            pdf_urls = tuple(urls) if urls is not None else default_catalog_urls()
            catalog = LazyCatalog(lambda: fetch_catalog_isbns(http_client, pdf_urls))
        self._catalog = catalog

    @property
    def descriptor(self) -> GatewayDescriptor:
        return GatewayDescriptor(GatewayShape.COLLECTION, SOURCE)

    async def enrich(self, collection: BookCollection, context: EnrichContext) -> BookCollection:
        eligible = [record for record in collection.records() if is_isbn(record.identifier)]
        if context.cancelled or not eligible:
            return collection

        try:
            catalog = await self._catalog.get()
        except CatalogBuildError as exc:
            logger.warning("Math library catalog unavailable, skipping: %s", exc)
            return collection

        updated = [self._check(record, catalog) for record in eligible]
        held = sum(1 for record in updated if record.status_for(SOURCE) == LookupStatus.FOUND)
        logger.info("Math library: %d of %d ISBN record(s) held", held, len(eligible))
        return collection.with_records(updated)

    @staticmethod
    def _check(record: BookRecord, catalog: frozenset[str]) -> BookRecord:
        isbn = normalize_isbn(record.identifier)
        isbn13 = to_isbn13(record.identifier) or isbn
        if isbn in catalog or isbn13 in catalog:
            return record.with_status(
                SOURCE,
                LookupStatus.FOUND,
                exist_in_sophia=OwnershipStatus.YES,
                sophia_mathlib_opac=mathlib_opac_url(isbn13),
            )
        return record.with_status(SOURCE, LookupStatus.NOT_FOUND)
