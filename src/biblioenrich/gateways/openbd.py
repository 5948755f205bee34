# ABOUTME: OpenBD bulk gateway: looks up every ISBN record in a few comma-joined requests.
# ABOUTME: Unknown ISBNs are tagged not found; a failed request marks only its own chunk as errored.

import logging

from biblioenrich.config import OPENBD_CHUNK_SIZE, OPENBD_ENDPOINT
from biblioenrich.core.context import EnrichContext
from biblioenrich.gateways.base import GatewayDescriptor, GatewayShape
from biblioenrich.gateways.http import HttpClient, SourceFetchError
from biblioenrich.gateways.parsers import ResponseParseError, parse_openbd_response
from biblioenrich.gateways.policy import api_error, apply_found, has_bibliographic_match, not_found
from biblioenrich.records.isbn import is_isbn, normalize_isbn
from biblioenrich.records.types import BookCollection, BookRecord

logger = logging.getLogger(__name__)

SOURCE = "OpenBD"


class OpenBDGateway:
    """Bulk bibliographic gateway backed by api.openbd.jp.

    Records without an ISBN are left untouched. Records sharing an ISBN are
    looked up once and all receive the same answer.
    """

    def __init__(self, http_client: HttpClient, *, chunk_size: int = OPENBD_CHUNK_SIZE) -> None:
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
        self._http = http_client
        self._chunk_size = chunk_size

    @property
    def descriptor(self) -> GatewayDescriptor:
        return GatewayDescriptor(GatewayShape.BULK, SOURCE)

    async def enrich(self, collection: BookCollection, context: EnrichContext) -> BookCollection:
        by_isbn: dict[str, list[BookRecord]] = {}
        for record in collection.records():
            if is_isbn(record.identifier) and not has_bibliographic_match(record):
                by_isbn.setdefault(normalize_isbn(record.identifier), []).append(record)

        if not by_isbn:
            logger.debug("OpenBD: no eligible ISBN records")
            return collection

        isbns = list(by_isbn)
        updated: list[BookRecord] = []
        found = 0
        for start in range(0, len(isbns), self._chunk_size):
            if context.cancelled:
                logger.info("OpenBD: cancelled before chunk starting at %d", start)
                break
            chunk = isbns[start : start + self._chunk_size]
            try:
                response = await self._http.get(OPENBD_ENDPOINT, params={"isbn": ",".join(chunk)})
                results = parse_openbd_response(response.data, chunk)
            except (SourceFetchError, ResponseParseError) as exc:
                logger.warning("OpenBD request for %d ISBN(s) failed: %s", len(chunk), exc)
                updated.extend(api_error(record, SOURCE) for isbn in chunk for record in by_isbn[isbn])
                continue

            for isbn in chunk:
                book = results[isbn]
                if book is not None:
                    found += 1
                for record in by_isbn[isbn]:
                    if book is None:
                        updated.append(not_found(record, SOURCE))
                    else:
                        updated.append(apply_found(record, SOURCE, book.as_fields()))

        logger.info("OpenBD: found %d of %d ISBN(s)", found, len(isbns))
        return collection.with_records(updated)
