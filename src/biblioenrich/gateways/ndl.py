# ABOUTME: National Diet Library (NDL Search) single-item gateway over the OpenSearch RSS API.
# ABOUTME: Queries by ISBN, then falls back to a keyword query on the book's scraped title and author.

import logging

from biblioenrich.config import NDL_OPENSEARCH_ENDPOINT
from biblioenrich.core.context import EnrichContext
from biblioenrich.gateways.base import GatewayDescriptor, GatewayShape
from biblioenrich.gateways.http import HttpClient, SourceFetchError
from biblioenrich.gateways.parsers import ResponseParseError, SourceBook, parse_ndl_response
from biblioenrich.gateways.policy import (
    api_error,
    apply_found,
    has_bibliographic_match,
    has_real_value,
    not_found,
)
from biblioenrich.records.isbn import is_isbn, normalize_isbn
from biblioenrich.records.types import BookRecord

logger = logging.getLogger(__name__)

SOURCE = "NDL"


class NDLGateway:
    """Single bibliographic gateway backed by the NDL Search OpenSearch endpoint.

    When the ISBN query has no result and the book had a real title when it
    was scraped, a second keyword query on "title author" is tried. The
    scraped values come from the context, since an earlier source's miss has
    already replaced them with status strings. That fallback is specific to
    this source.
    """

    def __init__(self, http_client: HttpClient, *, title_fallback: bool = True) -> None:
        self._http = http_client
        self._title_fallback = title_fallback

    @property
    def descriptor(self) -> GatewayDescriptor:
        return GatewayDescriptor(GatewayShape.SINGLE, SOURCE)

    async def enrich(self, record: BookRecord, context: EnrichContext) -> BookRecord:
        if context.cancelled or not is_isbn(record.identifier) or has_bibliographic_match(record):
            return record

        scraped = context.scraped_record(record)
        try:
            book = await self._search({"isbn": normalize_isbn(record.identifier)})
            if book is None and self._title_fallback and has_real_value(scraped.title):
                if context.cancelled:
                    return record
                keywords = " ".join(
                    value for value in (scraped.title, scraped.author) if has_real_value(value)
                )
                logger.debug("NDL: no ISBN hit for %s, searching %r", record.identifier, keywords)
                book = await self._search({"any": keywords})
        except (SourceFetchError, ResponseParseError) as exc:
            logger.warning("NDL lookup failed for %s: %s", record.identifier, exc)
            return api_error(record, SOURCE)

        if book is None:
            return not_found(record, SOURCE)
        return apply_found(record, SOURCE, book.as_fields())

    async def _search(self, params: dict[str, str]) -> SourceBook | None:
        response = await self._http.get(
            NDL_OPENSEARCH_ENDPOINT, params=params, response_type="bytes"
        )
        return parse_ndl_response(response.data)
