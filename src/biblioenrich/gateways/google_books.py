# ABOUTME: Google Books single-item gateway (volumes search by ISBN).
# ABOUTME: Last bibliographic source in the chain; also the usual source of descriptions.

import logging

from biblioenrich.config import GOOGLE_BOOKS_ENDPOINT
from biblioenrich.core.context import EnrichContext
from biblioenrich.gateways.base import GatewayDescriptor, GatewayShape
from biblioenrich.gateways.http import HttpClient, SourceFetchError
from biblioenrich.gateways.parsers import ResponseParseError, parse_google_books_response
from biblioenrich.gateways.policy import api_error, apply_found, has_bibliographic_match, not_found
from biblioenrich.records.isbn import is_isbn, normalize_isbn
from biblioenrich.records.types import BookRecord

logger = logging.getLogger(__name__)

SOURCE = "GoogleBooks"


class GoogleBooksGateway:
    """Single bibliographic gateway backed by the Google Books volumes API.

    The API key is optional; anonymous requests work with a lower quota.
    """

    def __init__(self, http_client: HttpClient, api_key: str = "") -> None:
        self._http = http_client
        self._api_key = api_key

    @property
    def descriptor(self) -> GatewayDescriptor:
        return GatewayDescriptor(GatewayShape.SINGLE, SOURCE)

    async def enrich(self, record: BookRecord, context: EnrichContext) -> BookRecord:
        if context.cancelled or not is_isbn(record.identifier) or has_bibliographic_match(record):
            return record

        isbn = normalize_isbn(record.identifier)
        params = {"q": f"isbn:{isbn}"}
        if self._api_key:
            params["key"] = self._api_key
        try:
            response = await self._http.get(GOOGLE_BOOKS_ENDPOINT, params=params)
            book = parse_google_books_response(response.data)
        except (SourceFetchError, ResponseParseError) as exc:
            logger.warning("Google Books lookup failed for %s: %s", isbn, exc)
            return api_error(record, SOURCE)

        if book is None:
            return not_found(record, SOURCE)
        return apply_found(record, SOURCE, book.as_fields())
