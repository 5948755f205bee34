# ABOUTME: ISBNdb single-item gateway. Needs an API key; 404 is a valid "not found" answer.
# ABOUTME: Strongest source for non-Japanese books, so it leads the international route.

import logging

from biblioenrich.config import ISBNDB_ENDPOINT
from biblioenrich.core.context import EnrichContext
from biblioenrich.gateways.base import GatewayDescriptor, GatewayShape
from biblioenrich.gateways.http import HttpClient, SourceFetchError, success_or_not_found
from biblioenrich.gateways.parsers import ResponseParseError, parse_isbndb_response
from biblioenrich.gateways.policy import api_error, apply_found, has_bibliographic_match, not_found
from biblioenrich.records.isbn import is_isbn, normalize_isbn
from biblioenrich.records.types import BookRecord

logger = logging.getLogger(__name__)

SOURCE = "ISBNdb"


class ISBNdbGateway:
    def __init__(self, http_client: HttpClient, api_key: str) -> None:
        self._http = http_client
        self._api_key = api_key

    @property
    def descriptor(self) -> GatewayDescriptor:
        return GatewayDescriptor(GatewayShape.SINGLE, SOURCE)

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    async def enrich(self, record: BookRecord, context: EnrichContext) -> BookRecord:
        if not self.configured or context.cancelled:
            return record
        if not is_isbn(record.identifier) or has_bibliographic_match(record):
            return record

        isbn = normalize_isbn(record.identifier)
        try:
            response = await self._http.get(
                f"{ISBNDB_ENDPOINT}/{isbn}",
                headers={"Authorization": self._api_key, "Content-Type": "application/json"},
                accept_status=success_or_not_found,
            )
            book = None if response.status_code == 404 else parse_isbndb_response(response.data)
        except (SourceFetchError, ResponseParseError) as exc:
            logger.warning("ISBNdb lookup failed for %s: %s", isbn, exc)
            return api_error(record, SOURCE)

        if book is None:
            return not_found(record, SOURCE)
        return apply_found(record, SOURCE, book.as_fields())
