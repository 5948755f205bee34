# ABOUTME: Kinokuniya collection gateway: scrapes book descriptions from kinokuniya.co.jp product pages.
# ABOUTME: Only fills records that still have no description; never writes status strings into it.

import asyncio
import logging

from biblioenrich.config import DEFAULT_CONCURRENCY, KINOKUNIYA_BASE_URL
from biblioenrich.core.context import EnrichContext
from biblioenrich.core.queue import BoundedTaskQueue
from biblioenrich.gateways.base import GatewayDescriptor, GatewayShape
from biblioenrich.gateways.http import HttpClient, SourceFetchError, success_or_not_found
from biblioenrich.gateways.parsers import ResponseParseError, parse_kinokuniya_description
from biblioenrich.gateways.policy import has_real_value
from biblioenrich.records.isbn import is_isbn, route_region, to_isbn13
from biblioenrich.records.types import BookCollection, BookRecord, LookupStatus

logger = logging.getLogger(__name__)

SOURCE = "Kinokuniya"


def product_page_url(identifier: str) -> str | None:
    """Product page for an ISBN: dsg-01 for Japanese books, dsg-02 for imports."""
    isbn13 = to_isbn13(identifier)
    if isbn13 is None:
        return None
    catalog = "01" if route_region(identifier) == "Japan" else "02"
    return f"{KINOKUNIYA_BASE_URL}/dsg-{catalog}-{isbn13}"


class KinokuniyaGateway:
    def __init__(self, http_client: HttpClient, *, concurrency: int = DEFAULT_CONCURRENCY) -> None:
        self._http = http_client
        self._concurrency = concurrency

    @property
    def descriptor(self) -> GatewayDescriptor:
        return GatewayDescriptor(GatewayShape.COLLECTION, SOURCE)

    async def enrich(self, collection: BookCollection, context: EnrichContext) -> BookCollection:
        eligible = [
            record
            for record in collection.records()
            if is_isbn(record.identifier) and not has_real_value(record.description)
        ]
        if context.cancelled or not eligible:
            return collection

        queue: BoundedTaskQueue[BookRecord] = BoundedTaskQueue(self._concurrency)
        futures = [
            queue.enqueue(lambda record=record: self._describe(record, context))
            for record in eligible
        ]
        outcomes = await asyncio.gather(*futures, return_exceptions=True)
        updated = []
        for record, outcome in zip(eligible, outcomes):
            if isinstance(outcome, BaseException):
                logger.error("Kinokuniya lookup failed for %s: %s", record.identifier, outcome)
                updated.append(record.with_status(SOURCE, LookupStatus.ERROR))
                continue
            updated.append(outcome)
        described = sum(1 for record in updated if record.status_for(SOURCE) == LookupStatus.FOUND)
        logger.info("Kinokuniya: described %d of %d record(s)", described, len(eligible))
        return collection.with_records(updated)

    async def _describe(self, record: BookRecord, context: EnrichContext) -> BookRecord:
        if context.cancelled:
            return record
        url = product_page_url(record.identifier)
        if url is None:
            return record
        try:
            response = await self._http.get(
                url, response_type="text", accept_status=success_or_not_found
            )
            if response.status_code == 404:
                return record.with_status(SOURCE, LookupStatus.NOT_FOUND)
            description = parse_kinokuniya_description(response.data)
        except (SourceFetchError, ResponseParseError) as exc:
            logger.warning("Kinokuniya lookup failed for %s: %s", record.identifier, exc)
            return record.with_status(SOURCE, LookupStatus.ERROR)

        if not description:
            logger.debug("Kinokuniya: no description on %s", url)
            return record.with_status(SOURCE, LookupStatus.NOT_FOUND)
        return record.with_status(SOURCE, LookupStatus.FOUND, description=description)
