# ABOUTME: Enrichment aggregator: runs bulk, single-item, and collection gateways in three phases.
# ABOUTME: Folds each phase's gateways over the evolving collection; failures never abort the run.

import asyncio
import logging
from collections.abc import Sequence

from biblioenrich.config import DEFAULT_CONCURRENCY
from biblioenrich.core.context import CancelToken, EnrichContext
from biblioenrich.core.queue import BoundedTaskQueue
from biblioenrich.gateways.base import BulkGateway, CollectionGateway, SingleGateway
from biblioenrich.records.types import BookCollection, BookMode, BookRecord

logger = logging.getLogger(__name__)


class NoopAggregator:
    """Aggregator that returns its input unchanged, for runs that skip enrichment."""

    async def enrich(
        self,
        collection: BookCollection,
        mode: BookMode = "wish",
        cancel_token: CancelToken | None = None,
    ) -> BookCollection:
        return collection


class EnrichmentAggregator:
    """Three-phase enrichment pipeline over a book collection.

    Phase 1 applies each bulk gateway to the whole collection, in registration
    order, each seeing the previous one's output. Phase 2 runs every single
    gateway over each record, sequentially per record, with records processed
    concurrently under a BoundedTaskQueue. Phase 3 applies each collection
    gateway to the merged result, again in order.

    The aggregator never merges fields itself: each gateway returns a complete
    replacement and decides what it may overwrite. The output always has the
    same keys as the input.
    """

    def __init__(
        self,
        *,
        bulk_gateways: Sequence[BulkGateway] = (),
        single_gateways: Sequence[SingleGateway] = (),
        collection_gateways: Sequence[CollectionGateway] = (),
        concurrency: int = DEFAULT_CONCURRENCY,
    ) -> None:
        if not isinstance(concurrency, int) or concurrency < 1:
            raise ValueError(f"concurrency must be an integer >= 1, got {concurrency!r}")
        self._bulk = tuple(bulk_gateways)
        self._single = tuple(single_gateways)
        self._collection = tuple(collection_gateways)
        self._concurrency = concurrency

    @property
    def concurrency(self) -> int:
        return self._concurrency

    async def enrich(
        self,
        collection: BookCollection,
        mode: BookMode = "wish",
        cancel_token: CancelToken | None = None,
    ) -> BookCollection:
        """Run all three phases and return the enriched collection.

        Args:
            collection: The scraped collection. Never modified.
            mode: Which list the collection came from; passed to gateways.
            cancel_token: Optional cooperative cancellation flag. Gateways
                return their input unchanged once it is set.

        Returns:
            A new collection with exactly the input's URLs.
        """
        context = EnrichContext(
            mode=mode, cancel_token=cancel_token or CancelToken(), scraped=collection
        )
        logger.info("Enriching %d %s record(s)", len(collection), mode)

        bulk_result = await self._run_bulk_phase(collection, context)
        merged = await self._run_single_phase(bulk_result, context)
        result = await self._run_collection_phase(merged, context)

        logger.info("Enrichment finished for %d record(s)", len(result))
        return result

    async def _run_bulk_phase(
        self, collection: BookCollection, context: EnrichContext
    ) -> BookCollection:
        logger.info("Phase 1: %d bulk gateway(s)", len(self._bulk))
        for gateway in self._bulk:
            collection = await self._apply_to_collection(gateway, collection, context)
        return collection

    async def _run_single_phase(
        self, collection: BookCollection, context: EnrichContext
    ) -> BookCollection:
        logger.info(
            "Phase 2: %d single gateway(s) over %d record(s), concurrency %d",
            len(self._single),
            len(collection),
            self._concurrency,
        )
        if not self._single or len(collection) == 0:
            return collection

        queue: BoundedTaskQueue[BookRecord] = BoundedTaskQueue(self._concurrency)
        records = collection.records()
        futures = [queue.enqueue(self._make_record_task(record, context)) for record in records]
        outcomes = await asyncio.gather(*futures, return_exceptions=True)

        enriched: list[BookRecord] = []
        failures = 0
        for record, outcome in zip(records, outcomes):
            if isinstance(outcome, BaseException):
                failures += 1
                logger.error("Single-item enrichment failed for %s: %s", record.url, outcome)
                continue
            if not isinstance(outcome, BookRecord):
                failures += 1
                logger.error(
                    "Single-item enrichment returned %s for %s; keeping the original",
                    type(outcome).__name__,
                    record.url,
                )
                continue
            if outcome.url != record.url:
                failures += 1
                logger.error(
                    "Single-item enrichment returned %s for %s; keeping the original",
                    outcome.url,
                    record.url,
                )
                continue
            enriched.append(outcome)

        if failures:
            logger.warning("Phase 2: %d record(s) kept their pre-phase values", failures)
        return collection.with_records(enriched)

    def _make_record_task(self, record: BookRecord, context: EnrichContext):
        async def run() -> BookRecord:
            current = record
            for gateway in self._single:
                current = await gateway.enrich(current, context)
            return current

        return run

    async def _run_collection_phase(
        self, collection: BookCollection, context: EnrichContext
    ) -> BookCollection:
        logger.info("Phase 3: %d collection gateway(s)", len(self._collection))
        for gateway in self._collection:
            collection = await self._apply_to_collection(gateway, collection, context)
        return collection

    @staticmethod
    async def _apply_to_collection(
        gateway: BulkGateway | CollectionGateway,
        collection: BookCollection,
        context: EnrichContext,
    ) -> BookCollection:
        """Apply one whole-collection gateway, keeping its input if it misbehaves."""
        try:
            result = await gateway.enrich(collection, context)
        except Exception:
            logger.exception("Gateway %s failed; continuing with its input", gateway.descriptor)
            return collection

        if set(result) != set(collection):
            logger.error(
                "Gateway %s changed the collection's keys; continuing with its input",
                gateway.descriptor,
            )
            return collection
        return result
