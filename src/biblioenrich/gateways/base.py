# ABOUTME: Source gateway protocols for the three capability shapes: bulk, single, collection.
# ABOUTME: The aggregator depends only on these shapes, never on a concrete source.

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

from biblioenrich.core.context import EnrichContext
from biblioenrich.records.types import BookCollection, BookRecord


class GatewayShape(str, Enum):
    BULK = "bulk"
    SINGLE = "single"
    COLLECTION = "collection"


@dataclass(frozen=True)
class GatewayDescriptor:
    """Identifies a gateway for ordering and log messages. Never persisted."""

    shape: GatewayShape
    source: str

    def __str__(self) -> str:
        return f"{self.source} ({self.shape.value})"


@runtime_checkable
class BulkGateway(Protocol):
    """Enriches many records with one (or a few) calls covering the whole collection.

    Records the source has no entry for are tagged NOT_FOUND, never dropped.
    """

    @property
    def descriptor(self) -> GatewayDescriptor: ...

    async def enrich(self, collection: BookCollection, context: EnrichContext) -> BookCollection: ...


@runtime_checkable
class SingleGateway(Protocol):
    """Enriches one record per call.

    Implementations apply their own identifier eligibility check and return
    the input unchanged when a record is not eligible.
    """

    @property
    def descriptor(self) -> GatewayDescriptor: ...

    async def enrich(self, record: BookRecord, context: EnrichContext) -> BookRecord: ...


@runtime_checkable
class CollectionGateway(Protocol):
    """Enriches the merged collection using whole-result-set context (e.g. a local catalog)."""

    @property
    def descriptor(self) -> GatewayDescriptor: ...

    async def enrich(self, collection: BookCollection, context: EnrichContext) -> BookCollection: ...
