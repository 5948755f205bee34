# ABOUTME: Region-routed composite gateway: orders a domestic and an international source per record.
# ABOUTME: Japanese ISBNs try the domestic source first; everything else tries the international one first.

from biblioenrich.core.context import EnrichContext
from biblioenrich.gateways.base import GatewayDescriptor, GatewayShape, SingleGateway
from biblioenrich.records.isbn import route_region
from biblioenrich.records.types import BookRecord


class RegionRoutedGateway:
    """Runs two single gateways in an order chosen by the record's region.

    Both gateways still see the record; the second one normally skips it
    when the first already found it.
    """

    def __init__(self, domestic: SingleGateway, international: SingleGateway) -> None:
        self._domestic = domestic
        self._international = international

    @property
    def descriptor(self) -> GatewayDescriptor:
        sources = f"{self._domestic.descriptor.source},{self._international.descriptor.source}"
        return GatewayDescriptor(GatewayShape.SINGLE, f"Region({sources})")

    def order_for(self, record: BookRecord) -> tuple[SingleGateway, SingleGateway]:
        if route_region(record.identifier) == "Japan":
            return self._domestic, self._international
        return self._international, self._domestic

    async def enrich(self, record: BookRecord, context: EnrichContext) -> BookRecord:
        for gateway in self.order_for(record):
            record = await gateway.enrich(record, context)
        return record
