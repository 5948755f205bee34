# ABOUTME: CiNii Books holdings gateway: does a given university library own the book?
# ABOUTME: Falls back to following the library OPAC's OpenURL redirect when CiNii has no record.

import logging
from urllib.parse import urlencode

from biblioenrich.config import CINII_OPENSEARCH_ENDPOINT, LibraryTarget
from biblioenrich.core.context import EnrichContext
from biblioenrich.gateways.base import GatewayDescriptor, GatewayShape
from biblioenrich.gateways.http import HttpClient, SourceFetchError
from biblioenrich.gateways.parsers import ResponseParseError, parse_cinii_response
from biblioenrich.gateways.policy import has_bibliographic_match, has_real_value
from biblioenrich.records.isbn import is_isbn, normalize_isbn
from biblioenrich.records.types import BookRecord, LookupStatus, OwnershipStatus

logger = logging.getLogger(__name__)


class CiNiiGateway:
    """Single holdings gateway for one target library.

    ISBN records are searched by ISBN; other records by their title and
    author. A CiNii hit means the library holds the book and links its OPAC
    by NCID. Without a hit, the OPAC's OpenURL resolver is asked directly:
    a redirect to a "bibid" page means the book is held.

    Ownership is written to ``exist_in_<tag>`` and ``<tag>_opac``. CiNii's
    bibliographic fields are only used when no bibliographic source found
    the record.
    """

    def __init__(self, http_client: HttpClient, app_id: str, target: LibraryTarget) -> None:
        self._http = http_client
        self._app_id = app_id
        self._target = target

    @property
    def source(self) -> str:
        return f"CiNii:{self._target.tag}"

    @property
    def descriptor(self) -> GatewayDescriptor:
        return GatewayDescriptor(GatewayShape.SINGLE, self.source)

    @property
    def _exist_field(self) -> str:
        return f"exist_in_{self._target.tag}"

    @property
    def _opac_field(self) -> str:
        return f"{self._target.tag}_opac"

    def _build_query(self, record: BookRecord) -> dict[str, str] | None:
        if is_isbn(record.identifier):
            return {"isbn": normalize_isbn(record.identifier)}
        if has_real_value(record.title):
            query = {"title": record.title}
            if has_real_value(record.author):
                query["author"] = record.author
            return query
        return None

    def _openurl(self, query: dict[str, str]) -> str:
        return f"{self._target.opac}/opac/opac_openurl?{urlencode(query)}"

    async def enrich(self, record: BookRecord, context: EnrichContext) -> BookRecord:
        if not self._app_id or context.cancelled:
            return record
        query = self._build_query(record)
        if query is None:
            logger.debug("%s: nothing to search for %s", self.source, record.url)
            return record

        fallback_url = self._openurl(query)
        params = {
            **query,
            "kid": self._target.cinii_kid,
            "format": "json",
            "appid": self._app_id,
        }
        try:
            response = await self._http.get(CINII_OPENSEARCH_ENDPOINT, params=params)
            hit = parse_cinii_response(response.data)
            if hit is not None:
                opac_url = (
                    f"{self._target.opac}/opac/opac_openurl?ncid={hit.ncid}"
                    if hit.ncid
                    else fallback_url
                )
                changes: dict[str, object] = {
                    self._exist_field: OwnershipStatus.YES,
                    self._opac_field: opac_url,
                }
                if not has_bibliographic_match(record):
                    changes.update(
                        {name: value for name, value in hit.book.as_fields().items() if value}
                    )
                return record.with_status(self.source, LookupStatus.FOUND, **changes)

            if context.cancelled:
                return record
            redirected = await self._http.get(fallback_url, response_type="text")
        except (SourceFetchError, ResponseParseError) as exc:
            logger.warning("%s lookup failed for %s: %s", self.source, record.url, exc)
            return record.with_status(
                self.source, LookupStatus.ERROR, **{self._exist_field: OwnershipStatus.ERROR}
            )

        if "bibid" in redirected.url:
            return record.with_status(
                self.source,
                LookupStatus.FOUND,
                **{self._exist_field: OwnershipStatus.YES, self._opac_field: fallback_url},
            )
        return record.with_status(
            self.source, LookupStatus.NOT_FOUND, **{self._exist_field: OwnershipStatus.NO}
        )
