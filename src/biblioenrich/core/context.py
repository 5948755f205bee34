# ABOUTME: Per-run context threaded through every gateway call: book mode, cancellation, scraped input.
# ABOUTME: Cancellation is cooperative; gateways check it before starting network work.

from collections.abc import Mapping
from dataclasses import dataclass, field

from biblioenrich.records.types import BookMode, BookRecord


class CancelToken:
    """A one-way cancellation flag shared between a caller and a running pipeline."""

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


@dataclass(frozen=True)
class EnrichContext:
    """What a gateway knows about the run it is part of.

    ``scraped`` holds the records as they entered the pipeline, keyed by URL,
    so a gateway can still read a scraped title after an earlier source has
    overwritten it with a status string.
    """

    mode: BookMode = "wish"
    cancel_token: CancelToken = field(default_factory=CancelToken)
    scraped: Mapping[str, BookRecord] = field(default_factory=dict)

    @property
    def cancelled(self) -> bool:
        return self.cancel_token.cancelled

    def scraped_record(self, record: BookRecord) -> BookRecord:
        """The pre-enrichment version of ``record``, or ``record`` itself if unknown."""
        return self.scraped.get(record.url, record)
