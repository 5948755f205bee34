# ABOUTME: Core record data structures: BookRecord, BookCollection, and lookup/ownership status.
# ABOUTME: Records are immutable; every enrichment step returns a replacement record or collection.

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Literal

BookMode = Literal["wish", "stacked"]
BOOK_MODES: tuple[BookMode, ...] = ("wish", "stacked")

BIBLIOGRAPHIC_FIELDS: tuple[str, ...] = ("title", "author", "publisher", "published_date")


class LookupStatus(str, Enum):
    """Outcome of consulting one source for one record."""

    NOT_ATTEMPTED = "not_attempted"
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


class OwnershipStatus(str, Enum):
    """Whether a library holds a book. UNKNOWN until a holdings source answers."""

    UNKNOWN = "Unknown"
    YES = "Yes"
    NO = "No"
    ERROR = "Error"


class DuplicateRecordError(ValueError):
    """Raised when a collection would contain two records with the same URL."""


@dataclass(frozen=True)
class BookRecord:
    """One book in a collection, keyed by the URL it was scraped from.

    Every field except ``url`` is replaceable. ``lookup_status`` maps a source
    name to the outcome of consulting it; absent sources are NOT_ATTEMPTED.
    """

    url: str
    identifier: str = ""
    title: str = ""
    author: str = ""
    publisher: str = ""
    published_date: str = ""
    exist_in_sophia: OwnershipStatus = OwnershipStatus.UNKNOWN
    exist_in_utokyo: OwnershipStatus = OwnershipStatus.UNKNOWN
    sophia_opac: str = ""
    utokyo_opac: str = ""
    sophia_mathlib_opac: str = ""
    description: str = ""
    lookup_status: Mapping[str, LookupStatus] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.url:
            raise ValueError("BookRecord.url must be a non-empty string")
        # Freeze the status map so a shared record cannot be edited in place.
        object.__setattr__(self, "lookup_status", MappingProxyType(dict(self.lookup_status)))

    def __hash__(self) -> int:
        return hash(self.url)

    def status_for(self, source: str) -> LookupStatus:
        """Lookup status for a source, NOT_ATTEMPTED when it was never consulted."""
        return self.lookup_status.get(source, LookupStatus.NOT_ATTEMPTED)

    def with_fields(self, **changes: Any) -> "BookRecord":
        """Return a copy with the given fields replaced. The URL cannot change."""
        if "url" in changes and changes["url"] != self.url:
            raise ValueError("BookRecord.url is immutable")
        return replace(self, **changes)

    def with_status(self, source: str, status: LookupStatus, **changes: Any) -> "BookRecord":
        """Return a copy tagged with a lookup status for ``source``, plus field changes."""
        statuses = {**self.lookup_status, source: status}
        return self.with_fields(lookup_status=statuses, **changes)


class BookCollection(Mapping[str, BookRecord]):
    """Immutable mapping from record URL to BookRecord.

    Pipeline stages never edit a collection; ``with_record`` and
    ``with_records`` build a new one with the given records upserted.
    """

    def __init__(self, records: Iterable[BookRecord] | Mapping[str, BookRecord] = ()) -> None:
        entries: dict[str, BookRecord] = {}
        if isinstance(records, Mapping):
            for key, record in records.items():
                if key != record.url:
                    raise ValueError(f"Collection key {key!r} does not match record URL {record.url!r}")
                entries[key] = record
        else:
            for record in records:
                if record.url in entries:
                    raise DuplicateRecordError(f"Duplicate record URL: {record.url}")
                entries[record.url] = record
        self._records = entries

    def __getitem__(self, url: str) -> BookRecord:
        return self._records[url]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"BookCollection({len(self)} records)"

    def records(self) -> list[BookRecord]:
        """All records, in insertion order."""
        return list(self._records.values())

    def with_record(self, record: BookRecord) -> "BookCollection":
        """Return a new collection with ``record`` inserted or replacing its URL's entry."""
        return self.with_records([record])

    def with_records(self, records: Iterable[BookRecord]) -> "BookCollection":
        """Return a new collection with every given record upserted."""
        merged = dict(self._records)
        for record in records:
            merged[record.url] = record
        return BookCollection(merged)
