# ABOUTME: Record package: book record data model, identifier classification, JSON mapping.
# ABOUTME: Exports the types every other layer of biblioenrich works with.

from biblioenrich.records.isbn import (
    convert_isbn10_to_13,
    is_asin,
    is_isbn,
    is_isbn10,
    is_isbn13,
)
from biblioenrich.records.types import (
    BookCollection,
    BookMode,
    BookRecord,
    DuplicateRecordError,
    LookupStatus,
    OwnershipStatus,
)

__all__ = [
    "BookCollection",
    "BookMode",
    "BookRecord",
    "DuplicateRecordError",
    "LookupStatus",
    "OwnershipStatus",
    "convert_isbn10_to_13",
    "is_asin",
    "is_isbn",
    "is_isbn10",
    "is_isbn13",
]
