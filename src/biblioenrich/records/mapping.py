# ABOUTME: Converts between BookRecord/BookCollection and plain JSON-ready dictionaries.
# ABOUTME: Used by the CLI to read scraped collections and write enriched ones.

import json
from pathlib import Path
from typing import Any

from biblioenrich.records.types import (
    BookCollection,
    BookRecord,
    LookupStatus,
    OwnershipStatus,
)

_TEXT_FIELDS = (
    "identifier",
    "title",
    "author",
    "publisher",
    "published_date",
    "sophia_opac",
    "utokyo_opac",
    "sophia_mathlib_opac",
    "description",
)


class RecordFormatError(ValueError):
    """Raised when serialized records cannot be turned back into BookRecords."""


def record_to_dict(record: BookRecord) -> dict[str, Any]:
    """Convert a BookRecord into a JSON-serializable dict.

    Enum values are written as their string values; the lookup status map
    becomes a plain dict of source name to status string.
    """
    data: dict[str, Any] = {"url": record.url}
    for name in _TEXT_FIELDS:
        data[name] = getattr(record, name)
    data["exist_in_sophia"] = record.exist_in_sophia.value
    data["exist_in_utokyo"] = record.exist_in_utokyo.value
    data["lookup_status"] = {
        source: status.value for source, status in record.lookup_status.items()
    }
    return data


def dict_to_record(data: dict[str, Any]) -> BookRecord:
    """Build a BookRecord from a dict produced by record_to_dict (or the scraper).

    Missing text fields default to empty strings and missing ownership flags
    to UNKNOWN. ``None`` is treated as empty.

    Raises:
        RecordFormatError: If the URL is missing or a status value is unknown.
    """
    url = data.get("url")
    if not isinstance(url, str) or not url:
        raise RecordFormatError(f"Record is missing its url: {data!r}")

    fields: dict[str, Any] = {
        name: str(data[name]) if data.get(name) is not None else "" for name in _TEXT_FIELDS
    }
    try:
        fields["exist_in_sophia"] = OwnershipStatus(
            data.get("exist_in_sophia") or OwnershipStatus.UNKNOWN.value
        )
        fields["exist_in_utokyo"] = OwnershipStatus(
            data.get("exist_in_utokyo") or OwnershipStatus.UNKNOWN.value
        )
        fields["lookup_status"] = {
            source: LookupStatus(status)
            for source, status in (data.get("lookup_status") or {}).items()
        }
    except ValueError as exc:
        raise RecordFormatError(f"Invalid status value in record {url}: {exc}") from exc

    return BookRecord(url=url, **fields)


def collection_to_json(collection: BookCollection) -> dict[str, dict[str, Any]]:
    """Serialize a collection as a URL-keyed dict of record dicts."""
    return {url: record_to_dict(record) for url, record in collection.items()}


def json_to_collection(data: Any) -> BookCollection:
    """Build a collection from either a URL-keyed dict or a list of record dicts.

    Raises:
        RecordFormatError: On an unexpected top-level shape, malformed records,
            keys that disagree with record URLs, or duplicate URLs.
    """
    if isinstance(data, dict):
        records = []
        for key, value in data.items():
            if not isinstance(value, dict):
                raise RecordFormatError(f"Record for {key!r} is not an object")
            if value.get("url", key) != key:
                raise RecordFormatError(f"Key {key!r} does not match record url {value['url']!r}")
            records.append(dict_to_record({"url": key, **value}))
    elif isinstance(data, list):
        if not all(isinstance(item, dict) for item in data):
            raise RecordFormatError("Every record in a list must be an object")
        records = [dict_to_record(item) for item in data]
    else:
        raise RecordFormatError(
            f"Expected a JSON object or array of records, got {type(data).__name__}"
        )

    try:
        return BookCollection(records)
    except ValueError as exc:
        raise RecordFormatError(str(exc)) from exc


def load_collection(path: Path) -> BookCollection:
    """Read a collection from a JSON file."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise RecordFormatError(f"{path} is not valid JSON: {exc}") from exc
    return json_to_collection(data)


def save_collection(path: Path, collection: BookCollection) -> None:
    """Write a collection to a JSON file, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(collection_to_json(collection), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
