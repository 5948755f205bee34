# ABOUTME: Record merge policy shared by the bibliographic gateways.
# ABOUTME: Sentinel status strings, first-hit-wins checks, and non-destructive field application.

from collections.abc import Mapping

from biblioenrich.records.types import BIBLIOGRAPHIC_FIELDS, BookRecord, LookupStatus

# Sources that supply title/author/publisher/date. Holdings and description
# sources are not listed: they never count as a bibliographic hit.
BIBLIOGRAPHIC_SOURCES: tuple[str, ...] = ("OpenBD", "NDL", "ISBNdb", "GoogleBooks")

_NOT_FOUND_PREFIX = "Not_found_in_"
_API_ERROR_SUFFIX = "_API_Error"


def not_found_text(source: str) -> str:
    return f"{_NOT_FOUND_PREFIX}{source}"


def api_error_text(source: str) -> str:
    return f"{source}{_API_ERROR_SUFFIX}"


def is_sentinel(value: str) -> bool:
    """True when a field holds a status string rather than real data."""
    return bool(value) and (value.startswith(_NOT_FOUND_PREFIX) or value.endswith(_API_ERROR_SUFFIX))


def has_real_value(value: str) -> bool:
    return bool(value) and not is_sentinel(value)


def sentinel_fields(text: str) -> dict[str, str]:
    """The four bibliographic fields all set to one status string."""
    return {name: text for name in BIBLIOGRAPHIC_FIELDS}


def has_bibliographic_match(record: BookRecord) -> bool:
    """True when any bibliographic source has already found this record."""
    return any(record.status_for(source) == LookupStatus.FOUND for source in BIBLIOGRAPHIC_SOURCES)


def not_found(record: BookRecord, source: str) -> BookRecord:
    return record.with_status(source, LookupStatus.NOT_FOUND, **sentinel_fields(not_found_text(source)))


def api_error(record: BookRecord, source: str) -> BookRecord:
    return record.with_status(source, LookupStatus.ERROR, **sentinel_fields(api_error_text(source)))


def apply_found(record: BookRecord, source: str, fields: Mapping[str, str]) -> BookRecord:
    """Tag a record FOUND for ``source`` and take the non-empty fields it supplied.

    Bibliographic fields overwrite (a hit replaces earlier sentinels); a
    description is only filled when the record has none yet.
    """
    changes: dict[str, str] = {}
    for name in BIBLIOGRAPHIC_FIELDS:
        value = (fields.get(name) or "").strip()
        if value:
            changes[name] = value
    description = (fields.get("description") or "").strip()
    if description and not has_real_value(record.description):
        changes["description"] = description
    return record.with_status(source, LookupStatus.FOUND, **changes)
