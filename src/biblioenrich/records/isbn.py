# ABOUTME: Identifier classification for book records: ISBN-10, ISBN-13, and ASIN-like ids.
# ABOUTME: Pure functions that never raise; also converts ISBN-10 to ISBN-13 and routes by region.

import re
from typing import Literal

Region = Literal["Japan", "Others"]

_ISBN10_RE = re.compile(
    r"^(?:ISBN(?:-10)?:? ?)?"
    r"(?=[0-9X]{10}$|(?=(?:[0-9]+[- ]){3})[- 0-9X]{13}$)"
    r"[0-9]{1,5}[- ]?[0-9]+[- ]?[0-9]+[- ]?[0-9X]$",
    re.IGNORECASE,
)
_ISBN13_RE = re.compile(
    r"^(?:ISBN(?:-13)?:? ?)?"
    r"(?=[0-9]{13}$|(?=(?:[0-9]+[- ]){4})[- 0-9]{17}$)"
    r"97[89][- ]?[0-9]{1,5}[- ]?[0-9]+[- ]?[0-9]+[- ]?[0-9]$",
    re.IGNORECASE,
)
_ASIN_RE = re.compile(r"^[A-Z0-9]{10}$")
_PREFIX_RE = re.compile(r"^ISBN(?:-1[03])?:?\s*", re.IGNORECASE)
_SEPARATOR_RE = re.compile(r"[\s-]")

# Hyphenated or bare ISBN-looking runs inside free text (PDF holdings lists, etc.).
_ISBN_IN_TEXT_RE = re.compile(
    r"(?<![0-9X-])(?:97[89]-?)?[0-9]{1,5}-?[0-9]+-?[0-9]+-?[0-9X](?![0-9X])"
)


def normalize_isbn(value: str) -> str:
    """Strip an optional ISBN prefix and all hyphens/whitespace.

    Returns the input unchanged (apart from trimming) when it is not a string
    we know how to clean; never raises.
    """
    if not isinstance(value, str):
        return value
    stripped = _PREFIX_RE.sub("", value.strip())
    return _SEPARATOR_RE.sub("", stripped).upper()


def _isbn10_checksum_ok(digits: str) -> bool:
    total = 0
    for position, char in enumerate(digits):
        if char == "X":
            if position != 9:
                return False
            value = 10
        else:
            value = int(char)
        total += (10 - position) * value
    return total % 11 == 0


def _isbn13_check_digit(body: str) -> int:
    """Mod-10 check digit over a 12-digit body with alternating 1/3 weights."""
    total = sum(int(char) * (1 if index % 2 == 0 else 3) for index, char in enumerate(body))
    remainder = 10 - (total % 10)
    return 0 if remainder == 10 else remainder


def is_isbn10(value: str) -> bool:
    """Check that a string is a structurally valid ISBN-10 with a correct checksum."""
    if not isinstance(value, str) or not _ISBN10_RE.match(value.strip()):
        return False
    digits = normalize_isbn(value)
    return len(digits) == 10 and _isbn10_checksum_ok(digits)


def is_isbn13(value: str) -> bool:
    """Check that a string is a structurally valid ISBN-13 with a correct checksum."""
    if not isinstance(value, str) or not _ISBN13_RE.match(value.strip()):
        return False
    digits = normalize_isbn(value)
    if len(digits) != 13 or not digits.isdigit():
        return False
    return _isbn13_check_digit(digits[:12]) == int(digits[12])


def is_isbn(value: str) -> bool:
    """True for either a valid ISBN-10 or a valid ISBN-13."""
    return is_isbn10(value) or is_isbn13(value)


def is_asin(value: str) -> bool:
    """Check for an opaque 10-character asset id that is not itself an ISBN-10.

    ISBN-10 takes precedence: Amazon reuses ISBN-10s as ASINs for books, so a
    string that validates as an ISBN-10 is never classified as an ASIN.
    """
    if not isinstance(value, str) or not _ASIN_RE.match(value):
        return False
    return not is_isbn10(value)


def convert_isbn10_to_13(isbn10: str) -> str:
    """Convert a valid ISBN-10 to its ISBN-13 form ("978" prefix, recomputed check digit).

    The input must already be a valid ISBN-10; the result is undefined otherwise.
    """
    body = f"978{normalize_isbn(isbn10)[:9]}"
    return f"{body}{_isbn13_check_digit(body)}"


def to_isbn13(identifier: str) -> str | None:
    """Return the normalized ISBN-13 form of any ISBN, or None for non-ISBNs."""
    if is_isbn13(identifier):
        return normalize_isbn(identifier)
    if is_isbn10(identifier):
        return convert_isbn10_to_13(identifier)
    return None


def route_region(identifier: str) -> Region:
    """Classify an identifier as a Japanese publication or not.

    Japanese books use registration group 4: ISBN-10s starting with "4" and
    978-prefixed ISBN-13s whose group digit is "4". ASINs and anything else
    route to "Others".
    """
    if is_isbn10(identifier):
        return "Japan" if normalize_isbn(identifier).startswith("4") else "Others"
    if is_isbn13(identifier):
        return "Japan" if normalize_isbn(identifier).startswith("9784") else "Others"
    return "Others"


def find_isbns(text: str) -> set[str]:
    """Extract every checksum-valid ISBN in free text, normalized (no hyphens)."""
    found: set[str] = set()
    for match in _ISBN_IN_TEXT_RE.finditer(text or ""):
        candidate = match.group(0)
        if is_isbn(candidate):
            found.add(normalize_isbn(candidate))
    return found
