# ABOUTME: Shared pytest fixtures for biblioenrich tests.
# ABOUTME: Provides sample book records, collections, and a JSON collection file on disk.

import json
from pathlib import Path

import pytest

from biblioenrich.core.context import EnrichContext
from biblioenrich.records.types import BookCollection, BookRecord
from tests.fixtures.source_responses import ASIN, EN_ISBN10, JP_ISBN10


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def context() -> EnrichContext:
    """A fresh, uncancelled wish-list context."""
    return EnrichContext(mode="wish")


@pytest.fixture
def jp_record() -> BookRecord:
    """A Japanese book as scraped: ISBN-10 plus the scraped title and author."""
    return BookRecord(
        url="https://bookmeter.com/books/548397",
        identifier=JP_ISBN10,
        title="こころ",
        author="夏目漱石",
    )


@pytest.fixture
def en_record() -> BookRecord:
    """A non-Japanese book as scraped."""
    return BookRecord(
        url="https://bookmeter.com/books/12345",
        identifier=EN_ISBN10,
        title="The Name of the Rose",
        author="Umberto Eco",
    )


@pytest.fixture
def asin_record() -> BookRecord:
    """A Kindle edition identified only by its ASIN."""
    return BookRecord(
        url="https://bookmeter.com/books/999999",
        identifier=ASIN,
        title="吾輩は猫である",
        author="夏目漱石",
    )


@pytest.fixture
def sample_collection(
    jp_record: BookRecord, en_record: BookRecord, asin_record: BookRecord
) -> BookCollection:
    """A three-record collection: Japanese ISBN, foreign ISBN, and ASIN."""
    return BookCollection([jp_record, en_record, asin_record])


@pytest.fixture
def collection_file(tmp_path: Path) -> Path:
    """A scraped collection written as a URL-keyed JSON file."""
    data = {
        "https://bookmeter.com/books/548397": {
            "url": "https://bookmeter.com/books/548397",
            "identifier": JP_ISBN10,
            "title": "こころ",
            "author": "夏目漱石",
        },
        "https://bookmeter.com/books/999999": {
            "url": "https://bookmeter.com/books/999999",
            "identifier": ASIN,
            "title": "吾輩は猫である",
            "author": "夏目漱石",
        },
    }
    path = tmp_path / "wish.json"
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return path
