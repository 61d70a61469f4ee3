"""Pytest configuration and fixtures.

Provides fixtures for:
- A two-locale run configuration
- A schema registry covering every field kind
- Source entries built like a real export
- Fake record clients (recording, concurrency tracking, failing)
"""

import asyncio
from typing import Dict, List, Optional, Set

import pytest

from content_migration.errors import CreateRecordFailure
from content_migration.loaders.base import BaseRecordClient
from content_migration.models.record import SourceEntry
from content_migration.models.schema import (
    FieldDefinition,
    FieldType,
    ItemTypeDefinition,
    LocaleSet,
)
from content_migration.services.schema_registry import SchemaRegistry


class RecordingClient(BaseRecordClient):
    """Creates records in memory, optionally rejecting some item types or entries."""

    def __init__(self, delay: float = 0.0, fail_titles: Optional[Set[str]] = None):
        super().__init__()
        self.delay = delay
        self.fail_titles = fail_titles or set()
        self.created: Dict[str, dict] = {}
        self.published: List[str] = []
        self.fail_publish: Set[str] = set()
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = asyncio.Lock()

    async def create(self, attributes, item_type):
        async with self._lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)

        try:
            await asyncio.sleep(self.delay)
            title = attributes.get("title")
            if isinstance(title, dict):
                title = next(iter(title.values()))
            if title in self.fail_titles:
                raise CreateRecordFailure(f"rejected {title}", status_code=422)

            record_id = f"rec-{len(self.created) + 1}"
            self.created[record_id] = {"item_type": item_type.id, "attributes": attributes}
            return record_id
        finally:
            async with self._lock:
                self.in_flight -= 1

    async def publish(self, record_id):
        await asyncio.sleep(self.delay)
        if record_id in self.fail_publish:
            raise CreateRecordFailure(f"cannot publish {record_id}")
        self.published.append(record_id)


@pytest.fixture
def locales() -> LocaleSet:
    return LocaleSet(locales=["en-US", "it", "de"], default_locale="en-US")


@pytest.fixture
def article_type() -> ItemTypeDefinition:
    return ItemTypeDefinition(
        api_key="blog_post",
        id="1001",
        fields=[
            FieldDefinition("title", FieldType.STRING, localized=True),
            FieldDefinition("tags", FieldType.STRING),
            FieldDefinition("location", FieldType.LAT_LON, localized=True),
            FieldDefinition("metadata", FieldType.JSON),
            FieldDefinition("hero_image", FieldType.FILE),
            FieldDefinition("author", FieldType.LINK, localized=True),
            FieldDefinition("related_posts", FieldType.LINKS),
            FieldDefinition("photos", FieldType.GALLERY),
            FieldDefinition("rating", FieldType.INTEGER),
        ],
    )


@pytest.fixture
def author_type() -> ItemTypeDefinition:
    return ItemTypeDefinition(
        api_key="author",
        id="1002",
        fields=[
            FieldDefinition("title", FieldType.STRING),
            FieldDefinition("bio", FieldType.TEXT, localized=True),
        ],
    )


@pytest.fixture
def registry(article_type, author_type) -> SchemaRegistry:
    return SchemaRegistry([article_type, author_type])


def make_entry(entry_id: str, content_type: str = "blogPost", published: Optional[int] = None,
               **fields) -> SourceEntry:
    return SourceEntry(
        id=entry_id,
        content_type_id=content_type,
        fields=fields,
        published_version=published,
    )


@pytest.fixture
def entry_factory():
    return make_entry


@pytest.fixture
def client() -> RecordingClient:
    return RecordingClient()
