"""Tests for backend selection and the MongoDB filter translation."""

import pytest

from doctrack.config import Config
from doctrack.core.modules.record.models import RecordQuery
from doctrack.core.modules.section.models import Section
from doctrack.core.storage.factory import create_storage
from doctrack.core.storage.memory import MemoryStorage
from doctrack.core.storage.mongo import MongoStorage, build_record_filter


class TestCreateStorage:
    """Tests for create_storage."""

    def test_memory_scheme(self):
        """Test that memory:// selects the in-process backend."""
        assert isinstance(create_storage(Config(database_url="memory://")), MemoryStorage)

    async def test_mongodb_scheme(self):
        """Test that mongodb:// selects the MongoDB backend and the database from the path."""
        storage = create_storage(Config(database_url="mongodb://localhost:27017/doctrack"))
        try:
            assert isinstance(storage, MongoStorage)
            assert storage.database.name == "doctrack"
        finally:
            await storage.close()

    def test_unknown_scheme(self):
        """Test that other schemes are rejected."""
        with pytest.raises(ValueError, match="Unsupported database_url scheme"):
            create_storage(Config(database_url="sqlite:///records.db"))


class TestBuildRecordFilter:
    """Tests for build_record_filter."""

    def test_empty_query(self):
        """Test that an empty query matches all documents."""
        assert build_record_filter(RecordQuery()) == {}

    def test_date_conditions_merged(self):
        """Test that exact and range date filters share one condition."""
        mongo_filter = build_record_filter(
            RecordQuery(section=Section.INVES, date_received="2026-02-18", start_date="2026-02-01")
        )
        assert mongo_filter == {
            "section": Section.INVES,
            "date_received": {"$eq": "2026-02-18", "$gte": "2026-02-01"},
        }

    def test_search_escaped(self):
        """Test that search text is matched literally across the search fields."""
        mongo_filter = build_record_filter(RecordQuery(search="a.b"))
        assert len(mongo_filter["$or"]) == 4
        assert mongo_filter["$or"][0] == {"subject": {"$regex": r"a\.b", "$options": "i"}}
