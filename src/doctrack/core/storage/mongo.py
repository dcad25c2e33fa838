"""MongoDB storage backend (database_url = mongodb://host:port/dbname)."""

import re
from typing import Any
from urllib.parse import urlparse
from uuid import UUID, uuid4

from pymongo import ASCENDING, AsyncMongoClient, ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from doctrack.core.modules.counter.models import Counter, CounterScope
from doctrack.core.modules.record.models import SEARCH_FIELDS, Record, RecordQuery
from doctrack.core.modules.section.models import Section
from doctrack.core.storage.base import CounterStore, RecordStore, Storage
from doctrack.errors import SequenceConflictError

RECORD_SORT = [("date_received", ASCENDING), ("created_at", ASCENDING)]


def build_record_filter(query: RecordQuery) -> dict[str, Any]:
    """Translate a RecordQuery into a MongoDB filter document."""
    mongo_filter: dict[str, Any] = {}
    if query.section is not None:
        mongo_filter["section"] = query.section

    date_condition: dict[str, str] = {}
    if query.date_received is not None:
        date_condition["$eq"] = query.date_received
    if query.start_date is not None:
        date_condition["$gte"] = query.start_date
    if query.end_date is not None:
        date_condition["$lte"] = query.end_date
    if date_condition:
        mongo_filter["date_received"] = date_condition

    if query.action_taken is not None:
        mongo_filter["action_taken"] = query.action_taken
    if query.search:
        pattern = re.escape(query.search)
        mongo_filter["$or"] = [{field: {"$regex": pattern, "$options": "i"}} for field in SEARCH_FIELDS]
    return mongo_filter


class MongoRecordStore(RecordStore):
    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self._collection: AsyncCollection[dict[str, Any]] = database.get_collection("records")

    async def create_indexes(self) -> None:
        # Sequence uniqueness only applies to rows that store integer sequences
        await self._collection.create_index(
            [("date_received", ASCENDING), ("office_sequence", ASCENDING)],
            unique=True,
            partialFilterExpression={"office_sequence": {"$type": "number"}},
            name="unique_office_sequence",
        )
        await self._collection.create_index(
            [("section", ASCENDING), ("date_received", ASCENDING), ("section_sequence", ASCENDING)],
            unique=True,
            partialFilterExpression={"section_sequence": {"$type": "number"}},
            name="unique_section_sequence",
        )
        await self._collection.create_index([("date_received", ASCENDING), ("created_at", ASCENDING)])
        await self._collection.create_index([("action_taken", ASCENDING)])

    async def create(self, record: Record) -> None:
        try:
            await self._collection.insert_one(record.to_mongo())
        except DuplicateKeyError as e:
            raise SequenceConflictError(
                f"Sequence already used for {record.section} on {record.date_received}: "
                f"office={record.office_sequence}, section={record.section_sequence}"
            ) from e

    async def get(self, record_id: UUID) -> Record | None:
        doc = await self._collection.find_one({"_id": record_id})
        return Record.model_validate(doc) if doc else None

    async def find(self, query: RecordQuery, limit: int | None = None, offset: int = 0) -> list[Record]:
        cursor = self._collection.find(build_record_filter(query)).sort(RECORD_SORT).skip(offset)
        if limit is not None:
            cursor = cursor.limit(limit)
        return await Record.list_cursor(cursor)

    async def count(self, query: RecordQuery) -> int:
        return await self._collection.count_documents(build_record_filter(query))

    async def count_by(self, field: str, query: RecordQuery) -> dict[str, int]:
        pipeline: list[dict[str, Any]] = [
            {"$match": build_record_filter(query)},
            {"$group": {"_id": f"${field}", "count": {"$sum": 1}}},
        ]
        cursor = await self._collection.aggregate(pipeline)
        return {str(doc["_id"] or ""): int(doc["count"]) async for doc in cursor}

    async def update(self, record_id: UUID, changes: dict[str, Any]) -> Record | None:
        doc = await self._collection.find_one_and_update(
            {"_id": record_id}, {"$set": changes}, return_document=ReturnDocument.AFTER
        )
        return Record.model_validate(doc) if doc else None

    async def delete(self, record_id: UUID) -> Record | None:
        doc = await self._collection.find_one_and_delete({"_id": record_id})
        return Record.model_validate(doc) if doc else None


class MongoCounterStore(CounterStore):
    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self._collection: AsyncCollection[dict[str, Any]] = database.get_collection("counters")

    async def create_indexes(self) -> None:
        await self._collection.create_index([("scope", ASCENDING), ("section", ASCENDING)], unique=True)

    async def get(self, scope: CounterScope, section: Section | None) -> Counter | None:
        doc = await self._collection.find_one({"scope": scope, "section": section})
        return Counter.model_validate(doc) if doc else None

    async def upsert(self, scope: CounterScope, section: Section | None, current_number: int, last_date_used: str) -> Counter:
        doc = await self._collection.find_one_and_update(
            {"scope": scope, "section": section},
            {
                "$set": {"current_number": current_number, "last_date_used": last_date_used},
                "$setOnInsert": {"_id": uuid4()},
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return Counter.model_validate(doc)

    async def set_current_number(self, scope: CounterScope, section: Section | None, current_number: int) -> bool:
        result = await self._collection.update_one(
            {"scope": scope, "section": section}, {"$set": {"current_number": current_number}}
        )
        return result.matched_count > 0

    async def list_all(self) -> list[Counter]:
        return await Counter.list_cursor(self._collection.find().sort([("scope", ASCENDING), ("section", ASCENDING)]))


class MongoStorage(Storage):
    """MongoDB-backed storage; every operation carries the configured driver timeout."""

    records: MongoRecordStore
    counters: MongoCounterStore

    def __init__(self, database_url: str, timeout_ms: int) -> None:
        self.mongo_client: AsyncMongoClient[dict[str, Any]] = AsyncMongoClient(
            database_url,
            uuidRepresentation="standard",
            tz_aware=True,
            serverSelectionTimeoutMS=timeout_ms,
            timeoutMS=timeout_ms,
        )
        self.database = self.mongo_client.get_database(urlparse(database_url).path[1:])
        self.records = MongoRecordStore(self.database)
        self.counters = MongoCounterStore(self.database)

    async def on_start(self) -> None:
        await self.records.create_indexes()
        await self.counters.create_indexes()

    async def close(self) -> None:
        await self.mongo_client.aclose()
