"""Tests for the MongoDB repositories with a mocked collection."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId

from app.repositories import (IssueRepository, StudentRepository, SummaryReportRepository,
                              parse_object_id, serialize_document)


def make_database(collection):
    database = MagicMock()
    database.__getitem__.return_value = collection
    return database


def make_cursor(documents):
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=documents)
    return cursor


class TestHelpers:
    def test_parse_object_id(self):
        object_id = ObjectId()

        assert parse_object_id(str(object_id)) == object_id
        assert parse_object_id(object_id) is object_id
        assert parse_object_id("nope") is None
        assert parse_object_id(None) is None

    def test_serialize_document(self):
        object_id = ObjectId()
        naive = datetime(2025, 1, 2, 3, 4, 5)

        assert serialize_document(
            {"_id": object_id, "createdAt": naive, "items": [{"ref": object_id}], "n": 1}
        ) == {
            "_id": str(object_id),
            "createdAt": "2025-01-02T03:04:05+00:00",
            "items": [{"ref": str(object_id)}],
            "n": 1,
        }


class TestMongoRepository:
    @pytest.mark.asyncio
    async def test_create_adds_timestamps_and_id(self):
        inserted_id = ObjectId()
        collection = MagicMock()
        collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=inserted_id))
        repository = IssueRepository(make_database(collection))

        stored = await repository.create({"title": "Crash"})

        assert stored["_id"] == inserted_id
        assert stored["createdAt"] == stored["updatedAt"]
        assert stored["createdAt"].tzinfo == timezone.utc
        collection.insert_one.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_get_by_id_with_invalid_id(self):
        collection = MagicMock()
        collection.find_one = AsyncMock()
        repository = IssueRepository(make_database(collection))

        assert await repository.get_by_id("invalid") is None
        collection.find_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_list_recent_sorted_and_limited(self):
        cursor = make_cursor([{"title": "A"}])
        collection = MagicMock()
        collection.find.return_value = cursor
        repository = IssueRepository(make_database(collection))

        assert await repository.list_recent(limit=5) == [{"title": "A"}]
        cursor.sort.assert_called_once_with("createdAt", -1)
        cursor.limit.assert_called_once_with(5)


class TestStudentRepository:
    @pytest.mark.asyncio
    async def test_exists_by_email(self):
        collection = MagicMock()
        collection.find_one = AsyncMock(return_value={"_id": ObjectId()})
        repository = StudentRepository(make_database(collection))

        assert await repository.exists_by_email("ada@example.com") is True
        collection.find_one.assert_awaited_once_with({"email": "ada@example.com"}, {"_id": 1})

    @pytest.mark.asyncio
    async def test_find_by_guardian_email(self):
        cursor = make_cursor([])
        collection = MagicMock()
        collection.find.return_value = cursor
        repository = StudentRepository(make_database(collection))

        await repository.find_by_guardian_email("anne@example.com")

        query = collection.find.call_args.args[0]
        assert query == {"guardian.email": "anne@example.com"}


class TestSummaryReportRepository:
    @pytest.mark.asyncio
    async def test_list_by_emails_without_emails(self):
        collection = MagicMock()
        repository = SummaryReportRepository(make_database(collection))

        assert await repository.list_by_emails([], 10) == []
        collection.find.assert_not_called()

    @pytest.mark.asyncio
    async def test_list_by_emails(self):
        cursor = make_cursor([{"title": "S1"}])
        collection = MagicMock()
        collection.find.return_value = cursor
        repository = SummaryReportRepository(make_database(collection))

        reports = await repository.list_by_emails(("ada@example.com",), 10)

        assert reports == [{"title": "S1"}]
        collection.find.assert_called_once_with({"email": {"$in": ["ada@example.com"]}})
        cursor.limit.assert_called_once_with(10)
