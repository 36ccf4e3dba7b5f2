"""
Base repository over a single MongoDB collection.

Documents keep the camelCase keys used on the wire and receive
``createdAt`` / ``updatedAt`` timestamps on insert.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import structlog
from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING

logger = structlog.get_logger(__name__)


def parse_object_id(value: Any) -> Optional[ObjectId]:
    """Return an ObjectId for a well formed identifier, otherwise None."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def serialize_document(value: Any) -> Any:
    """Convert BSON values into JSON friendly ones, recursively."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    if isinstance(value, dict):
        return {key: serialize_document(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_document(item) for item in value]
    return value


class MongoRepository:
    """CRUD helpers shared by every collection."""

    collection_name: str = ""

    def __init__(self, database: AsyncIOMotorDatabase):
        self.collection = database[self.collection_name]

    async def create(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a document and return it with its id and timestamps."""
        now = datetime.now(timezone.utc)
        stored = {**document, "createdAt": now, "updatedAt": now}
        result = await self.collection.insert_one(stored)
        stored["_id"] = result.inserted_id
        logger.debug(
            "Document inserted",
            collection=self.collection_name,
            document_id=str(result.inserted_id),
        )
        return stored

    async def get_by_id(self, document_id: str) -> Optional[Dict[str, Any]]:
        object_id = parse_object_id(document_id)
        if object_id is None:
            return None
        return await self.collection.find_one({"_id": object_id})

    async def list_recent(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Documents ordered newest first."""
        cursor = self.collection.find().sort("createdAt", DESCENDING)
        if limit:
            cursor = cursor.limit(limit)
        return await cursor.to_list(length=None)
