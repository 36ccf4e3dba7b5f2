"""Student persistence."""

from typing import Any, Dict, List, Optional

from pymongo import DESCENDING

from app.database import STUDENTS_COLLECTION
from app.repositories.base import MongoRepository

GUARDIAN_STUDENT_PROJECTION = {"_id": 1, "name": 1, "nickname": 1, "email": 1, "enrolments": 1}


class StudentRepository(MongoRepository):
    """Repository for the ``students`` collection."""

    collection_name = STUDENTS_COLLECTION

    async def exists_by_email(self, email: str) -> bool:
        return await self.collection.find_one({"email": email}, {"_id": 1}) is not None

    async def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return await self.collection.find_one({"email": email})

    async def find_by_guardian_email(self, guardian_email: str) -> List[Dict[str, Any]]:
        """Students linked to a guardian, newest first."""
        cursor = self.collection.find(
            {"guardian.email": guardian_email}, GUARDIAN_STUDENT_PROJECTION
        ).sort("createdAt", DESCENDING)
        return await cursor.to_list(length=None)

    async def list_chatflow_fields(self) -> List[Dict[str, Any]]:
        cursor = self.collection.find({}, {"enrolments": 1, "chatflowId": 1})
        return await cursor.to_list(length=None)

    async def set_chatflow(
        self, student_id: Any, chatflow_id: str, enrolments: List[Dict[str, Any]]
    ) -> None:
        await self.collection.update_one(
            {"_id": student_id},
            {"$set": {"chatflowId": chatflow_id, "enrolments": enrolments}},
        )
