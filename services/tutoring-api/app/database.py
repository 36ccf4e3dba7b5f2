"""MongoDB connection management."""

from typing import Optional

import structlog
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, IndexModel

from app.config import settings
from app.exceptions import DatabaseNotConnectedException

logger = structlog.get_logger(__name__)

STUDENTS_COLLECTION = "students"
ISSUES_COLLECTION = "issues"
SUMMARY_REPORTS_COLLECTION = "summary_reports"
ITEMS_COLLECTION = "items"

INDEXES = {
    STUDENTS_COLLECTION: [
        IndexModel([("email", ASCENDING)], unique=True, name="email_unique"),
        IndexModel([("guardian.email", ASCENDING)], name="guardian_email"),
        IndexModel([("createdAt", DESCENDING)], name="created_at"),
    ],
    ISSUES_COLLECTION: [
        IndexModel([("createdAt", DESCENDING)], name="created_at"),
    ],
    SUMMARY_REPORTS_COLLECTION: [
        IndexModel([("createdAt", DESCENDING)], name="created_at"),
        IndexModel([("email", ASCENDING)], name="email"),
    ],
    ITEMS_COLLECTION: [
        IndexModel([("createdAt", DESCENDING)], name="created_at"),
    ],
}


class Database:
    """MongoDB client manager."""

    def __init__(self):
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None

    @property
    def is_connected(self) -> bool:
        return self.database is not None

    async def connect(self, uri: Optional[str] = None, db_name: Optional[str] = None):
        """Create the client, verify the server is reachable and ensure indexes."""
        uri = uri or settings.MONGODB_URI
        if not uri:
            raise RuntimeError("MONGODB_URI is required")

        try:
            self.client = AsyncIOMotorClient(
                uri,
                tz_aware=True,
                serverSelectionTimeoutMS=settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
            )
            self.database = self.client.get_default_database(
                default=db_name or settings.MONGODB_DB
            )
            await self.client.admin.command("ping")
            await self.ensure_indexes()
            logger.info("MongoDB connected", database=self.database.name)
        except Exception as e:
            logger.error("Failed to connect to MongoDB", error=str(e))
            await self.disconnect()
            raise

    async def disconnect(self):
        """Close the client."""
        if self.client is not None:
            self.client.close()
            logger.info("MongoDB connection closed")
        self.client = None
        self.database = None

    async def ensure_indexes(self):
        """Create the indexes every collection relies on."""
        for collection_name, indexes in INDEXES.items():
            await self.get_database()[collection_name].create_indexes(indexes)

    async def ping(self) -> bool:
        """Return True when the server answers a ping."""
        if self.client is None:
            return False
        try:
            await self.client.admin.command("ping")
            return True
        except Exception as e:
            logger.warning("MongoDB ping failed", error=str(e))
            return False

    def get_database(self) -> AsyncIOMotorDatabase:
        if self.database is None:
            raise DatabaseNotConnectedException()
        return self.database


db = Database()
