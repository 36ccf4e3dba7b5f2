"""Summary report persistence."""

from typing import Any, Dict, List, Sequence

from pymongo import DESCENDING

from app.database import SUMMARY_REPORTS_COLLECTION
from app.repositories.base import MongoRepository


class SummaryReportRepository(MongoRepository):
    """Repository for the ``summary_reports`` collection."""

    collection_name = SUMMARY_REPORTS_COLLECTION

    async def list_by_emails(self, emails: Sequence[str], limit: int) -> List[Dict[str, Any]]:
        """Reports written for any of the given student emails, newest first."""
        if not emails:
            return []
        cursor = (
            self.collection.find({"email": {"$in": list(emails)}})
            .sort("createdAt", DESCENDING)
            .limit(limit)
        )
        return await cursor.to_list(length=None)
