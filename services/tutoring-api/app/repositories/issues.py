"""Issue report persistence."""

from app.database import ISSUES_COLLECTION
from app.repositories.base import MongoRepository


class IssueRepository(MongoRepository):
    """Repository for the ``issues`` collection."""

    collection_name = ISSUES_COLLECTION
