"""Repository layer over MongoDB collections."""

from app.repositories.base import MongoRepository, parse_object_id, serialize_document
from app.repositories.flowise_events import FlowiseEventRepository
from app.repositories.issues import IssueRepository
from app.repositories.students import StudentRepository
from app.repositories.summary_reports import SummaryReportRepository

__all__ = [
    "FlowiseEventRepository",
    "IssueRepository",
    "MongoRepository",
    "StudentRepository",
    "SummaryReportRepository",
    "parse_object_id",
    "serialize_document",
]
