"""Business logic for each submission kind."""

from app.services.flowise_service import FlowiseService
from app.services.issue_service import IssueService
from app.services.student_service import StudentService
from app.services.summary_report_service import SummaryReportService

__all__ = ["FlowiseService", "IssueService", "StudentService", "SummaryReportService"]
