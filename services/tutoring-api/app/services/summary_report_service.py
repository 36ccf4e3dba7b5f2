"""Tutoring session summary report service."""

from typing import Any, Dict, List, Optional

import structlog

from app.config import settings
from app.metrics import record_submission
from app.models import ClientInfo, SubmissionSource, SummaryReportSubmission
from app.normalizers import normalize_email
from app.notifier import EmailService
from app.repositories import StudentRepository, SummaryReportRepository

logger = structlog.get_logger(__name__)


def build_summary_report_document(
    report: SummaryReportSubmission,
    source: SubmissionSource,
    client: ClientInfo,
    source_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Stored document; absent optional text fields become empty strings."""
    fields = report.model_dump(by_alias=True)
    document: Dict[str, Any] = {
        "source": source.value,
        "sourceId": source_id or "",
        **{key: value if value is not None else "" for key, value in fields.items()},
        "client": client.model_dump(by_alias=True),
    }
    if document["email"]:
        document["email"] = normalize_email(document["email"])
    return document


class SummaryReportService:
    """Summary reports and the guardian report view."""

    def __init__(
        self,
        repository: SummaryReportRepository,
        student_repository: StudentRepository,
        notifier: EmailService,
        list_limit: int = settings.SUMMARY_REPORT_LIST_LIMIT,
    ):
        self.repository = repository
        self.student_repository = student_repository
        self.notifier = notifier
        self.list_limit = list_limit

    async def create_report(
        self,
        report: SummaryReportSubmission,
        source: SubmissionSource,
        client: ClientInfo,
        source_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        stored = await self.repository.create(
            build_summary_report_document(report, source, client, source_id)
        )

        record_submission("summary_report", source)
        logger.info("Summary report created", report_id=str(stored["_id"]), source=source.value)

        await self.notifier.send_summary_report_alert(report, source, source_id)
        return stored

    async def list_reports(self) -> List[Dict[str, Any]]:
        return await self.repository.list_recent(limit=self.list_limit)

    async def get_report(self, report_id: str) -> Optional[Dict[str, Any]]:
        return await self.repository.get_by_id(report_id)

    async def list_guardian_reports(self, guardian_email: str) -> Optional[Dict[str, Any]]:
        """
        Reports written for any student of a guardian.

        Returns None when no student is linked to the guardian email.
        """
        email = normalize_email(guardian_email)
        students = await self.student_repository.find_by_guardian_email(email)
        if not students:
            return None

        student_emails = [student["email"] for student in students if student.get("email")]
        reports = await self.repository.list_by_emails(student_emails, self.list_limit)
        return {"guardianEmail": email, "studentCount": len(students), "reports": reports}
