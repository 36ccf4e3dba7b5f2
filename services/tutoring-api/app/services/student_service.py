"""
Student enrolment service.

Implements validate -> normalize -> persist -> notify for student
submissions, duplicate account detection, and the email lookups used by
the student and guardian portals.
"""

from typing import Any, Dict, List, Optional

import structlog
from pymongo.errors import DuplicateKeyError

from app.exceptions import (ConflictException, GuardianEmailExistsException,
                            StudentEmailExistsException)
from app.metrics import record_duplicate_conflict, record_submission
from app.models import ClientInfo, StudentSubmission, SubmissionSource
from app.normalizers import normalize_email, normalize_student
from app.notifier import EmailService
from app.repositories import StudentRepository

logger = structlog.get_logger(__name__)


def conflict_from_duplicate_key(error: DuplicateKeyError) -> ConflictException:
    """
    Map a unique index violation on ``students`` to a conflict exception.

    The violated key comes from the server's ``keyValue`` / ``keyPattern``
    details, falling back to the error message for older servers.
    """
    details = error.details or {}
    keys = list((details.get("keyValue") or details.get("keyPattern") or {}).keys())
    haystack = " ".join(keys) if keys else str(error)

    if "guardian" in haystack:
        return GuardianEmailExistsException()
    return StudentEmailExistsException()


def build_student_document(
    student: StudentSubmission,
    source: SubmissionSource,
    client: ClientInfo,
    source_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Shape a normalized submission into the stored document."""
    document: Dict[str, Any] = {
        "source": source.value,
        "sourceId": source_id or "",
        "name": student.name,
        "nickname": student.nickname,
        "email": student.email,
        "enrolments": [
            enrolment.model_dump(by_alias=True, exclude_none=True)
            for enrolment in student.enrolments
        ],
        "guardian": {"name": student.guardian.name, "email": student.guardian.email},
        "preferredColourForDyslexia": student.preferred_colour_for_dyslexia,
        "chatId": student.chat_id or "",
        "sessionId": student.session_id or "",
        "chatflowId": student.chatflow_id or "",
        "client": client.model_dump(by_alias=True),
    }
    if student.age is not None:
        document["age"] = student.age
    return document


class StudentService:
    """Student submissions and lookups."""

    def __init__(self, repository: StudentRepository, notifier: EmailService):
        self.repository = repository
        self.notifier = notifier

    async def create_student(
        self,
        submission: StudentSubmission,
        source: SubmissionSource,
        client: ClientInfo,
        source_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Persist a student submission and notify the operations inbox.

        Args:
            submission: Validated submission
            source: Manual form or chatbot webhook
            client: Caller metadata
            source_id: Webhook identifier, when any

        Returns:
            The stored document

        Raises:
            StudentEmailExistsException: The student email is already registered
            GuardianEmailExistsException: A guardian unique index was violated
        """
        student = normalize_student(submission)

        if await self.repository.exists_by_email(student.email):
            logger.info("Duplicate student email rejected", source=source.value)
            record_duplicate_conflict(StudentEmailExistsException.code)
            raise StudentEmailExistsException()

        document = build_student_document(student, source, client, source_id)
        try:
            stored = await self.repository.create(document)
        except DuplicateKeyError as e:
            conflict = conflict_from_duplicate_key(e)
            logger.warning("Student insert hit a unique index", code=conflict.code)
            record_duplicate_conflict(conflict.code)
            raise conflict from e

        record_submission("student", source)
        logger.info(
            "Student created",
            student_id=str(stored["_id"]),
            source=source.value,
            enrolments=len(student.enrolments),
        )

        await self.notifier.send_student_submission_alert(student, source, source_id)
        return stored

    async def list_students(self) -> List[Dict[str, Any]]:
        return await self.repository.list_recent()

    async def get_student(self, student_id: str) -> Optional[Dict[str, Any]]:
        return await self.repository.get_by_id(student_id)

    async def verify_student_email(self, email: str) -> Optional[Dict[str, Any]]:
        """Return the public profile of the student registered with an email."""
        student = await self.repository.find_by_email(normalize_email(email))
        if student is None:
            return None
        return {
            "email": student.get("email"),
            "name": student.get("name"),
            "nickname": student.get("nickname") or "",
        }

    async def find_guardian_students(self, guardian_email: str) -> List[Dict[str, Any]]:
        """Summaries of every student linked to a guardian email."""
        students = await self.repository.find_by_guardian_email(normalize_email(guardian_email))
        return [
            {
                "_id": student["_id"],
                "name": student.get("name"),
                "nickname": student.get("nickname") or None,
                "email": student.get("email"),
                "enrolmentCount": len(student.get("enrolments") or []),
            }
            for student in students
        ]
