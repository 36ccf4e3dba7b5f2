"""
Normalization helpers applied to validated submissions before persistence.

Emails are compared case-insensitively everywhere, so they are stored
lowercase; free text is trimmed and empty list entries are dropped.
"""

import re
from typing import Iterable, List, Optional

from app.models import Enrolment, Guardian, StudentSubmission

_TAG_PATTERN = re.compile(r"<[^>]+>")
_WHITESPACE_PATTERN = re.compile(r"\s+")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _strip_optional(value: Optional[str]) -> Optional[str]:
    return value.strip() if value is not None else None


def _clean_list(values: Iterable[str]) -> List[str]:
    return [value.strip() for value in values if value.strip()]


def normalize_enrolment(enrolment: Enrolment) -> Enrolment:
    return enrolment.model_copy(
        update={
            "subject": enrolment.subject.strip(),
            "country": enrolment.country.strip(),
            "books": _clean_list(enrolment.books),
            "exam_dates": _clean_list(enrolment.exam_dates),
        }
    )


def normalize_student(student: StudentSubmission) -> StudentSubmission:
    """Return a copy of the submission ready to be stored and emailed."""
    guardian = Guardian.model_construct(
        name=student.guardian.name.strip(),
        email=normalize_email(student.guardian.email),
    )

    return student.model_copy(
        update={
            "name": student.name.strip(),
            "nickname": student.nickname.strip(),
            "email": normalize_email(student.email),
            "guardian": guardian,
            "preferred_colour_for_dyslexia": student.preferred_colour_for_dyslexia.strip(),
            "chat_id": _strip_optional(student.chat_id),
            "session_id": _strip_optional(student.session_id),
            "chatflow_id": _strip_optional(student.chatflow_id),
            "enrolments": [normalize_enrolment(enrolment) for enrolment in student.enrolments],
        }
    )


def html_to_text(html: str) -> str:
    """Crude plain-text rendering of an HTML body."""
    return _WHITESPACE_PATTERN.sub(" ", _TAG_PATTERN.sub(" ", html)).strip()
