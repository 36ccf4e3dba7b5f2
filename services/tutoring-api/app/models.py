"""
Pydantic models for request/response validation.

Wire payloads use camelCase keys (``examBody``, ``chatflowId``) while the
Python attributes stay snake_case; every model accepts both spellings.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import (BaseModel, ConfigDict, EmailStr, Field, ValidationInfo,
                      field_validator, model_validator)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError


class SubmissionSource(str, Enum):
    """Where a submission came from."""

    MANUAL = "manual"
    FLOWISE = "flowise"


class IssueStatus(str, Enum):
    """Issue triage status."""

    OPEN = "open"
    TRIAGED = "triaged"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class NotificationType(str, Enum):
    """Types of notification emails."""

    STUDENT_SUBMISSION = "student_submission"
    ISSUE_ALERT = "issue_alert"
    SUMMARY_REPORT = "summary_report"
    DIRECT = "direct"


class DeliveryStatus(str, Enum):
    """Notification delivery status."""

    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"


def _required(value: str, label: str) -> str:
    if not value:
        raise PydanticCustomError("missing_value", "{label} is required", {"label": label})
    return value


def reshape_legacy_guardian(data: Any) -> Any:
    """
    Bring legacy guardian shapes into the current object form.

    Older forms posted the guardian as a bare email string; newer ones send
    an object whose name and email may carry stray whitespace.
    """
    if not isinstance(data, dict):
        return data

    clone = dict(data)
    guardian = clone.get("guardian")

    if isinstance(guardian, str):
        clone["guardian"] = {"email": guardian.strip()}
    elif isinstance(guardian, dict):
        candidate = dict(guardian)
        for key in ("name", "email"):
            if isinstance(candidate.get(key), str):
                candidate[key] = candidate[key].strip()
        clone["guardian"] = candidate

    return clone


class CamelModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ClientInfo(CamelModel):
    """Caller metadata recorded with each submission."""

    ip: str = ""
    user_agent: str = ""


class ChatContext(CamelModel):
    """Chatbot conversation identifiers attached to a submission."""

    chat_id: Optional[str] = None
    session_id: Optional[str] = None
    chatflow_id: Optional[str] = None


# Students


class Enrolment(CamelModel):
    """A single subject enrolment."""

    subject: str
    country: str
    exam_body: str
    level: str
    books: List[str] = Field(default_factory=list)
    exam_dates: List[str] = Field(default_factory=list)
    chatflow_id: Optional[str] = None

    @field_validator("subject")
    @classmethod
    def validate_subject(cls, v: str) -> str:
        return _required(v, "Subject")

    @field_validator("country")
    @classmethod
    def validate_country(cls, v: str) -> str:
        return _required(v, "Country")

    @field_validator("exam_body")
    @classmethod
    def validate_exam_body(cls, v: str) -> str:
        return _required(v, "Exam body")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        return _required(v, "Level")


class Guardian(CamelModel):
    """Parent or carer contact."""

    name: str
    email: EmailStr

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> Any:
        if isinstance(v, str):
            return _required(v.strip(), "Guardian name")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v: Any) -> Any:
        if isinstance(v, str):
            return _required(v.strip(), "Guardian email")
        return v


class StudentSubmission(ChatContext):
    """Student enrolment submitted by a web form or the chatbot."""

    name: str
    nickname: str = ""
    email: EmailStr
    enrolments: List[Enrolment]
    age: Optional[int] = Field(default=None, ge=4, le=25, strict=True)
    guardian: Guardian
    preferred_colour_for_dyslexia: str = ""

    @model_validator(mode="before")
    @classmethod
    def reshape_guardian(cls, data: Any) -> Any:
        return reshape_legacy_guardian(data)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _required(v, "Name")

    @field_validator("enrolments")
    @classmethod
    def validate_enrolments(cls, v: List[Enrolment]) -> List[Enrolment]:
        if not v:
            raise PydanticCustomError("too_short", "At least one subject is required")
        return v

    @field_validator("guardian")
    @classmethod
    def validate_guardian_differs(cls, v: Guardian, info: ValidationInfo) -> Guardian:
        student_email = info.data.get("email")
        if student_email and v.email.strip().lower() == student_email.strip().lower():
            raise PydanticCustomError(
                "guardian_email_conflict",
                "Guardian email must be different from student email.",
            )
        return v


class StudentWebhook(CamelModel):
    """Flowise envelope around a student submission."""

    id: Optional[str] = None
    payload: StudentSubmission


class EmailLookupRequest(CamelModel):
    """Body of the verify-email endpoints."""

    email: Optional[str] = None


# Issues


class IssueSubmission(ChatContext):
    """Issue report submitted manually."""

    title: str
    description: Optional[str] = None
    date: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    node_id: Optional[str] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _required(v, "Title")


class IssueWebhookPayload(ChatContext):
    """Issue report fields sent by Flowise; everything is optional."""

    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    node_id: Optional[str] = None

    def to_submission(self) -> IssueSubmission:
        """Fill the defaults the chatbot may omit."""
        data = self.model_dump()
        data["title"] = self.title if self.title is not None else "Issue"
        data["description"] = self.description if self.description is not None else ""
        return IssueSubmission.model_construct(**data)


class IssueWebhook(CamelModel):
    """Flowise envelope around an issue report."""

    id: Optional[str] = None
    payload: IssueWebhookPayload


# Summary reports


class SummaryReportFields(CamelModel):
    """Content of a tutoring session summary."""

    title: str
    date: str
    participants: str
    scope_covered: str
    key_learnings: str
    misconceptions_clarified: Optional[str] = None
    student_strengths: Optional[str] = None
    gaps_next_priorities: Optional[str] = None
    suggested_next_steps: Optional[str] = None
    questions: Optional[str] = None
    sources: Optional[str] = None
    compact_recap: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None

    @field_validator("title", "date", "participants", "scope_covered", "key_learnings")
    @classmethod
    def validate_required_text(cls, v: str, info: ValidationInfo) -> str:
        return _required(v, to_camel(info.field_name))


class SummaryReportSubmission(SummaryReportFields, ChatContext):
    """Summary report fields merged with the chat context."""


class SummaryReportWebhook(CamelModel):
    """Flowise envelope around a summary report."""

    id: Optional[str] = None
    payload: SummaryReportSubmission


# Flowise tools


class SendEmailRequest(CamelModel):
    """Ad hoc email requested by a chatbot tool."""

    to: EmailStr
    subject: str = Field(..., min_length=1)
    html: str = Field(..., min_length=1)


class FlowiseEvent(CamelModel):
    """Generic Flowise event captured for later inspection."""

    type: str
    run_id: Optional[str] = None
    payload: Any = None


# Responses


class WebhookAck(BaseModel):
    """Acknowledgement returned to the chatbot."""

    received: bool = True
    id: str


class SendResult(CamelModel):
    """Outcome of an email send attempt."""

    success: bool
    message_id: Optional[str] = None
    skipped: bool = False
    error: Optional[str] = None

    @property
    def status(self) -> DeliveryStatus:
        if self.success:
            return DeliveryStatus.SENT
        return DeliveryStatus.SKIPPED if self.skipped else DeliveryStatus.FAILED


class SendEmailResponse(BaseModel):
    """Response of the send-email tool."""

    ok: bool = True
    result: Dict[str, Any]


class EmailStatus(BaseModel):
    """Email transport configuration summary."""

    configured: bool
    provider: str
    host: str
    port: Optional[int] = None
    user: str
    from_address: str = Field(..., serialization_alias="from")


class ErrorResponse(BaseModel):
    """Error envelope shared by every endpoint."""

    status: int
    code: str
    message: str
    details: Optional[Any] = None
