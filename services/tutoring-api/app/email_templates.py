"""
Email bodies for operational alerts.

HTML bodies are rendered with jinja2 (autoescaped); plain-text twins are
assembled line by line so blank values drop out cleanly.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

from jinja2 import Environment
from markupsafe import Markup, escape

from app.models import IssueSubmission, StudentSubmission, SummaryReportSubmission

NOT_PROVIDED = "Not provided"


def nl2br(value: object) -> Markup:
    """Escape a value and turn newlines into ``<br />``."""
    return Markup("<br />").join(escape(str(value)).split("\n"))


environment = Environment(autoescape=True, trim_blocks=True, lstrip_blocks=True)
environment.filters["nl2br"] = nl2br


@dataclass
class RenderedEmail:
    """Subject-less email content."""

    html: str
    text: str


STUDENT_SUBMISSION_TEMPLATE = environment.from_string(
    """
<div style="font-family: Arial, sans-serif; max-width: 640px; margin: 0 auto;">
  <h1 style="font-size: 20px;">New student submission received</h1>
  <p><strong>Name:</strong> {{ name }}</p>
  <p><strong>Nickname:</strong> {{ nickname }}</p>
  <p><strong>Email:</strong> <a href="mailto:{{ email }}">{{ email }}</a></p>
  <p><strong>Guardian:</strong> {{ guardian_name }} ({{ guardian_email }})</p>
  {% for label, value in meta %}
  <p><strong>{{ label }}:</strong> {{ value }}</p>
  {% endfor %}
  <p><strong>Source:</strong> {{ source }}{% if source_id %} (id: {{ source_id }}){% endif %}</p>
  <hr style="margin: 24px 0;" />
  {% for enrolment in enrolments %}
  <section style="margin-bottom: 20px;">
    <p><strong>Enrolment {{ loop.index }}:</strong><br />{{ enrolment.subject }} &middot; {{ enrolment.exam_body }} ({{ enrolment.level }})</p>
    {% if enrolment.books %}
    <p><strong>Study resources:</strong></p><ul>{% for book in enrolment.books %}<li>{{ book }}</li>{% endfor %}</ul>
    {% endif %}
    {% if enrolment.exam_dates %}
    <p><strong>Planned exam dates:</strong></p><ul>{% for exam_date in enrolment.exam_dates %}<li>{{ exam_date }}</li>{% endfor %}</ul>
    {% endif %}
  </section>
  {% endfor %}
  <hr style="margin: 24px 0;" />
  <p style="font-size: 12px; color: #555;">
    Environment: {{ environment }} | Sent at {{ sent_at }}
  </p>
</div>
"""
)

LINES_TEMPLATE = environment.from_string(
    "{% for line in lines %}<p>{{ line | nl2br }}</p>{% endfor %}"
)

SECTIONS_TEMPLATE = environment.from_string(
    "{% for label, value in sections %}"
    "<p><strong>{{ label }}:</strong><br />{{ value | nl2br }}</p>"
    "{% endfor %}"
)


def _format_list_text(label: str, items: Sequence[str]) -> str:
    if not items:
        return ""
    content = "\n".join(f"  - {item}" for item in items)
    return f"{label}:\n{content}"


def _student_meta(student: StudentSubmission) -> List[Tuple[str, str]]:
    meta = [
        ("Age", str(student.age) if student.age is not None else ""),
        ("Preferred colour", (student.preferred_colour_for_dyslexia or "").strip()),
        ("Chat ID", student.chat_id or ""),
        ("Session ID", student.session_id or ""),
        ("Chatflow ID", student.chatflow_id or ""),
    ]
    return [(label, value) for label, value in meta if value]


def render_student_submission(
    student: StudentSubmission,
    source: str,
    source_id: Optional[str] = None,
    environment_name: str = "development",
    sent_at: Optional[datetime] = None,
) -> RenderedEmail:
    """Render the new-student alert sent to the operations inbox."""
    sent_at = sent_at or datetime.now(timezone.utc)
    timestamp = sent_at.isoformat()
    guardian_name = (student.guardian.name or "").strip() or NOT_PROVIDED
    guardian_email = (student.guardian.email or "").strip() or NOT_PROVIDED
    nickname = (student.nickname or "").strip() or NOT_PROVIDED
    meta = _student_meta(student)

    html = STUDENT_SUBMISSION_TEMPLATE.render(
        name=student.name,
        nickname=nickname,
        email=student.email,
        guardian_name=guardian_name,
        guardian_email=guardian_email,
        meta=meta,
        source=source,
        source_id=source_id,
        enrolments=student.enrolments,
        environment=environment_name,
        sent_at=timestamp,
    )

    enrolments_text = "\n\n".join(
        "\n".join(
            part
            for part in (
                f"Enrolment {index}: {enrolment.subject} - {enrolment.exam_body} ({enrolment.level})",
                _format_list_text("Study resources", enrolment.books),
                _format_list_text("Planned exam dates", enrolment.exam_dates),
            )
            if part
        )
        for index, enrolment in enumerate(student.enrolments, start=1)
    )
    source_suffix = f" (id: {source_id})" if source_id else ""

    text_sections = [
        "New student submission received",
        f"Name: {student.name}",
        f"Nickname: {nickname}",
        f"Email: {student.email}",
        f"Guardian: {guardian_name} ({guardian_email})",
        "\n".join(f"{label}: {value}" for label, value in meta),
        f"Source: {source}{source_suffix}",
        enrolments_text,
        f"Environment: {environment_name}",
        f"Sent at: {timestamp}",
    ]

    return RenderedEmail(
        html=html,
        text="\n".join(section for section in text_sections if section),
    )


def render_issue_alert(issue: IssueSubmission, source: str) -> RenderedEmail:
    """Render the issue alert: one line per populated field."""
    fields = [
        ("Source", source),
        ("Description", issue.description),
        ("Date", issue.date),
        ("Name", issue.name),
        ("Email", issue.email),
        ("Chat ID", issue.chat_id),
        ("Session ID", issue.session_id),
        ("Chatflow ID", issue.chatflow_id),
        ("Node ID", issue.node_id),
    ]
    lines = [f"{label}: {value}" for label, value in fields if value]

    return RenderedEmail(html=LINES_TEMPLATE.render(lines=lines), text="\n".join(lines))


def render_summary_report(
    report: SummaryReportSubmission, source: str, source_id: Optional[str] = None
) -> RenderedEmail:
    """Render the summary report alert, skipping empty sections."""
    sections = [
        ("Source", f"{source} ({source_id})" if source_id else source),
        ("Date", report.date),
        ("Participants", report.participants),
        ("Scope Covered", report.scope_covered),
        ("Key Learnings", report.key_learnings),
        ("Misconceptions Clarified", report.misconceptions_clarified),
        ("Student Strengths", report.student_strengths),
        ("Gaps / Next Priorities", report.gaps_next_priorities),
        ("Suggested Next Steps", report.suggested_next_steps),
        ("Questions", report.questions),
        ("Sources", report.sources),
        ("Compact Recap", report.compact_recap),
        ("Name", report.name),
        ("Email", report.email),
        ("Chat ID", report.chat_id),
        ("Session ID", report.session_id),
        ("Chatflow ID", report.chatflow_id),
    ]
    populated = [(label, value) for label, value in sections if value]

    return RenderedEmail(
        html=SECTIONS_TEMPLATE.render(sections=populated),
        text="\n\n".join(f"{label}:\n{value}" for label, value in populated),
    )
