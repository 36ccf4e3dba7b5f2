"""Tests for alert email rendering."""

from datetime import datetime, timezone

from app.email_templates import (nl2br, render_issue_alert, render_student_submission,
                                 render_summary_report)
from app.models import IssueSubmission, StudentSubmission, SummaryReportSubmission

SENT_AT = datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)


def make_student(**overrides):
    data = {
        "name": "Ada <Lovelace>",
        "email": "ada@example.com",
        "guardian": {"name": "Anne", "email": "anne@example.com"},
        "age": 15,
        "enrolments": [
            {
                "subject": "Maths",
                "country": "UK",
                "examBody": "AQA",
                "level": "GCSE",
                "books": ["Core Maths"],
                "examDates": ["2025-05-14"],
            },
            {"subject": "Physics", "country": "UK", "examBody": "OCR", "level": "A-Level"},
        ],
    }
    data.update(overrides)
    return StudentSubmission.model_validate(data)


class TestStudentSubmissionTemplate:
    """Test the new student alert."""

    def test_html_content(self):
        rendered = render_student_submission(
            make_student(), "flowise", "run-1", environment_name="production", sent_at=SENT_AT
        )

        assert "New student submission received" in rendered.html
        assert "Ada &lt;Lovelace&gt;" in rendered.html
        assert '<a href="mailto:ada@example.com">ada@example.com</a>' in rendered.html
        assert "Anne (anne@example.com)" in rendered.html
        assert "<strong>Nickname:</strong> Not provided" in rendered.html
        assert "<strong>Age:</strong> 15" in rendered.html
        assert "Chat ID" not in rendered.html
        assert "flowise (id: run-1)" in rendered.html
        assert "Maths &middot; AQA (GCSE)" in rendered.html
        assert "<li>Core Maths</li>" in rendered.html
        assert "Enrolment 2:" in rendered.html
        assert "Environment: production | Sent at 2025-03-01T09:30:00+00:00" in rendered.html

    def test_text_content(self):
        rendered = render_student_submission(
            make_student(nickname="Ada", chatId="chat-9"), "manual", sent_at=SENT_AT
        )
        lines = rendered.text.split("\n")

        assert lines[0] == "New student submission received"
        assert "Nickname: Ada" in lines
        assert "Guardian: Anne (anne@example.com)" in lines
        assert "Chat ID: chat-9" in lines
        assert "Source: manual" in lines
        assert "Enrolment 1: Maths - AQA (GCSE)" in lines
        assert "Study resources:" in lines
        assert "  - Core Maths" in lines
        assert "Planned exam dates:" in lines
        assert "Environment: development" in lines
        assert lines[-1] == "Sent at: 2025-03-01T09:30:00+00:00"
        assert "" in lines  # blank line between enrolments

    def test_preferred_colour_is_optional(self):
        rendered = render_student_submission(make_student(), "manual", sent_at=SENT_AT)

        assert "Preferred colour" not in rendered.text


class TestIssueTemplate:
    def test_only_populated_lines(self):
        issue = IssueSubmission(
            title="Crash",
            description="Line one\nLine <two>",
            email="ada@example.com",
        )

        rendered = render_issue_alert(issue, "manual")

        assert rendered.text == (
            "Source: manual\nDescription: Line one\nLine <two>\nEmail: ada@example.com"
        )
        assert rendered.html == (
            "<p>Source: manual</p>"
            "<p>Description: Line one<br />Line &lt;two&gt;</p>"
            "<p>Email: ada@example.com</p>"
        )


class TestSummaryReportTemplate:
    def test_sections(self):
        report = SummaryReportSubmission(
            title="S1",
            date="2025-01-01",
            participants="Ada",
            scope_covered="Algebra",
            key_learnings="Factoring\nExpanding",
            questions="",
        )

        rendered = render_summary_report(report, "flowise", "run-3")

        assert rendered.text.startswith("Source:\nflowise (run-3)\n\nDate:\n2025-01-01")
        assert "Questions" not in rendered.text
        assert (
            "<p><strong>Key Learnings:</strong><br />Factoring<br />Expanding</p>"
            in rendered.html
        )
        assert "<p><strong>Gaps / Next Priorities" not in rendered.html

    def test_source_without_id(self):
        report = SummaryReportSubmission(
            title="S1", date="d", participants="p", scope_covered="s", key_learnings="k"
        )

        rendered = render_summary_report(report, "manual")

        assert rendered.text.startswith("Source:\nmanual\n\n")


def test_nl2br_escapes():
    assert str(nl2br("a<b>\nc")) == "a&lt;b&gt;<br />c"
