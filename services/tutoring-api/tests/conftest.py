# Test configuration
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add parent directory (tutoring-api) to sys.path so 'app' can be imported
service_dir = Path(__file__).parent.parent
sys.path.insert(0, str(service_dir))

# Set test environment variables BEFORE importing app modules
os.environ["MONGODB_URI"] = "mongodb://localhost:27017/tutoring_test"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["API_PREFIX"] = "/api/v1"
os.environ["RESEND_API_KEY"] = ""
os.environ["MAIL_FROM"] = ""
os.environ["SMTP_HOST"] = ""
os.environ["STUDENT_ALERT_TO"] = "ops@example.com"
os.environ["ISSUE_ALERT_TO"] = "issues@example.com"

from bson import ObjectId  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app import dependencies  # noqa: E402
from app.main import app  # noqa: E402
from app.models import SendResult  # noqa: E402
from app.notifier import EmailService  # noqa: E402

FIXED_NOW = datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)


async def fake_create(document):
    """Mimic MongoRepository.create without a database."""
    return {**document, "_id": ObjectId(), "createdAt": FIXED_NOW, "updatedAt": FIXED_NOW}


def make_repository():
    repository = AsyncMock()
    repository.create.side_effect = fake_create
    repository.list_recent.return_value = []
    repository.get_by_id.return_value = None
    return repository


@pytest.fixture
def student_repository():
    repository = make_repository()
    repository.exists_by_email.return_value = False
    repository.find_by_email.return_value = None
    repository.find_by_guardian_email.return_value = []
    return repository


@pytest.fixture
def issue_repository():
    return make_repository()


@pytest.fixture
def summary_report_repository():
    repository = make_repository()
    repository.list_by_emails.return_value = []
    return repository


@pytest.fixture
def flowise_event_repository():
    return make_repository()


@pytest.fixture
def notifier():
    """EmailService double whose sends always succeed."""
    mock = MagicMock(spec=EmailService)
    sent = SendResult(success=True, message_id="msg-123")
    mock.send = AsyncMock(return_value=sent)
    mock.send_student_submission_alert = AsyncMock(return_value=sent)
    mock.send_issue_alert = AsyncMock(return_value=sent)
    mock.send_summary_report_alert = AsyncMock(return_value=sent)
    mock.get_status.return_value = {
        "configured": False,
        "provider": "none",
        "host": "",
        "port": None,
        "user": "not-set",
        "from": "",
    }
    return mock


@pytest.fixture
def client(
    student_repository,
    issue_repository,
    summary_report_repository,
    flowise_event_repository,
    notifier,
):
    """TestClient with repositories and email replaced by mocks."""
    app.dependency_overrides[dependencies.get_student_repository] = lambda: student_repository
    app.dependency_overrides[dependencies.get_issue_repository] = lambda: issue_repository
    app.dependency_overrides[dependencies.get_summary_report_repository] = (
        lambda: summary_report_repository
    )
    app.dependency_overrides[dependencies.get_flowise_event_repository] = (
        lambda: flowise_event_repository
    )
    app.dependency_overrides[dependencies.get_email_service] = lambda: notifier

    yield TestClient(app, raise_server_exceptions=False)

    app.dependency_overrides.clear()


@pytest.fixture
def student_payload():
    return {
        "name": "  Ada Lovelace ",
        "nickname": "Ada",
        "email": "Ada@Example.com",
        "age": 15,
        "guardian": {"name": " Anne Byron ", "email": " Anne@Example.com "},
        "preferredColourForDyslexia": "cream",
        "enrolments": [
            {
                "subject": " Mathematics ",
                "country": "UK ",
                "examBody": "AQA",
                "level": "GCSE",
                "books": ["Core Maths", "  ", " Practice Papers "],
                "examDates": ["2025-05-14", ""],
            }
        ],
    }


@pytest.fixture
def summary_report_payload():
    return {
        "title": "Session 4",
        "date": "2025-02-28",
        "participants": "Ada, tutor",
        "scopeCovered": "Quadratics",
        "keyLearnings": "Completing the square",
        "studentStrengths": "Persistence",
        "email": "Ada@Example.com",
    }
