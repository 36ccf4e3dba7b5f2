"""Issue report service."""

from typing import Any, Dict, List, Optional

import structlog

from app.metrics import record_submission
from app.models import ClientInfo, IssueStatus, IssueSubmission, SubmissionSource
from app.notifier import EmailService
from app.repositories import IssueRepository

logger = structlog.get_logger(__name__)

OPTIONAL_ISSUE_FIELDS = (
    ("name", "name"),
    ("email", "email"),
    ("chatId", "chat_id"),
    ("sessionId", "session_id"),
    ("chatflowId", "chatflow_id"),
    ("nodeId", "node_id"),
)


def build_issue_document(
    issue: IssueSubmission,
    source: SubmissionSource,
    client: ClientInfo,
    source_id: Optional[str] = None,
) -> Dict[str, Any]:
    document: Dict[str, Any] = {
        "source": source.value,
        "sourceId": source_id or "",
        "title": issue.title,
        "description": issue.description or "",
        "details": issue.date or "",
        "labels": [],
        "status": IssueStatus.OPEN.value,
        "client": client.model_dump(by_alias=True),
    }
    for key, attribute in OPTIONAL_ISSUE_FIELDS:
        value = getattr(issue, attribute, None)
        if value is not None:
            document[key] = value
    return document


class IssueService:
    """Issue reports raised from the web app or the chatbot."""

    def __init__(self, repository: IssueRepository, notifier: EmailService):
        self.repository = repository
        self.notifier = notifier

    async def create_issue(
        self,
        issue: IssueSubmission,
        source: SubmissionSource,
        client: ClientInfo,
        source_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Store an issue report and alert the issue inbox."""
        stored = await self.repository.create(build_issue_document(issue, source, client, source_id))

        record_submission("issue", source)
        logger.info("Issue created", issue_id=str(stored["_id"]), source=source.value)

        await self.notifier.send_issue_alert(issue, source)
        return stored

    async def list_issues(self) -> List[Dict[str, Any]]:
        return await self.repository.list_recent()

    async def get_issue(self, issue_id: str) -> Optional[Dict[str, Any]]:
        return await self.repository.get_by_id(issue_id)
