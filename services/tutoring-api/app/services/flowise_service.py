"""Chatbot tools and raw event capture."""

from typing import Any, Dict

import structlog

from app.models import FlowiseEvent, NotificationType, SendEmailRequest, SendResult
from app.normalizers import html_to_text
from app.notifier import EmailService
from app.repositories import FlowiseEventRepository

logger = structlog.get_logger(__name__)


class FlowiseService:
    def __init__(self, repository: FlowiseEventRepository, notifier: EmailService):
        self.repository = repository
        self.notifier = notifier

    async def send_email(self, request: SendEmailRequest) -> SendResult:
        """Send an email composed by a chatbot tool."""
        result = await self.notifier.send(
            request.to,
            request.subject,
            html=request.html,
            text=html_to_text(request.html),
            notification_type=NotificationType.DIRECT,
        )
        logger.info("Tool email processed", status=result.status.value)
        return result

    async def record_event(self, event: FlowiseEvent) -> Dict[str, Any]:
        """Store a chatbot event as ``flowise:<type>``."""
        stored = await self.repository.create(
            {
                "title": f"flowise:{event.type}",
                "data": {"runId": event.run_id, "payload": event.payload},
            }
        )
        logger.info("Flowise event recorded", event_type=event.type, event_id=str(stored["_id"]))
        return stored
