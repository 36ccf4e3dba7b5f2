import asyncio
from typing import Any, Dict, Optional

import resend
import structlog

from app.channels.base import EmailChannel, OutgoingEmail
from app.config import Settings
from app.models import SendResult

logger = structlog.get_logger(__name__)

RESEND_HOST = "api.resend.com"


class ResendEmailChannel(EmailChannel):
    """Email channel using the Resend API."""

    def __init__(self, config: Settings):
        resend.api_key = config.RESEND_API_KEY
        self.from_email = config.MAIL_FROM
        self.reply_to = config.MAIL_REPLY_TO
        self.tag_category = config.MAIL_TAG_CATEGORY

    def get_channel_name(self) -> str:
        return "resend"

    def describe(self) -> dict:
        return {"host": RESEND_HOST, "port": 443, "user": "***configured***"}

    def _build_params(self, message: OutgoingEmail) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "from": message.from_address or self.from_email,
            "to": message.to,
            "subject": message.subject,
            "html": message.html,
            "text": message.text,
        }
        if self.reply_to:
            params["reply_to"] = self.reply_to
        if message.bcc:
            params["bcc"] = message.bcc
        if self.tag_category:
            params["tags"] = [{"name": "category", "value": self.tag_category}]
        return params

    async def send(self, message: OutgoingEmail) -> SendResult:
        """
        Send an email through Resend.

        Args:
            message: Rendered email

        Returns:
            SendResult carrying the Resend message id on success
        """
        try:
            response = await asyncio.to_thread(resend.Emails.send, self._build_params(message))
            message_id: Optional[str] = response.get("id") if response else None

            logger.info(
                "Email sent successfully",
                channel=self.get_channel_name(),
                recipients=message.to,
                subject=message.subject,
                message_id=message_id,
            )
            return SendResult(success=True, message_id=message_id)

        except Exception as e:
            logger.error(
                "Failed to send email",
                channel=self.get_channel_name(),
                recipients=message.to,
                subject=message.subject,
                error=str(e),
            )
            return SendResult(success=False, error=str(e))
