"""
Email notifications for new submissions.

The EmailService picks one delivery channel at startup (Resend when an API
key and sender are configured, SMTP otherwise) and renders the operational
alerts sent whenever a student, issue or summary report is stored.
"""

from typing import Callable, List, Optional, Sequence, Union

import structlog

from app.channels import EmailChannel, OutgoingEmail, ResendEmailChannel, SmtpEmailChannel
from app.config import Settings, settings
from app.email_templates import (RenderedEmail, nl2br, render_issue_alert,
                                 render_student_submission, render_summary_report)
from app.metrics import MetricsTracker, record_email_sent
from app.models import (EmailStatus, IssueSubmission, NotificationType, SendResult,
                        StudentSubmission, SubmissionSource, SummaryReportSubmission)
from app.normalizers import html_to_text

logger = structlog.get_logger(__name__)

NOT_CONFIGURED_ERROR = "Email service not configured"
MISSING_FIELDS_ERROR = "Missing required email fields: to, subject, content"
NO_RECIPIENT_ERROR = "No recipient configured"


def _split_addresses(value: Union[str, Sequence[str], None]) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [address.strip() for address in value if address and address.strip()]


def select_channel(config: Settings) -> Optional[EmailChannel]:
    """Return the configured delivery channel, or None when email is disabled."""
    if config.resend_configured:
        return ResendEmailChannel(config)
    if config.smtp_configured:
        return SmtpEmailChannel(config)
    return None


class EmailService:
    """Sends direct emails and submission alerts through the active channel."""

    def __init__(self, config: Settings = settings, channel: Optional[EmailChannel] = None):
        self.config = config
        self.channel = channel if channel is not None else select_channel(config)

        if self.channel is None:
            logger.warning("Email service not configured; notifications will be skipped")
        else:
            logger.info("Email service configured", provider=self.channel.get_channel_name())

    @property
    def configured(self) -> bool:
        return self.channel is not None

    @property
    def from_address(self) -> str:
        if self.channel is None:
            return ""
        if isinstance(self.channel, ResendEmailChannel):
            return self.config.MAIL_FROM
        return self.config.smtp_from_address

    def get_status(self) -> dict:
        """Summarize the email configuration without exposing credentials."""
        details = self.channel.describe() if self.channel else {"host": "", "port": None, "user": "not-set"}
        status = EmailStatus(
            configured=self.configured,
            provider=self.channel.get_channel_name() if self.channel else "none",
            host=details["host"],
            port=details["port"],
            user=details["user"],
            from_address=self.from_address,
        )
        return status.model_dump(by_alias=True)

    async def send(
        self,
        to: Union[str, Sequence[str], None],
        subject: Optional[str],
        html: Optional[str] = None,
        text: Optional[str] = None,
        from_address: Optional[str] = None,
        bcc: Union[str, Sequence[str], None] = None,
        notification_type: NotificationType = NotificationType.DIRECT,
    ) -> SendResult:
        """
        Send an email through the active channel.

        Args:
            to: Recipient address or list of addresses
            subject: Email subject
            html: HTML body; derived from ``text`` when omitted
            text: Plain-text body; derived from ``html`` when omitted
            from_address: Sender override
            bcc: Blind copies; defaults to MAIL_BCC
            notification_type: Label used for metrics

        Returns:
            SendResult; this method never raises for delivery problems
        """
        recipients = _split_addresses(to)

        if self.channel is None:
            logger.warning("Email service not configured, skipping email", subject=subject)
            result = SendResult(success=False, skipped=True, error=NOT_CONFIGURED_ERROR)
            record_email_sent(notification_type, result.status)
            return result

        if not recipients or not subject or not (html or text):
            logger.warning("Refusing to send incomplete email", recipients=recipients, subject=subject)
            result = SendResult(success=False, error=MISSING_FIELDS_ERROR)
            record_email_sent(notification_type, result.status)
            return result

        message = OutgoingEmail(
            to=recipients,
            subject=subject,
            html=html or f"<p>{nl2br(text)}</p>",
            text=text or html_to_text(html),
            from_address=from_address,
            bcc=_split_addresses(bcc if bcc is not None else self.config.MAIL_BCC),
        )

        with MetricsTracker(notification_type):
            try:
                result = await self.channel.send(message)
            except Exception as e:
                logger.warning(
                    "Email channel raised while sending",
                    channel=self.channel.get_channel_name(),
                    recipients=recipients,
                    error=str(e),
                    exc_info=True,
                )
                result = SendResult(success=False, error=str(e))

        record_email_sent(notification_type, result.status)
        return result

    async def _send_alert(
        self,
        notification_type: NotificationType,
        recipient: Optional[str],
        subject: str,
        render: Callable[[], RenderedEmail],
    ) -> SendResult:
        try:
            rendered = render()
            result = await self.send(
                recipient,
                subject,
                html=rendered.html,
                text=rendered.text,
                notification_type=notification_type,
            )
        except Exception as e:
            logger.warning(
                "Failed to send notification",
                notification_type=notification_type.value,
                recipient=recipient,
                error=str(e),
            )
            return SendResult(success=False, error=str(e))

        if not result.success and not result.skipped:
            logger.warning(
                "Notification was not delivered",
                notification_type=notification_type.value,
                recipient=recipient,
                error=result.error,
            )
        return result

    async def send_student_submission_alert(
        self,
        student: StudentSubmission,
        source: SubmissionSource,
        source_id: Optional[str] = None,
        to: Optional[str] = None,
        subject: Optional[str] = None,
    ) -> SendResult:
        """Notify the operations inbox about a new student."""
        recipient = to or self.config.student_alert_recipient
        if not recipient:
            logger.warning(
                "STUDENT_ALERT_TO not configured; skipping student submission alert",
                student_email=student.email,
            )
            return SendResult(success=False, skipped=True, error=NO_RECIPIENT_ERROR)

        return await self._send_alert(
            NotificationType.STUDENT_SUBMISSION,
            recipient,
            subject or f"New Student: {student.name}",
            lambda: render_student_submission(
                student,
                source.value,
                source_id,
                environment_name=self.config.ENVIRONMENT,
            ),
        )

    async def send_issue_alert(
        self,
        issue: IssueSubmission,
        source: SubmissionSource,
    ) -> SendResult:
        recipient = self.config.issue_alert_recipient
        if not recipient:
            logger.debug("No issue alert recipient configured")
            return SendResult(success=False, skipped=True, error=NO_RECIPIENT_ERROR)

        return await self._send_alert(
            NotificationType.ISSUE_ALERT,
            recipient,
            f"New Issue: {issue.title}",
            lambda: render_issue_alert(issue, source.value),
        )

    async def send_summary_report_alert(
        self,
        report: SummaryReportSubmission,
        source: SubmissionSource,
        source_id: Optional[str] = None,
    ) -> SendResult:
        recipient = self.config.summary_report_alert_recipient
        if not recipient:
            logger.debug("No summary report alert recipient configured")
            return SendResult(success=False, skipped=True, error=NO_RECIPIENT_ERROR)

        return await self._send_alert(
            NotificationType.SUMMARY_REPORT,
            recipient,
            f"Summary Report: {report.title}",
            lambda: render_summary_report(report, source.value, source_id),
        )


email_service = EmailService()
