import asyncio
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid

import aiosmtplib
import structlog

from app.channels.base import EmailChannel, OutgoingEmail
from app.config import Settings
from app.models import SendResult

logger = structlog.get_logger(__name__)

IMPLICIT_TLS_PORT = 465


class SmtpEmailChannel(EmailChannel):
    """
    Email channel using aiosmtplib.

    Port 465 connects with implicit TLS; any other port upgrades the
    connection with STARTTLS. Each attempt is bounded by EMAIL_TIMEOUT and
    the send is retried EMAIL_RETRY_ATTEMPTS times.
    """

    def __init__(self, config: Settings):
        self.smtp_host = config.SMTP_HOST
        self.smtp_port = config.SMTP_PORT
        self.smtp_user = config.SMTP_USER
        self.smtp_password = config.SMTP_PASSWORD
        self.from_email = config.smtp_from_address
        self.reply_to = config.MAIL_REPLY_TO
        self.timeout = config.EMAIL_TIMEOUT
        self.attempts = config.EMAIL_RETRY_ATTEMPTS

    def get_channel_name(self) -> str:
        return "smtp"

    def describe(self) -> dict:
        return {
            "host": self.smtp_host,
            "port": self.smtp_port,
            "user": "***configured***" if self.smtp_user else "not-set",
        }

    def _build_message(self, message: OutgoingEmail) -> MIMEMultipart:
        mime = MIMEMultipart("alternative")
        mime["Subject"] = message.subject
        mime["From"] = message.from_address or self.from_email
        mime["To"] = ", ".join(message.to)
        mime["Message-ID"] = make_msgid()
        if self.reply_to:
            mime["Reply-To"] = self.reply_to

        # Plain text first, HTML last: clients prefer the last alternative
        mime.attach(MIMEText(message.text, "plain", "utf-8"))
        mime.attach(MIMEText(message.html, "html", "utf-8"))
        return mime

    async def send(self, message: OutgoingEmail) -> SendResult:
        mime = self._build_message(message)
        # BCC recipients go on the envelope only
        recipients = [*message.to, *message.bcc]
        implicit_tls = self.smtp_port == IMPLICIT_TLS_PORT
        last_error = ""

        for attempt in range(1, self.attempts + 1):
            try:
                await aiosmtplib.send(
                    mime,
                    recipients=recipients,
                    hostname=self.smtp_host,
                    port=self.smtp_port,
                    username=self.smtp_user,
                    password=self.smtp_password,
                    use_tls=implicit_tls,
                    start_tls=not implicit_tls,
                    timeout=self.timeout,
                )
                logger.info(
                    "Email sent successfully",
                    channel=self.get_channel_name(),
                    recipients=message.to,
                    subject=message.subject,
                    attempt=attempt,
                )
                return SendResult(success=True, message_id=mime["Message-ID"])

            except aiosmtplib.SMTPException as e:
                last_error = str(e)
                logger.warning("SMTP error sending email", attempt=attempt, error=last_error)
            except asyncio.TimeoutError:
                last_error = "Timed out sending email"
                logger.warning("Timeout sending email", attempt=attempt)

        logger.error(
            "Failed to send email",
            channel=self.get_channel_name(),
            recipients=message.to,
            subject=message.subject,
            attempts=self.attempts,
            error=last_error,
        )
        return SendResult(success=False, error=last_error)
