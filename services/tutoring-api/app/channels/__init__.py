"""Email delivery channels."""

from app.channels.base import EmailChannel, OutgoingEmail
from app.channels.email import ResendEmailChannel
from app.channels.smtp import SmtpEmailChannel

__all__ = ["EmailChannel", "OutgoingEmail", "ResendEmailChannel", "SmtpEmailChannel"]
