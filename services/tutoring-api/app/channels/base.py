from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from app.models import SendResult


@dataclass
class OutgoingEmail:
    """A fully rendered email ready to be handed to a channel."""

    to: List[str]
    subject: str
    html: str
    text: str
    from_address: Optional[str] = None
    bcc: List[str] = field(default_factory=list)


class EmailChannel(ABC):
    """Abstract base class for email delivery channels."""

    @abstractmethod
    async def send(self, message: OutgoingEmail) -> SendResult:
        """
        Deliver a message through this channel.

        Args:
            message: Rendered email

        Returns:
            SendResult describing the outcome; delivery errors are reported
            through the result rather than raised
        """
        pass

    @abstractmethod
    def get_channel_name(self) -> str:
        """Get the name of this channel."""
        pass

    def describe(self) -> dict:
        """Connection details reported by the email status endpoint."""
        return {"host": "", "port": None, "user": "not-set"}
