from abc import ABC, abstractmethod


class EmailDeliveryError(Exception):
    """Raised when an email could not be handed to the mail server"""


class IEmailSender(ABC):
    """Outgoing email capability"""

    @abstractmethod
    async def send(self, to: str, subject: str, body: str) -> None:
        """Send an HTML email, raising EmailDeliveryError on failure"""
        pass

    async def close(self) -> None:
        """Release resources held by the sender"""
        return None
