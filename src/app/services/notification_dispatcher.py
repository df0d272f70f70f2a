from abc import ABC, abstractmethod
from typing import Any, Dict


class IEmailSender(ABC):
    """Delivers one rendered email. Implementations may raise on failure."""

    @abstractmethod
    async def send(self, to: str, subject: str, html_body: str) -> None:
        pass


class INotificationDispatcher(ABC):
    """
    Fire-and-forget email notifications.

    notify() only schedules delivery and returns immediately; callers never
    learn whether the mail relay accepted the message. Delivery failures are
    logged by the implementation and dropped.
    """

    @abstractmethod
    def notify(self, to: str, template: str, context: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    async def drain(self) -> None:
        """Wait for deliveries that are still in flight"""
        pass
