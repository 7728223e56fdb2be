"""Notification Service Interface

Defines the contract for delivering user-facing messages.
"""

from abc import ABC, abstractmethod
from src.domain.notification import Notification


class NotificationService(ABC):
    """
    Abstract sink for user-facing notifications

    Implementations can deliver notifications via:
    - Application log
    - In-memory buffer drained by the HTTP layer
    - Webhook (HTTP POST)
    """

    @abstractmethod
    def notify(self, notification: Notification) -> None:
        """
        Deliver a notification

        Must not block the event loop; slow deliveries are dispatched in
        the background by the implementation.

        Args:
            notification: Notification to deliver
        """
        pass
