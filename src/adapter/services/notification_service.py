"""Notification Service Implementations

Provides concrete sinks for user-facing notifications.
"""

import asyncio
import logging
from typing import List, Optional, Set
import httpx
from src.app.services.notification_service import NotificationService
from src.domain.notification import Notification, Severity

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    Severity.SUCCESS: logging.INFO,
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


class LoggingNotificationService(NotificationService):
    """
    Notification service that logs notifications

    Useful for development and testing, or as a fallback.
    """

    def notify(self, notification: Notification) -> None:
        logger.log(
            _LOG_LEVELS[notification.severity],
            f"[{notification.severity.value.upper()}] {notification.title}: {notification.message}",
        )


class BufferedNotificationService(NotificationService):
    """
    Notification service that keeps notifications in memory

    The HTTP layer drains the buffer after each command and returns the
    notifications with the editor state.
    """

    def __init__(self):
        self._pending: List[Notification] = []

    def notify(self, notification: Notification) -> None:
        self._pending.append(notification)

    def drain(self) -> List[Notification]:
        """Return and forget every buffered notification"""
        drained, self._pending = self._pending, []
        return drained


class WebhookNotificationService(NotificationService):
    """
    Notification service that forwards notifications via HTTP webhook

    Sends JSON payload to configured webhook URL. Delivery runs as a task on
    the running event loop so notify never blocks the caller.
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        """
        Initialize webhook notification service

        Args:
            webhook_url: URL to POST notifications to
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout
        self._deliveries: Set[asyncio.Task] = set()

    def notify(self, notification: Notification) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(
                f"No running event loop; webhook notification '{notification.message}' not sent"
            )
            return
        task = loop.create_task(self.send(notification))
        self._deliveries.add(task)
        task.add_done_callback(self._deliveries.discard)

    async def send(self, notification: Notification) -> bool:
        """
        Send notification via webhook

        Args:
            notification: Notification to deliver

        Returns:
            True if webhook call succeeded, False otherwise
        """
        payload = {
            "type": "quote_line_notification",
            "severity": notification.severity.value,
            "title": notification.title,
            "message": notification.message,
            "created_at": notification.created_at.isoformat(),
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                logger.info(f"Webhook notification sent to {self.webhook_url}")
                return True
        except httpx.HTTPError as e:
            logger.error(f"Failed to send webhook notification to {self.webhook_url}: {e}")
            return False


class CompositeNotificationService(NotificationService):
    """
    Notification service that delegates to multiple services

    Useful for sending to multiple channels (e.g., buffer + log + webhook).
    """

    def __init__(self, services: List[NotificationService]):
        """
        Initialize composite notification service

        Args:
            services: List of notification services to delegate to
        """
        self.services = services

    def notify(self, notification: Notification) -> None:
        for service in self.services:
            try:
                service.notify(notification)
            except Exception as e:
                logger.error(f"Notification service {type(service).__name__} failed: {e}")


def create_notification_service(
    webhook_url: Optional[str] = None,
    buffer: Optional[BufferedNotificationService] = None,
) -> NotificationService:
    """
    Factory function to create appropriate notification service

    Args:
        webhook_url: Optional webhook URL. If provided, notifications are
                     also forwarded to it.
        buffer: Optional buffer the HTTP layer drains after each command

    Returns:
        Configured NotificationService
    """
    services: List[NotificationService] = []
    if buffer is not None:
        services.append(buffer)
    services.append(LoggingNotificationService())

    if webhook_url:
        services.append(WebhookNotificationService(webhook_url))

    if len(services) == 1:
        return services[0]

    return CompositeNotificationService(services)
