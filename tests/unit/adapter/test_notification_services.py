"""Tests for notification service implementations"""

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from src.adapter.services.notification_service import (
    BufferedNotificationService,
    CompositeNotificationService,
    LoggingNotificationService,
    WebhookNotificationService,
    create_notification_service,
)
from src.domain.notification import Notification


def _mock_client(response=None, error=None):
    client = MagicMock()
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    if error is not None:
        client.post = AsyncMock(side_effect=error)
    else:
        client.post = AsyncMock(return_value=response)
    return client


class TestBufferedNotificationService:
    def test_drain_returns_and_clears(self):
        buffer = BufferedNotificationService()
        buffer.notify(Notification.success("saved"))
        buffer.notify(Notification.error("failed"))

        drained = buffer.drain()

        assert [n.message for n in drained] == ["saved", "failed"]
        assert buffer.drain() == []


class TestLoggingNotificationService:
    def test_logs_at_matching_level(self, caplog):
        service = LoggingNotificationService()

        with caplog.at_level(logging.INFO):
            service.notify(Notification.warning("careful"))
            service.notify(Notification.success("done"))

        levels = [record.levelno for record in caplog.records]
        assert levels == [logging.WARNING, logging.INFO]
        assert "careful" in caplog.records[0].getMessage()


class TestCompositeNotificationService:
    def test_failing_service_does_not_stop_the_others(self):
        failing = MagicMock()
        failing.notify = MagicMock(side_effect=RuntimeError("boom"))
        buffer = BufferedNotificationService()
        service = CompositeNotificationService([failing, buffer])

        service.notify(Notification.info("hello"))

        assert [n.message for n in buffer.drain()] == ["hello"]


class TestCreateNotificationService:
    def test_logging_only(self):
        assert isinstance(create_notification_service(), LoggingNotificationService)

    def test_buffer_and_webhook(self):
        buffer = BufferedNotificationService()

        service = create_notification_service("http://hooks.test/notify", buffer=buffer)

        assert isinstance(service, CompositeNotificationService)
        assert service.services[0] is buffer
        assert isinstance(service.services[-1], WebhookNotificationService)


@pytest.mark.asyncio
class TestWebhookNotificationService:
    """Test webhook delivery"""

    async def test_send_posts_json_payload(self):
        # Arrange
        response = MagicMock()
        response.raise_for_status = MagicMock()
        client = _mock_client(response=response)
        service = WebhookNotificationService("http://hooks.test/notify")

        # Act
        with patch("src.adapter.services.notification_service.httpx.AsyncClient", return_value=client):
            sent = await service.send(Notification.error("failed"))

        # Assert
        assert sent is True
        url = client.post.await_args.args[0]
        payload = client.post.await_args.kwargs["json"]
        assert url == "http://hooks.test/notify"
        assert payload["severity"] == "error"
        assert payload["message"] == "failed"

    async def test_send_reports_http_errors(self):
        client = _mock_client(error=httpx.ConnectError("refused"))
        service = WebhookNotificationService("http://hooks.test/notify")

        with patch("src.adapter.services.notification_service.httpx.AsyncClient", return_value=client):
            sent = await service.send(Notification.info("hello"))

        assert sent is False

    async def test_notify_dispatches_in_background(self):
        service = WebhookNotificationService("http://hooks.test/notify")
        service.send = AsyncMock(return_value=True)

        service.notify(Notification.info("hello"))
        await asyncio.sleep(0)

        service.send.assert_awaited_once()

    async def test_delivery_task_is_held_until_done(self):
        service = WebhookNotificationService("http://hooks.test/notify")
        service.send = AsyncMock(return_value=True)

        service.notify(Notification.info("hello"))
        assert len(service._deliveries) == 1
        await asyncio.sleep(0.01)

        assert service._deliveries == set()


class TestWebhookWithoutLoop:
    def test_notify_without_running_loop_is_skipped(self, caplog):
        service = WebhookNotificationService("http://hooks.test/notify")

        with caplog.at_level(logging.WARNING):
            service.notify(Notification.info("hello"))

        assert "not sent" in caplog.text
