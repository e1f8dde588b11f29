"""Unit tests for run-report notification services"""

import httpx
import pytest
from datetime import date
from unittest.mock import AsyncMock, MagicMock, patch

from src.adapter.services.notification_service import (
    CompositeNotificationService,
    LoggingNotificationService,
    WebhookNotificationService,
    create_notification_service,
)
from src.app.use_cases.generation.dtos import GenerationErrorDTO, GenerationReportDTO


@pytest.fixture
def report():
    return GenerationReportDTO(
        reference_date=date(2024, 3, 1),
        total_subscriptions=2,
        due=2,
        created=1,
        failed=1,
        errors=[
            GenerationErrorDTO(
                subscription_id="sub_1",
                code="PRODUCT_UNAVAILABLE",
                reason="Product Toned Milk 1L is out of stock",
                product_id="prod_milk",
            )
        ],
    )


def mock_http_client(response=None, side_effect=None):
    client = MagicMock()
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    client.post = AsyncMock(return_value=response, side_effect=side_effect)
    return client


@pytest.mark.asyncio
class TestWebhookNotificationService:

    async def test_posts_report_payload(self, report):
        """
        Given a run report with one failure
        When it is sent to the webhook
        Then the JSON payload carries the report and its type
        """
        # Arrange
        response = MagicMock()
        response.raise_for_status = MagicMock()
        client = mock_http_client(response=response)
        service = WebhookNotificationService("https://ops.example.com/hooks/orders")

        # Act
        with patch("src.adapter.services.notification_service.httpx.AsyncClient", return_value=client):
            sent = await service.send_generation_report(report)

        # Assert
        assert sent is True
        payload = client.post.call_args.kwargs["json"]
        assert payload["type"] == "subscription_order_generation"
        assert payload["reference_date"] == "2024-03-01"
        assert payload["errors"][0]["product_id"] == "prod_milk"

    async def test_http_error_returns_false(self, report):
        client = mock_http_client(side_effect=httpx.ConnectError("refused"))
        service = WebhookNotificationService("https://ops.example.com/hooks/orders")

        with patch("src.adapter.services.notification_service.httpx.AsyncClient", return_value=client):
            sent = await service.send_generation_report(report)

        assert sent is False


@pytest.mark.asyncio
class TestCompositeNotificationService:

    async def test_succeeds_if_any_service_succeeds(self, report):
        failing = MagicMock()
        failing.send_generation_report = AsyncMock(side_effect=RuntimeError("boom"))
        service = CompositeNotificationService([failing, LoggingNotificationService()])

        assert await service.send_generation_report(report) is True

    async def test_fails_if_all_services_fail(self, report):
        failing = MagicMock()
        failing.send_generation_report = AsyncMock(return_value=False)

        assert await CompositeNotificationService([failing]).send_generation_report(report) is False


class TestCreateNotificationService:

    def test_logging_only_without_webhook(self):
        assert isinstance(create_notification_service(None), LoggingNotificationService)

    def test_composite_with_webhook(self):
        service = create_notification_service("https://ops.example.com/hooks/orders")

        assert isinstance(service, CompositeNotificationService)
        assert isinstance(service.services[1], WebhookNotificationService)
