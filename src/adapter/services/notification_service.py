"""Notification Service Implementations

Provides concrete implementations for reporting order generation runs.
"""

import logging
from typing import Optional
import httpx
from src.app.services.notification_service import NotificationService
from src.app.use_cases.generation.dtos import GenerationReportDTO

logger = logging.getLogger(__name__)

# Errors included in the log line; the full list goes to the webhook
LOGGED_ERROR_LIMIT = 3


class LoggingNotificationService(NotificationService):
    """
    Notification service that logs run reports

    Useful for development and testing, or as a fallback.
    """

    async def send_generation_report(self, report: GenerationReportDTO) -> bool:
        """
        Log run report

        Args:
            report: GenerationReportDTO to report

        Returns:
            Always True (logging never fails)
        """
        log = logger.warning if report.failed else logger.info
        log(
            f"[ORDER GENERATION] Date: {report.reference_date.isoformat()}, "
            f"Created: {report.created}, Skipped: {report.skipped}, "
            f"Failed: {report.failed}, Completed: {report.completed}, "
            f"Resumed: {report.resumed}"
        )
        for error in report.errors[:LOGGED_ERROR_LIMIT]:
            logger.warning(
                f"[ORDER GENERATION] Subscription {error.subscription_id}: "
                f"{error.code} - {error.reason}"
            )
        return True


class WebhookNotificationService(NotificationService):
    """
    Notification service that sends run reports via HTTP webhook

    Sends JSON payload to configured webhook URL.
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        """
        Initialize webhook notification service

        Args:
            webhook_url: URL to POST reports to
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def send_generation_report(self, report: GenerationReportDTO) -> bool:
        """
        Send run report via webhook

        Args:
            report: GenerationReportDTO to report

        Returns:
            True if webhook call succeeded, False otherwise
        """
        payload = {
            "type": "subscription_order_generation",
            **report.model_dump(mode="json"),
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                logger.info(
                    f"Webhook notification sent for generation run "
                    f"{report.reference_date.isoformat()} to {self.webhook_url}"
                )
                return True
        except httpx.HTTPError as e:
            logger.error(
                f"Failed to send webhook notification for generation run "
                f"{report.reference_date.isoformat()}: {e}"
            )
            return False
        except Exception as e:
            logger.error(
                f"Unexpected error sending webhook notification for generation run "
                f"{report.reference_date.isoformat()}: {e}"
            )
            return False


class CompositeNotificationService(NotificationService):
    """
    Notification service that delegates to multiple services

    Useful for sending to multiple channels (e.g., log + webhook).
    """

    def __init__(self, services: list[NotificationService]):
        self.services = services

    async def send_generation_report(self, report: GenerationReportDTO) -> bool:
        """
        Send run report to all configured services

        Returns:
            True if at least one service succeeded, False otherwise
        """
        success = False
        for service in self.services:
            try:
                if await service.send_generation_report(report):
                    success = True
            except Exception as e:
                logger.error(f"Notification service {type(service).__name__} failed: {e}")
        return success


def create_notification_service(webhook_url: Optional[str] = None) -> NotificationService:
    """
    Factory function to create appropriate notification service

    Args:
        webhook_url: Optional webhook URL. If provided, creates composite
                     service with logging + webhook. Otherwise, just logging.

    Returns:
        Configured NotificationService
    """
    services: list[NotificationService] = [LoggingNotificationService()]

    if webhook_url:
        services.append(WebhookNotificationService(webhook_url))

    if len(services) == 1:
        return services[0]

    return CompositeNotificationService(services)
