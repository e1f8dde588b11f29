"""Notification Service Interface

Defines the contract for reporting order generation runs to operators.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.app.use_cases.generation.dtos import GenerationReportDTO


class NotificationService(ABC):
    """
    Abstract notification service for sending run reports

    Implementations can send notifications via:
    - Log output
    - Webhook (HTTP POST)
    """

    @abstractmethod
    async def send_generation_report(self, report: "GenerationReportDTO") -> bool:
        """
        Send a generation run report

        Args:
            report: Aggregated run outcome

        Returns:
            True if notification sent successfully, False otherwise
        """
        pass
