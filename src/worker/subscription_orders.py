"""Subscription Order Generation Background Worker

Materializes the day's subscription orders. Can be run as a standalone
script, from cron, or continuously (fires once per business day after
GENERATION_RUN_HOUR).
"""

import asyncio
import logging
from datetime import date
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Error
from src.adapter.services.notification_service import create_notification_service
from src.adapter.services.repository_scope import SqlAlchemyScopeFactory
from src.app.services.clock import business_now, business_today
from src.app.services.notification_service import NotificationService
from src.app.use_cases.generation import GenerateSubscriptionOrders, GenerationReportDTO

logger = logging.getLogger(__name__)


class GenerationRunFailed(Exception):
    """The run could not start (e.g., subscriptions could not be loaded)"""

    def __init__(self, error: Error):
        self.error = error
        super().__init__(f"{error.code}: {error.message} ({error.reason})")


class SubscriptionOrderWorker:
    """
    Background worker for daily subscription order generation

    Features:
    - Generates one order per due subscription for the delivery date
    - Auto-resumes lapsed pauses and completes subscriptions on end_date
    - Idempotent: safe to re-run for the same date
    - Reports runs with failures through the notification service
    - Can run once or continuously

    Usage:
        # Run for today (business timezone)
        worker = SubscriptionOrderWorker()
        report = await worker.run_once()

        # Backfill a specific date
        report = await worker.run_once(date(2024, 3, 1))

        # Run continuously (once per business day)
        await worker.run_forever()
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        webhook_url: Optional[str] = None,
        notification_service: Optional[NotificationService] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            webhook_url: Report webhook (defaults to GENERATION_NOTIFICATION_WEBHOOK)
            notification_service: Overrides the service built from webhook_url
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI

        # Create engine and session factory
        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )
        self.scope_factory = SqlAlchemyScopeFactory(self.async_session_factory)

        self.notification_service = notification_service or create_notification_service(
            webhook_url or ApplicationConfig.GENERATION_NOTIFICATION_WEBHOOK
        )

        logger.info("SubscriptionOrderWorker initialized")

    async def run_once(self, reference_date: Optional[date] = None) -> GenerationReportDTO:
        """
        Generate orders for one delivery date

        Args:
            reference_date: Delivery date (defaults to today in BUSINESS_TIMEZONE)

        Returns:
            GenerationReportDTO with run summary

        Raises:
            GenerationRunFailed: Subscriptions could not be loaded
        """
        reference_date = reference_date or business_today()
        logger.info(f"Starting subscription order generation for {reference_date.isoformat()}")

        use_case = GenerateSubscriptionOrders.from_config(self.scope_factory, ApplicationConfig)
        result = await use_case.execute(reference_date)

        if result.is_err():
            logger.error(
                f"Subscription order generation for {reference_date.isoformat()} aborted: "
                f"{result.error.code} - {result.error.reason}"
            )
            raise GenerationRunFailed(result.error)

        report = result.value
        if report.failed:
            await self.notification_service.send_generation_report(report)

        return report

    async def run_forever(self, check_interval_seconds: int = 300):
        """
        Run generation continuously, once per business day

        The run for a day fires on the first check at or after
        GENERATION_RUN_HOUR local time.

        Args:
            check_interval_seconds: Seconds between checks (default: 5 minutes)
        """
        logger.info(
            f"Starting continuous subscription order generation with "
            f"{check_interval_seconds}s interval"
        )

        last_processed_date: Optional[date] = None

        while True:
            try:
                now = business_now()
                today = now.date()

                if not ApplicationConfig.SUBSCRIPTION_GENERATION_ENABLED:
                    logger.debug("Subscription order generation disabled - skipping")
                elif now.hour >= int(ApplicationConfig.GENERATION_RUN_HOUR) and last_processed_date != today:
                    report = await self.run_once(today)
                    last_processed_date = today
                    logger.info(
                        f"Processed {today.isoformat()}: {report.created} created, "
                        f"{report.failed} failed"
                    )
                else:
                    logger.debug("Skipping generation check - before run hour or already processed")

            except Exception as e:
                logger.error(f"Generation cycle failed: {e}")

            await asyncio.sleep(check_interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("SubscriptionOrderWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Run for today
        python -m src.worker.subscription_orders

        # Run for a specific date
        python -m src.worker.subscription_orders --date 2024-03-01

        # Run continuously
        python -m src.worker.subscription_orders --continuous
    """
    import sys
    import argparse

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Subscription Order Generation Worker")
    parser.add_argument(
        "--date", type=date.fromisoformat, help="Delivery date (YYYY-MM-DD)"
    )
    parser.add_argument(
        "--continuous", action="store_true", help="Run continuously"
    )
    args = parser.parse_args()

    worker = SubscriptionOrderWorker()
    exit_code = 0

    try:
        if args.continuous:
            await worker.run_forever()
        else:
            report = await worker.run_once(args.date)
            print(f"Generation complete for {report.reference_date.isoformat()}:")
            print(f"  Subscriptions loaded: {report.total_subscriptions}")
            print(f"  Auto-resumed: {report.resumed}")
            print(f"  Due: {report.due}")
            print(f"  Created: {report.created}")
            print(f"  Skipped (already existed): {report.skipped}")
            print(f"  Completed subscriptions: {report.completed}")
            print(f"  Failed: {report.failed}")
            for error in report.errors[:3]:
                print(f"    {error.subscription_id}: {error.code} - {error.reason}")
            print(f"  Execution time: {report.execution_time_ms}ms")
    except GenerationRunFailed as e:
        print(f"Generation aborted: {e}")
        exit_code = 1
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()

    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    asyncio.run(main())
