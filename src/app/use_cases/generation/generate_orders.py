"""GenerateSubscriptionOrders Use Case

Daily batch: auto-resume lapsed pauses, select due subscriptions,
materialize one order each, complete subscriptions that have no delivery left.
Safe to re-run for the same date any number of times.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple
from libs.result import Result, Return, Error
from src.app.services.repository_scope import RepositoryScope, ScopeFactory
from src.domain.schedule import select_due, is_expired, is_final_delivery
from src.domain.subscription import Subscription, SubscriptionStatus
from .dtos import GenerationErrorDTO, GenerationReportDTO, MaterializeOutcome
from .materialize_order import MaterializeSubscriptionOrder

logger = logging.getLogger(__name__)


@dataclass
class _SubscriptionOutcome:
    subscription_id: str
    created: bool = False
    skipped: bool = False
    completed: bool = False
    errors: List[GenerationErrorDTO] = field(default_factory=list)


class GenerateSubscriptionOrders:
    """
    Use Case: Generate subscription orders for one delivery date

    Business Rules:
    1. Failing to load the subscription set aborts the run (REPOSITORY_UNAVAILABLE)
    2. PAUSED subscriptions whose paused_until <= reference_date are resumed
       before selection; other PAUSED subscriptions are never due
    3. Each due subscription is materialized in its own repository scope;
       one failure never rolls back or aborts another
    4. At most max_concurrency subscriptions are processed at once, each
       bounded by subscription_timeout seconds
    5. A subscription whose end_date is reference_date is COMPLETED once its
       order for that date exists
    6. An ACTIVE subscription with no delivery left (end_date off-cadence or
       already passed) is COMPLETED without an order
    7. resumed and completed count only the transitions this run wrote;
       concurrent runs never both report the same one

    Flow:
    1. Load ACTIVE and PAUSED subscriptions
    2. Auto-resume lapsed pauses
    3. Select due and expired subscriptions
    4. Materialize each due one (bounded pool), then complete final
       deliveries and expired subscriptions
    5. Aggregate run report
    """

    def __init__(
        self,
        scope_factory: ScopeFactory,
        max_concurrency: int = 8,
        subscription_timeout: float = 30.0,
        product_lookup_timeout: float = 10.0,
        max_reported_errors: int = 50,
    ):
        self.scope_factory = scope_factory
        self.max_concurrency = max(1, int(max_concurrency))
        self.subscription_timeout = subscription_timeout
        self.product_lookup_timeout = product_lookup_timeout
        self.max_reported_errors = max_reported_errors

    @classmethod
    def from_config(cls, scope_factory: ScopeFactory, config) -> "GenerateSubscriptionOrders":
        """Build with the GENERATION_* / PRODUCT_LOOKUP_* limits of an ApplicationConfig"""
        return cls(
            scope_factory,
            max_concurrency=int(config.GENERATION_CONCURRENCY),
            subscription_timeout=float(config.GENERATION_SUBSCRIPTION_TIMEOUT_SECONDS),
            product_lookup_timeout=float(config.PRODUCT_LOOKUP_TIMEOUT_SECONDS),
            max_reported_errors=int(config.GENERATION_MAX_REPORTED_ERRORS),
        )

    async def execute(self, reference_date: date) -> Result[GenerationReportDTO]:
        """
        Execute order generation

        Args:
            reference_date: Delivery date to generate orders for

        Returns:
            Result[GenerationReportDTO]: Run report, or REPOSITORY_UNAVAILABLE
        """
        start_time = time.time()

        # Step 1: Load candidate subscriptions
        try:
            subscriptions = await self._load_subscriptions()
        except Exception as e:
            logger.error(f"Failed to load subscriptions for {reference_date.isoformat()}: {e}")
            return Return.err(
                Error(
                    code="REPOSITORY_UNAVAILABLE",
                    message="Failed to load subscriptions",
                    reason=str(e),
                )
            )

        logger.info(
            f"Generating subscription orders for {reference_date.isoformat()}: "
            f"{len(subscriptions)} active/paused subscriptions"
        )

        # Step 2: Auto-resume lapsed pauses
        errors: List[GenerationErrorDTO] = []
        candidates: List[Subscription] = []
        resumed = 0
        for subscription in subscriptions:
            if self._pause_lapsed(subscription, reference_date):
                subscription, was_resumed, error = await self._auto_resume(subscription)
                if was_resumed:
                    resumed += 1
                if error:
                    errors.append(error)
            if subscription is not None:
                candidates.append(subscription)

        # Step 3: Select due and expired subscriptions
        due = select_due(reference_date, candidates)
        expired = [s for s in candidates if is_expired(s, reference_date)]

        # Step 4: Materialize, then close subscriptions with no delivery left
        semaphore = asyncio.Semaphore(self.max_concurrency)
        outcomes = await asyncio.gather(
            *(self._process(subscription, reference_date, semaphore) for subscription in due)
        )
        outcomes += await asyncio.gather(
            *(self._close_expired(subscription, semaphore) for subscription in expired)
        )

        # Step 5: Aggregate
        for outcome in outcomes:
            errors.extend(outcome.errors)

        report = GenerationReportDTO(
            reference_date=reference_date,
            total_subscriptions=len(subscriptions),
            resumed=resumed,
            due=len(due),
            created=sum(1 for o in outcomes if o.created),
            skipped=sum(1 for o in outcomes if o.skipped),
            completed=sum(1 for o in outcomes if o.completed),
            failed=len(errors),
            errors=errors[: self.max_reported_errors],
            execution_time_ms=int((time.time() - start_time) * 1000),
        )

        logger.info(
            f"Subscription order generation complete for {reference_date.isoformat()}: "
            f"{report.created} created, {report.skipped} skipped, "
            f"{report.failed} failed, {report.completed} completed, "
            f"{report.execution_time_ms}ms"
        )

        return Return.ok(report)

    async def _load_subscriptions(self) -> List[Subscription]:
        async with self.scope_factory() as scope:
            active = await scope.subscription_repo.get_by_status(SubscriptionStatus.ACTIVE)
            paused = await scope.subscription_repo.get_by_status(SubscriptionStatus.PAUSED)
        return list(active) + list(paused)

    @staticmethod
    def _pause_lapsed(subscription: Subscription, reference_date: date) -> bool:
        return (
            SubscriptionStatus(subscription.status) == SubscriptionStatus.PAUSED
            and subscription.paused_until is not None
            and subscription.paused_until <= reference_date
        )

    async def _auto_resume(
        self, subscription: Subscription
    ) -> Tuple[Optional[Subscription], bool, Optional[GenerationErrorDTO]]:
        """
        Resume a paused subscription whose pause window has lapsed

        Returns:
            (current subscription or None if its state is unknown,
             whether this call resumed it, error if any)
        """
        try:
            async with self.scope_factory() as scope:
                subscription.resume()
                changed = await scope.subscription_repo.update_status_if(
                    subscription, SubscriptionStatus.PAUSED
                )
                if not changed:
                    # Resumed or cancelled by another writer
                    current = await scope.subscription_repo.get_by_id(subscription.id)
                    if current is None:
                        return None, False, GenerationErrorDTO(
                            subscription_id=subscription.id,
                            code="SUBSCRIPTION_NOT_FOUND",
                            reason="Subscription disappeared before auto-resume",
                        )
                    return current, False, None

                await scope.uow.commit()

            logger.info(f"Auto-resumed subscription {subscription.id}")
            return subscription, True, None

        except Exception as e:
            logger.error(f"Failed to auto-resume subscription {subscription.id}: {e}")
            return None, False, GenerationErrorDTO(
                subscription_id=subscription.id,
                code="AUTO_RESUME_FAILED",
                reason=str(e),
            )

    async def _process(
        self, subscription: Subscription, reference_date: date, semaphore: asyncio.Semaphore
    ) -> _SubscriptionOutcome:
        async with semaphore:
            try:
                return await asyncio.wait_for(
                    self._materialize(subscription, reference_date),
                    timeout=self.subscription_timeout,
                )
            except asyncio.TimeoutError:
                logger.error(
                    f"Order generation for subscription {subscription.id} timed out "
                    f"after {self.subscription_timeout}s"
                )
                return _SubscriptionOutcome(
                    subscription_id=subscription.id,
                    errors=[
                        GenerationErrorDTO(
                            subscription_id=subscription.id,
                            code="GENERATION_TIMEOUT",
                            reason=f"No result within {self.subscription_timeout}s",
                        )
                    ],
                )
            except Exception as e:
                logger.error(f"Unexpected error processing subscription {subscription.id}: {e}")
                return _SubscriptionOutcome(
                    subscription_id=subscription.id,
                    errors=[
                        GenerationErrorDTO(
                            subscription_id=subscription.id,
                            code="MATERIALIZE_FAILED",
                            reason=str(e),
                        )
                    ],
                )

    async def _materialize(self, subscription: Subscription, reference_date: date) -> _SubscriptionOutcome:
        outcome = _SubscriptionOutcome(subscription_id=subscription.id)

        async with self.scope_factory() as scope:
            use_case = MaterializeSubscriptionOrder(
                uow=scope.uow,
                order_repo=scope.order_repo,
                product_repo=scope.product_repo,
                order_counter_repo=scope.order_counter_repo,
                product_lookup_timeout=self.product_lookup_timeout,
            )
            result = await use_case.execute(subscription, reference_date)

            if result.is_err():
                logger.warning(
                    f"Skipping subscription {subscription.id}: "
                    f"{result.error.code} - {result.error.reason}"
                )
                outcome.errors.append(
                    GenerationErrorDTO(
                        subscription_id=subscription.id,
                        code=result.error.code,
                        reason=result.error.reason or result.error.message,
                        product_id=result.error.context.get("product_id"),
                    )
                )
                return outcome

            if result.value.outcome == MaterializeOutcome.CREATED:
                outcome.created = True
            else:
                outcome.skipped = True

            if is_final_delivery(subscription, reference_date):
                await self._complete(scope, subscription, outcome)

        return outcome

    async def _close_expired(
        self, subscription: Subscription, semaphore: asyncio.Semaphore
    ) -> _SubscriptionOutcome:
        outcome = _SubscriptionOutcome(subscription_id=subscription.id)
        async with semaphore:
            try:
                async with self.scope_factory() as scope:
                    await self._complete(scope, subscription, outcome)
            except Exception as e:
                logger.error(f"Failed to open scope for subscription {subscription.id}: {e}")
                outcome.errors.append(
                    GenerationErrorDTO(
                        subscription_id=subscription.id,
                        code="COMPLETE_FAILED",
                        reason=str(e),
                    )
                )
        return outcome

    async def _complete(
        self, scope: RepositoryScope, subscription: Subscription, outcome: _SubscriptionOutcome
    ) -> None:
        """
        ACTIVE -> COMPLETED, counted only when this run made the change

        A concurrent run that completed the subscription first leaves the
        conditional write with nothing to update.
        """
        try:
            subscription.complete()
            changed = await scope.subscription_repo.update_status_if(
                subscription, SubscriptionStatus.ACTIVE
            )
            if not changed:
                logger.info(f"Subscription {subscription.id} was already moved out of active")
                return
            await scope.uow.commit()
            outcome.completed = True
            logger.info(f"Completed subscription {subscription.id} (end date {subscription.end_date})")
        except Exception as e:
            await scope.uow.rollback()
            logger.error(f"Failed to complete subscription {subscription.id}: {e}")
            outcome.errors.append(
                GenerationErrorDTO(
                    subscription_id=subscription.id,
                    code="COMPLETE_FAILED",
                    reason=str(e),
                )
            )
