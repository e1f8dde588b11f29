"""Subscription lifecycle use cases

Admin acceptance (one or many) plus customer pause/resume/cancel.
Every change goes through the entity's state machine; illegal edges are
reported as INVALID_TRANSITION and nothing is written.
"""

import logging
from typing import Callable, List
from libs.result import Result, Return, Error
from src.app.services.clock import business_today
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.bulk import BulkResultDTO, apply_to_each
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.errors import InvalidTransitionError, InvalidPauseWindowError
from src.domain.subscription import Subscription, SubscriptionStatus
from .dtos import PauseSubscriptionCommandDTO, SubscriptionResponseDTO, to_subscription_response

logger = logging.getLogger(__name__)


class _SubscriptionTransition:
    """Load, mutate through the entity, persist, commit"""

    action = "update"

    def __init__(self, uow: UnitOfWork, subscription_repo: SubscriptionRepository):
        self.uow = uow
        self.subscription_repo = subscription_repo

    async def _run(
        self, subscription_id: str, mutate: Callable[[Subscription], None]
    ) -> Result[SubscriptionResponseDTO]:
        try:
            subscription = await self.subscription_repo.get_by_id(subscription_id)
            if subscription is None:
                return Return.err(
                    Error(
                        code="SUBSCRIPTION_NOT_FOUND",
                        message=f"Subscription {subscription_id} not found",
                    )
                )

            previous = subscription.status
            mutate(subscription)

            updated = await self.subscription_repo.update(subscription)
            await self.uow.commit()

            logger.info(
                f"Subscription {subscription_id}: {self.action} "
                f"({SubscriptionStatus(previous).value} -> {SubscriptionStatus(updated.status).value})"
            )
            return Return.ok(to_subscription_response(updated))

        except InvalidTransitionError as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="INVALID_TRANSITION",
                    message=f"Cannot {self.action} subscription {subscription_id}",
                    reason=str(e),
                )
            )
        except InvalidPauseWindowError as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="INVALID_PAUSE_DATE",
                    message="Pause end date must be after tomorrow",
                    reason=str(e),
                )
            )
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="SUBSCRIPTION_UPDATE_FAILED",
                    message=f"Failed to {self.action} subscription {subscription_id}",
                    reason=str(e),
                )
            )


class AcceptSubscription(_SubscriptionTransition):
    """
    Use Case: Admin accepts a pending subscription (PENDING -> ACTIVE)
    """

    action = "accept"

    async def execute(self, subscription_id: str) -> Result[SubscriptionResponseDTO]:
        return await self._run(subscription_id, lambda subscription: subscription.activate())


class PauseSubscription(_SubscriptionTransition):
    """
    Use Case: Pause deliveries until a future date (ACTIVE -> PAUSED)

    Business Rules:
    1. paused_until must be strictly after tomorrow, so tomorrow's
       already-planned delivery is never cancelled by a late pause
    2. The subscription resumes automatically on paused_until
    """

    action = "pause"

    async def execute(self, command: PauseSubscriptionCommandDTO) -> Result[SubscriptionResponseDTO]:
        """
        Execute pause

        Args:
            command: PauseSubscriptionCommandDTO

        Returns:
            Result[SubscriptionResponseDTO]: Paused subscription or error

        Errors:
            SUBSCRIPTION_NOT_FOUND, INVALID_TRANSITION, INVALID_PAUSE_DATE
        """
        requested_on = command.requested_on or business_today()
        return await self._run(
            command.subscription_id,
            lambda subscription: subscription.pause(command.paused_until, requested_on),
        )


class ResumeSubscription(_SubscriptionTransition):
    """
    Use Case: Manually resume a paused subscription (PAUSED -> ACTIVE)
    """

    action = "resume"

    async def execute(self, subscription_id: str) -> Result[SubscriptionResponseDTO]:
        return await self._run(subscription_id, lambda subscription: subscription.resume())


class CancelSubscription(_SubscriptionTransition):
    """
    Use Case: Cancel a subscription (terminal)

    Orders already generated are left untouched.
    """

    action = "cancel"

    async def execute(self, subscription_id: str) -> Result[SubscriptionResponseDTO]:
        return await self._run(subscription_id, lambda subscription: subscription.cancel())


class BulkAcceptSubscriptions:
    """
    Use Case: Admin accepts many pending subscriptions at once

    Each id goes through AcceptSubscription and commits on its own, so a
    missing or non-pending subscription is reported without affecting
    the rest.
    """

    def __init__(self, uow: UnitOfWork, subscription_repo: SubscriptionRepository):
        self.accept = AcceptSubscription(uow, subscription_repo)

    async def execute(self, subscription_ids: List[str]) -> BulkResultDTO:
        return await apply_to_each(subscription_ids, self.accept.execute, "accept subscriptions")
