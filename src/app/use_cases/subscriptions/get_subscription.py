"""Subscription query use cases"""

from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.subscription import SubscriptionStatus
from .dtos import (
    ListSubscriptionsResponseDTO,
    SubscriptionResponseDTO,
    to_subscription_response,
)


class GetSubscription:
    """Read-only lookup of a single subscription"""

    def __init__(self, subscription_repo: SubscriptionRepository):
        self.subscription_repo = subscription_repo

    async def execute(self, subscription_id: str) -> Result[SubscriptionResponseDTO]:
        subscription = await self.subscription_repo.get_by_id(subscription_id)

        if not subscription:
            return Return.err(
                Error(
                    code="SUBSCRIPTION_NOT_FOUND",
                    message=f"Subscription {subscription_id} not found",
                )
            )

        return Return.ok(to_subscription_response(subscription))


class ListUserSubscriptions:
    """
    List User Subscriptions Use Case

    A customer's subscriptions, newest first, optionally filtered by status.
    """

    def __init__(self, subscription_repo: SubscriptionRepository):
        self.subscription_repo = subscription_repo

    async def execute(
        self, user_id: str, status: Optional[SubscriptionStatus] = None
    ) -> Result[ListSubscriptionsResponseDTO]:
        try:
            subscriptions = await self.subscription_repo.get_by_user_id(user_id)
        except Exception as e:
            return Return.err(
                Error(
                    code="REPOSITORY_UNAVAILABLE",
                    message="Failed to list subscriptions",
                    reason=str(e),
                )
            )

        if status is not None:
            subscriptions = [s for s in subscriptions if SubscriptionStatus(s.status) == status]

        items = [to_subscription_response(s) for s in subscriptions]
        return Return.ok(
            ListSubscriptionsResponseDTO(user_id=user_id, subscriptions=items, total_count=len(items))
        )
