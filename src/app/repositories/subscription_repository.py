"""Subscription Repository Interface

Defines the contract for subscription persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Optional, List
from src.domain.subscription import Subscription, SubscriptionStatus


class SubscriptionRepository(ABC):
    """
    Repository interface for Subscription persistence

    Writes replace the whole document (items and address included).
    """

    @abstractmethod
    async def get_by_status(self, status: SubscriptionStatus) -> List[Subscription]:
        """
        Retrieve all subscriptions in the given status

        Used by order generation to load active and paused subscriptions.

        Args:
            status: Subscription status to filter by

        Returns:
            List of subscriptions
        """
        pass

    @abstractmethod
    async def get_by_id(self, subscription_id: str) -> Optional[Subscription]:
        """
        Retrieve subscription by ID

        Args:
            subscription_id: Subscription ID

        Returns:
            Subscription if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_user_id(self, user_id: str) -> List[Subscription]:
        """
        Retrieve a user's subscriptions, newest first

        Args:
            user_id: Owner user ID

        Returns:
            List of subscriptions
        """
        pass

    @abstractmethod
    async def create(self, subscription: Subscription) -> Subscription:
        """
        Create a new subscription

        Args:
            subscription: Subscription entity to persist

        Returns:
            Created Subscription
        """
        pass

    @abstractmethod
    async def update(self, subscription: Subscription) -> Subscription:
        """
        Update an existing subscription

        Args:
            subscription: Subscription entity with updated values

        Returns:
            Updated Subscription
        """
        pass

    @abstractmethod
    async def update_status_if(
        self, subscription: Subscription, expected_status: SubscriptionStatus
    ) -> bool:
        """
        Write status, paused_until and updated_at only if the stored
        status is still expected_status

        Used by order generation so that concurrent runs agree on which
        one performed an automatic transition.

        Args:
            subscription: Subscription carrying the new status fields
            expected_status: Status the stored row must currently have

        Returns:
            True if this call changed the row, False otherwise
        """
        pass
