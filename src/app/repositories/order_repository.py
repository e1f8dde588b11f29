"""Order Repository Interface

Defines the contract for order persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional, List
from src.domain.order import Order, OrderStatus


class OrderRepository(ABC):
    """
    Repository interface for Order persistence

    Subscription orders use a deterministic primary key derived from
    (subscription_id, scheduled_delivery_date); inserting a second order
    with the same key raises DuplicateOrderError.
    """

    @abstractmethod
    async def create(self, order: Order) -> Order:
        """
        Create a new order

        Args:
            order: Order entity to persist

        Returns:
            Created Order

        Raises:
            DuplicateOrderError: An order with the same id or the same
                (subscription_id, scheduled_delivery_date) already exists
        """
        pass

    @abstractmethod
    async def get_by_id(self, order_id: str) -> Optional[Order]:
        """
        Retrieve order by ID

        Args:
            order_id: Order ID

        Returns:
            Order if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_subscription_and_date(
        self, subscription_id: str, delivery_date: date
    ) -> Optional[Order]:
        """
        Retrieve the order generated for a subscription on a delivery date

        Idempotency lookup used before materializing a subscription order.

        Args:
            subscription_id: Source subscription ID
            delivery_date: Calendar delivery date

        Returns:
            Order if one exists, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_scheduled_date(
        self, delivery_date: date, status: Optional[OrderStatus] = None
    ) -> List[Order]:
        """
        Retrieve orders scheduled for a delivery date

        Args:
            delivery_date: Calendar delivery date
            status: Optional filter by status

        Returns:
            List of orders ordered by order number
        """
        pass

    @abstractmethod
    async def get_by_user_id(
        self, user_id: str, status: Optional[OrderStatus] = None
    ) -> List[Order]:
        """
        Retrieve a user's orders, newest first

        Args:
            user_id: Owner user ID
            status: Optional filter by status

        Returns:
            List of orders
        """
        pass

    @abstractmethod
    async def get_by_status(self, status: OrderStatus) -> List[Order]:
        """
        Retrieve all orders in a status, earliest delivery first

        Args:
            status: Order status to filter by

        Returns:
            List of orders ordered by delivery date, then order number
        """
        pass

    @abstractmethod
    async def update(self, order: Order) -> Order:
        """
        Update an existing order

        Args:
            order: Order entity with updated values

        Returns:
            Updated Order
        """
        pass

    @abstractmethod
    async def get_last_order_sequence(self, year: int) -> int:
        """
        Highest order sequence already issued for a year

        Used once per year to seed the order counter.

        Args:
            year: Calendar year

        Returns:
            Highest sequence, or 0 if no order exists for that year
        """
        pass
