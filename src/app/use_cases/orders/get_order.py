"""Order query use cases"""

from datetime import date
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.order_repository import OrderRepository
from src.domain.order import OrderStatus
from .dtos import (
    OrderResponseDTO,
    ListOrdersResponseDTO,
    ListUserOrdersResponseDTO,
    ListOrdersByStatusResponseDTO,
    to_order_response,
)


class GetOrder:
    """Read-only lookup of a single order"""

    def __init__(self, order_repo: OrderRepository):
        self.order_repo = order_repo

    async def execute(self, order_id: str) -> Result[OrderResponseDTO]:
        order = await self.order_repo.get_by_id(order_id)

        if not order:
            return Return.err(
                Error(
                    code="ORDER_NOT_FOUND",
                    message=f"Order {order_id} not found",
                )
            )

        return Return.ok(to_order_response(order))


class ListScheduledOrders:
    """
    List Scheduled Orders Use Case

    Delivery sheet for one date: every order (one-time and subscription)
    scheduled for it, optionally filtered by status.
    """

    def __init__(self, order_repo: OrderRepository):
        self.order_repo = order_repo

    async def execute(
        self, delivery_date: date, status: Optional[OrderStatus] = None
    ) -> Result[ListOrdersResponseDTO]:
        """
        Args:
            delivery_date: Calendar delivery date
            status: Optional status filter

        Returns:
            Result[ListOrdersResponseDTO]: Orders sorted by order number
        """
        try:
            orders = await self.order_repo.get_by_scheduled_date(delivery_date, status)
        except Exception as e:
            return Return.err(
                Error(
                    code="REPOSITORY_UNAVAILABLE",
                    message="Failed to list orders",
                    reason=str(e),
                )
            )

        items = [to_order_response(order) for order in orders]
        return Return.ok(
            ListOrdersResponseDTO(
                scheduled_delivery_date=delivery_date,
                orders=items,
                total_count=len(items),
            )
        )


class ListUserOrders:
    """
    List User Orders Use Case

    A customer's order history, newest first, optionally filtered by status.
    """

    def __init__(self, order_repo: OrderRepository):
        self.order_repo = order_repo

    async def execute(
        self, user_id: str, status: Optional[OrderStatus] = None
    ) -> Result[ListUserOrdersResponseDTO]:
        try:
            orders = await self.order_repo.get_by_user_id(user_id, status)
        except Exception as e:
            return Return.err(
                Error(
                    code="REPOSITORY_UNAVAILABLE",
                    message="Failed to list orders",
                    reason=str(e),
                )
            )

        items = [to_order_response(order) for order in orders]
        return Return.ok(ListUserOrdersResponseDTO(user_id=user_id, orders=items, total_count=len(items)))


class ListOrdersByStatus:
    """Admin queue: every order in one status, earliest delivery first"""

    def __init__(self, order_repo: OrderRepository):
        self.order_repo = order_repo

    async def execute(self, status: OrderStatus) -> Result[ListOrdersByStatusResponseDTO]:
        try:
            orders = await self.order_repo.get_by_status(status)
        except Exception as e:
            return Return.err(
                Error(
                    code="REPOSITORY_UNAVAILABLE",
                    message="Failed to list orders",
                    reason=str(e),
                )
            )

        items = [to_order_response(order) for order in orders]
        return Return.ok(ListOrdersByStatusResponseDTO(status=status, orders=items, total_count=len(items)))
