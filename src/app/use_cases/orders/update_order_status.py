"""UpdateOrderStatus Use Case

Moves an order (or a batch of orders) one edge along its lifecycle.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.order_repository import OrderRepository
from src.domain.errors import InvalidTransitionError
from src.domain.order import OrderStatus
from src.app.use_cases.bulk import BulkResultDTO, apply_to_each
from .dtos import (
    BulkUpdateOrderStatusCommandDTO,
    UpdateOrderStatusCommandDTO,
    OrderResponseDTO,
    to_order_response,
)

logger = logging.getLogger(__name__)


class UpdateOrderStatus:
    """
    Use Case: Update order status

    Business Rules:
    1. Only edges in the order transition table are allowed
       (pending -> confirmed -> out_for_delivery -> delivered,
       pending/confirmed -> cancelled)
    2. delivered_at is stamped on entry to DELIVERED
    3. Illegal transitions write nothing (INVALID_TRANSITION)
    """

    def __init__(self, uow: UnitOfWork, order_repo: OrderRepository):
        self.uow = uow
        self.order_repo = order_repo

    async def execute(self, command: UpdateOrderStatusCommandDTO) -> Result[OrderResponseDTO]:
        """
        Execute status update

        Args:
            command: UpdateOrderStatusCommandDTO with order_id and target status

        Returns:
            Result[OrderResponseDTO]: Updated order or error

        Errors:
            ORDER_NOT_FOUND: No order with that id
            INVALID_TRANSITION: Target not reachable from current status
        """
        try:
            order = await self.order_repo.get_by_id(command.order_id)
            if order is None:
                return Return.err(
                    Error(
                        code="ORDER_NOT_FOUND",
                        message=f"Order {command.order_id} not found",
                    )
                )

            previous = OrderStatus(order.status)
            order.transition_to(command.status)

            updated = await self.order_repo.update(order)
            await self.uow.commit()

            logger.info(
                f"Order {updated.order_number}: {previous.value} -> {command.status.value}"
            )
            return Return.ok(to_order_response(updated))

        except InvalidTransitionError as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="INVALID_TRANSITION",
                    message=f"Cannot move order {command.order_id} to {command.status.value}",
                    reason=str(e),
                )
            )
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="ORDER_UPDATE_FAILED",
                    message=f"Failed to update order {command.order_id}",
                    reason=str(e),
                )
            )


class BulkUpdateOrderStatus:
    """
    Use Case: Move many orders to the same status (e.g., dispatch a route)

    Each order goes through UpdateOrderStatus and commits on its own;
    orders that cannot make the move are reported individually.
    """

    def __init__(self, uow: UnitOfWork, order_repo: OrderRepository):
        self.update = UpdateOrderStatus(uow, order_repo)

    async def execute(self, command: BulkUpdateOrderStatusCommandDTO) -> BulkResultDTO:
        async def move(order_id: str) -> Result[OrderResponseDTO]:
            return await self.update.execute(
                UpdateOrderStatusCommandDTO(order_id=order_id, status=command.status)
            )

        return await apply_to_each(command.order_ids, move, f"move orders to {command.status.value}")
