"""Order API Routes

FastAPI routes for one-time checkout, order lookup and listings, and
delivery status (single and bulk).
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.error import ClientError
from src.api.schemas.order_request import (
    BulkUpdateOrderStatusRequestSchema,
    PlaceOrderRequestSchema,
    UpdateOrderStatusRequestSchema,
)
from src.app.use_cases.bulk import BulkResultDTO
from src.app.services.clock import business_today
from src.app.use_cases.orders import (
    PlaceOrder,
    GetOrder,
    ListScheduledOrders,
    ListUserOrders,
    ListOrdersByStatus,
    UpdateOrderStatus,
    BulkUpdateOrderStatus,
    PlaceOrderCommandDTO,
    UpdateOrderStatusCommandDTO,
    BulkUpdateOrderStatusCommandDTO,
    OrderResponseDTO,
    ListOrdersResponseDTO,
    ListUserOrdersResponseDTO,
    ListOrdersByStatusResponseDTO,
)
from src.adapter.repositories import (
    SqlAlchemyOrderRepository,
    SqlAlchemyOrderCounterRepository,
    SqlAlchemyProductRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session
from src.domain.order import OrderStatus

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post(
    "",
    response_model=OrderResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {
            "description": "A product is missing or out of stock",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "PRODUCT_UNAVAILABLE",
                            "message": "Order contains an unavailable product"
                        }
                    }
                }
            }
        }
    }
)
async def place_order(
    request: PlaceOrderRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Place a one-time order after payment capture.

    Totals include CGST, SGST, the platform fee and the delivery fee.

    **Returns:**
    - 201: Order created with status `pending`
    - 409: A product is unavailable
    """
    command = PlaceOrderCommandDTO(
        user_id=request.user_id,
        items=request.items,
        delivery_address=request.delivery_address,
        scheduled_delivery_date=request.scheduled_delivery_date,
        payment_reference=request.payment_reference,
    )

    use_case = PlaceOrder(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyOrderRepository(session),
        SqlAlchemyProductRepository(session),
        SqlAlchemyOrderCounterRepository(session),
        platform_fee=ApplicationConfig.PLATFORM_FEE,
        delivery_fee=ApplicationConfig.DELIVERY_FEE,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.get("", response_model=ListOrdersResponseDTO)
async def list_scheduled_orders(
    scheduled_date: Optional[date] = Query(
        default=None, description="Delivery date (default: today in the business timezone)"
    ),
    order_status: Optional[OrderStatus] = Query(default=None, alias="status"),
    session: AsyncSession = Depends(get_session)
):
    """Delivery sheet: all orders scheduled for one date"""
    use_case = ListScheduledOrders(SqlAlchemyOrderRepository(session))
    result = await use_case.execute(scheduled_date or business_today(), order_status)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.get(
    "/{order_id}",
    response_model=OrderResponseDTO,
    responses={
        404: {
            "description": "Order not found",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "ORDER_NOT_FOUND",
                            "message": "Order 9c1d... not found"
                        }
                    }
                }
            }
        }
    }
)
async def get_order(
    order_id: str,
    session: AsyncSession = Depends(get_session)
):
    use_case = GetOrder(SqlAlchemyOrderRepository(session))
    result = await use_case.execute(order_id)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.post(
    "/{order_id}/status",
    response_model=OrderResponseDTO,
    responses={
        409: {
            "description": "Status change not allowed from the current status",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVALID_TRANSITION",
                            "message": "Cannot move order 9c1d... to delivered"
                        }
                    }
                }
            }
        }
    }
)
async def update_order_status(
    order_id: str,
    request: UpdateOrderStatusRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Move an order along its lifecycle.

    pending -> confirmed -> out_for_delivery -> delivered;
    pending and confirmed orders may be cancelled.
    """
    command = UpdateOrderStatusCommandDTO(order_id=order_id, status=request.status)

    use_case = UpdateOrderStatus(SqlAlchemyUnitOfWork(session), SqlAlchemyOrderRepository(session))
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.get("/user/{user_id}", response_model=ListUserOrdersResponseDTO)
async def list_user_orders(
    user_id: str,
    order_status: Optional[OrderStatus] = Query(default=None, alias="status"),
    session: AsyncSession = Depends(get_session)
):
    """A customer's order history, newest first"""
    use_case = ListUserOrders(SqlAlchemyOrderRepository(session))
    result = await use_case.execute(user_id, order_status)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.get("/by-status/{order_status}", response_model=ListOrdersByStatusResponseDTO)
async def list_orders_by_status(
    order_status: OrderStatus,
    session: AsyncSession = Depends(get_session)
):
    """Admin queue: all orders in one status, earliest delivery first"""
    use_case = ListOrdersByStatus(SqlAlchemyOrderRepository(session))
    result = await use_case.execute(order_status)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.post("/bulk-status", response_model=BulkResultDTO)
async def bulk_update_order_status(
    request: BulkUpdateOrderStatusRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Move many orders to the same status.

    Always 200; orders that cannot make the move are listed under `failed`.
    """
    command = BulkUpdateOrderStatusCommandDTO(order_ids=request.order_ids, status=request.status)

    use_case = BulkUpdateOrderStatus(SqlAlchemyUnitOfWork(session), SqlAlchemyOrderRepository(session))
    return await use_case.execute(command)
