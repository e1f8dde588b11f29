"""Request schemas for Order and Generation API

Pydantic models for validating incoming HTTP requests.
"""

from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field
from src.app.use_cases.orders.dtos import OrderLineDTO
from src.domain.order import OrderStatus
from src.domain.values import DeliveryAddress


class PlaceOrderRequestSchema(BaseModel):
    """
    Request schema for a one-time checkout order

    Used for POST /orders endpoint.
    """

    user_id: str = Field(..., min_length=1)

    items: List[OrderLineDTO] = Field(..., min_length=1)

    delivery_address: DeliveryAddress

    scheduled_delivery_date: Optional[date] = Field(
        default=None,
        description="Defaults to the next business day"
    )

    payment_reference: Optional[str] = Field(
        default=None,
        max_length=255,
        description="Payment gateway reference"
    )


class UpdateOrderStatusRequestSchema(BaseModel):
    """Request schema for POST /orders/{id}/status"""

    status: OrderStatus


class GenerateOrdersRequestSchema(BaseModel):
    """
    Request schema for POST /subscription-orders/generate

    An empty body generates for today in the business timezone.
    """

    reference_date: Optional[date] = Field(
        default=None,
        description="Delivery date to generate orders for"
    )


class BulkUpdateOrderStatusRequestSchema(BaseModel):
    """Request schema for POST /orders/bulk-status"""

    order_ids: List[str] = Field(..., min_length=1, max_length=200)

    status: OrderStatus
