"""Data Transfer Objects for Order Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field
from src.domain.order import Order, OrderStatus, OrderType
from src.domain.pricing import round_money
from src.domain.values import DeliveryAddress, OrderItem


class OrderLineDTO(BaseModel):
    """Product and quantity requested at checkout"""

    product_id: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)


class PlaceOrderCommandDTO(BaseModel):
    """
    Command DTO for a one-time checkout order

    Used as input to PlaceOrder use case. Payment is captured by the
    gateway beforehand; only its reference is stored.
    """

    user_id: str = Field(..., min_length=1)

    items: List[OrderLineDTO] = Field(..., description="Cart lines (must not be empty)")

    delivery_address: DeliveryAddress

    scheduled_delivery_date: Optional[date] = Field(
        default=None,
        description="Delivery date; defaults to the next business day"
    )

    payment_reference: Optional[str] = Field(
        default=None,
        description="Payment gateway reference (e.g., pay_29QQoUBi66xm2f)"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "user_abc123",
                "items": [{"product_id": "prod_curd_500g", "quantity": 1}],
                "delivery_address": {
                    "label": "Home",
                    "street": "12 MG Road",
                    "city": "Bengaluru",
                    "state": "Karnataka",
                    "pincode": "560001",
                },
                "payment_reference": "pay_29QQoUBi66xm2f",
            }
        }


class UpdateOrderStatusCommandDTO(BaseModel):
    """Command DTO for moving an order along its lifecycle"""

    order_id: str
    status: OrderStatus


class BulkUpdateOrderStatusCommandDTO(BaseModel):
    """Command DTO for moving many orders to the same status"""

    order_ids: List[str] = Field(..., description="Orders to update (duplicates ignored)")
    status: OrderStatus


class OrderResponseDTO(BaseModel):
    """Response DTO for an order; money fields rounded to paise"""

    id: str
    order_number: str
    user_id: str
    type: OrderType
    subscription_id: Optional[str] = None
    items: List[OrderItem]
    subtotal: Decimal
    cgst: Decimal
    sgst: Decimal
    total_tax: Decimal
    platform_fee: Decimal
    delivery_fee: Decimal
    total_amount: Decimal
    status: OrderStatus
    scheduled_delivery_date: date
    delivered_at: Optional[datetime] = None
    delivery_address: DeliveryAddress
    payment_reference: Optional[str] = None
    created_at: datetime


class ListOrdersResponseDTO(BaseModel):
    scheduled_delivery_date: date
    orders: List[OrderResponseDTO]
    total_count: int


class ListUserOrdersResponseDTO(BaseModel):
    user_id: str
    orders: List[OrderResponseDTO]
    total_count: int


class ListOrdersByStatusResponseDTO(BaseModel):
    status: OrderStatus
    orders: List[OrderResponseDTO]
    total_count: int


def to_order_response(order: Order) -> OrderResponseDTO:
    return OrderResponseDTO(
        id=order.id,
        order_number=order.order_number,
        user_id=order.user_id,
        type=order.type,
        subscription_id=order.subscription_id,
        items=order.line_items(),
        subtotal=round_money(order.subtotal),
        cgst=round_money(order.cgst),
        sgst=round_money(order.sgst),
        total_tax=round_money(order.total_tax),
        platform_fee=round_money(order.platform_fee),
        delivery_fee=round_money(order.delivery_fee),
        total_amount=round_money(order.total_amount),
        status=order.status,
        scheduled_delivery_date=order.scheduled_delivery_date,
        delivered_at=order.delivered_at,
        delivery_address=order.address(),
        payment_reference=order.payment_reference,
        created_at=order.created_at,
    )
