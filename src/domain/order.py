"""Order Domain Entity

Concrete delivery, either placed once at checkout or materialized from a
subscription for a single date. Owns the order state machine.
"""

import uuid
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Date, DateTime, JSON, Numeric, String, UniqueConstraint
from src.domain.base import BaseModel, generate_uuid, utc_now
from src.domain.errors import InvalidTransitionError
from src.domain.values import DeliveryAddress, OrderItem

ORDER_NUMBER_PREFIX = "ORD"

# Namespace for deterministic subscription order ids
SUBSCRIPTION_ORDER_NAMESPACE = uuid.UUID("6f1f7c52-3d0a-4e55-9a8e-0c4b1d2f9e10")


class OrderType(str, Enum):
    """Order origin"""
    ONE_TIME = "one_time"
    SUBSCRIPTION = "subscription"


class OrderStatus(str, Enum):
    """Order status types"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


ORDER_TRANSITIONS: Dict[OrderStatus, set] = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.OUT_FOR_DELIVERY, OrderStatus.CANCELLED},
    OrderStatus.OUT_FOR_DELIVERY: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}


def format_order_number(year: int, sequence: int) -> str:
    """ORD-YYYY-NNNNN (e.g., ORD-2024-00001)"""
    return f"{ORDER_NUMBER_PREFIX}-{year}-{sequence:05d}"


def parse_order_sequence(order_number: str) -> int:
    """Extract the per-year sequence from an order number"""
    return int(order_number.rsplit("-", 1)[-1])


def subscription_order_id(subscription_id: str, delivery_date: date) -> str:
    """
    Deterministic order id for one subscription delivery

    Two materializations of the same (subscription, date) always produce
    the same primary key, so the second insert is rejected by the store.
    """
    return str(uuid.uuid5(SUBSCRIPTION_ORDER_NAMESPACE, f"{subscription_id}:{delivery_date.isoformat()}"))


class Order(BaseModel, table=True):
    """
    Order - A single delivery

    Domain Rules:
    - order_number is unique (ORD-YYYY-NNNNN)
    - subscription_id is set if and only if type == SUBSCRIPTION
    - At most one order per (subscription_id, scheduled_delivery_date)
    - Item prices and totals are frozen at creation
    - delivered_at is set exactly once, on entry to DELIVERED
    - Status transitions: pending -> confirmed -> out_for_delivery -> delivered,
      pending/confirmed -> cancelled
    """

    __tablename__ = "orders"
    __table_args__ = (
        Index('ix_orders_user_id', 'user_id'),
        Index('ix_orders_status', 'status'),
        Index('ix_orders_scheduled_delivery_date', 'scheduled_delivery_date'),
        UniqueConstraint('subscription_id', 'scheduled_delivery_date', name='uq_orders_subscription_date'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Order identifier (deterministic for subscription orders)"
    )

    order_number: str = Field(
        sa_column=Column(String(32), nullable=False, unique=True),
        description="Human-readable order number (e.g., ORD-2024-00001)"
    )

    user_id: str = Field(
        sa_column=Column(String(128), nullable=False),
        description="Customer user ID"
    )

    type: OrderType = Field(
        description="Order origin (one_time, subscription)"
    )

    subscription_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(64), nullable=True),
        description="Source subscription (subscription orders only)"
    )

    items: List[Dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="OrderItem documents with snapshotted prices"
    )

    subtotal: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Total excluding tax"
    )

    cgst: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Total CGST"
    )

    sgst: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Total SGST"
    )

    total_tax: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="CGST + SGST"
    )

    platform_fee: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 6), nullable=False, default=0),
    )

    delivery_fee: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 6), nullable=False, default=0),
    )

    total_amount: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Payable total, frozen at creation"
    )

    status: OrderStatus = Field(
        default=OrderStatus.PENDING,
        description="Order status"
    )

    scheduled_delivery_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Calendar date of delivery"
    )

    delivered_at: Optional[datetime] = Field(
        default=None,
        sa_type=DateTime(timezone=True),
        description="Set on transition to delivered"
    )

    delivery_address: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
        description="DeliveryAddress snapshot"
    )

    payment_reference: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Payment gateway reference (one-time orders)"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        description="Order creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        description="Last update timestamp"
    )

    def line_items(self) -> List[OrderItem]:
        return [OrderItem.model_validate(item) for item in self.items]

    def address(self) -> DeliveryAddress:
        return DeliveryAddress.model_validate(self.delivery_address)

    def can_transition_to(self, target: OrderStatus) -> bool:
        return target in ORDER_TRANSITIONS[OrderStatus(self.status)]

    def transition_to(self, target: OrderStatus, now: Optional[datetime] = None) -> None:
        """
        Move the order along one legal edge

        Raises:
            InvalidTransitionError: target is not reachable from the current status
        """
        current = OrderStatus(self.status)
        if not self.can_transition_to(target):
            raise InvalidTransitionError("order", current.value, target.value)

        now = now or utc_now()
        self.status = target
        if target == OrderStatus.DELIVERED:
            self.delivered_at = now
        self.updated_at = now
