"""Subscription Domain Entity

Recurring delivery template: what to deliver, how often, between which
dates, and whether deliveries are currently paused. Also owns the
subscription state machine.
"""

from datetime import datetime, date, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Date, DateTime, JSON, String
from src.domain.base import BaseModel, generate_uuid, utc_now
from src.domain.errors import ClosedSubscriptionError, InvalidTransitionError, InvalidPauseWindowError
from src.domain.values import DeliveryAddress, SubscriptionItem


class SubscriptionFrequency(str, Enum):
    """Delivery cadence, counted from start_date"""
    DAILY = "daily"
    ALTERNATE_DAYS = "alternate_days"
    WEEKLY = "weekly"


class SubscriptionStatus(str, Enum):
    """Subscription status types"""
    PENDING = "pending"      # Awaiting admin acceptance
    ACTIVE = "active"
    PAUSED = "paused"        # Deliveries suspended until paused_until
    COMPLETED = "completed"  # end_date reached (terminal)
    CANCELLED = "cancelled"  # Manually cancelled (terminal)


SUBSCRIPTION_TRANSITIONS: Dict[SubscriptionStatus, set] = {
    SubscriptionStatus.PENDING: {SubscriptionStatus.ACTIVE, SubscriptionStatus.CANCELLED},
    SubscriptionStatus.ACTIVE: {
        SubscriptionStatus.PAUSED,
        SubscriptionStatus.COMPLETED,
        SubscriptionStatus.CANCELLED,
    },
    SubscriptionStatus.PAUSED: {SubscriptionStatus.ACTIVE, SubscriptionStatus.CANCELLED},
    SubscriptionStatus.COMPLETED: set(),
    SubscriptionStatus.CANCELLED: set(),
}


class Subscription(BaseModel, table=True):
    """
    Subscription - Recurring dairy delivery

    Domain Rules:
    - items is non-empty; quantities are per delivery, not cumulative
    - paused_until is set if and only if status == PAUSED
    - Deliveries happen only on dates within [start_date, end_date]
    - delivery_address is a snapshot, not a reference to the address book
    - Status transitions: pending -> active <-> paused -> completed/cancelled
    """

    __tablename__ = "subscriptions"
    __table_args__ = (
        Index('ix_subscriptions_user_id', 'user_id'),
        Index('ix_subscriptions_status', 'status'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Unique subscription identifier"
    )

    user_id: str = Field(
        sa_column=Column(String(128), nullable=False),
        description="Owner user ID"
    )

    items: List[Dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="SubscriptionItem documents (product_id, quantity)"
    )

    frequency: SubscriptionFrequency = Field(
        description="Delivery cadence (daily, alternate_days, weekly)"
    )

    status: SubscriptionStatus = Field(
        default=SubscriptionStatus.PENDING,
        description="Subscription status"
    )

    start_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="First delivery date"
    )

    end_date: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="Last delivery date, inclusive (None = open-ended)"
    )

    paused_until: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="Deliveries resume on this date (only while paused)"
    )

    delivery_address: Dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
        description="DeliveryAddress snapshot"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        description="Subscription creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        description="Last update timestamp"
    )

    def line_items(self) -> List[SubscriptionItem]:
        return [SubscriptionItem.model_validate(item) for item in self.items]

    def address(self) -> DeliveryAddress:
        return DeliveryAddress.model_validate(self.delivery_address)

    def can_transition_to(self, target: SubscriptionStatus) -> bool:
        return target in SUBSCRIPTION_TRANSITIONS[SubscriptionStatus(self.status)]

    def is_terminal(self) -> bool:
        return not SUBSCRIPTION_TRANSITIONS[SubscriptionStatus(self.status)]

    def _transition(self, target: SubscriptionStatus) -> None:
        current = SubscriptionStatus(self.status)
        if not self.can_transition_to(target):
            raise InvalidTransitionError("subscription", current.value, target.value)
        self.status = target
        self.updated_at = utc_now()

    def activate(self) -> None:
        """Admin acceptance of a pending subscription"""
        if SubscriptionStatus(self.status) != SubscriptionStatus.PENDING:
            raise InvalidTransitionError(
                "subscription", SubscriptionStatus(self.status).value, SubscriptionStatus.ACTIVE.value
            )
        self._transition(SubscriptionStatus.ACTIVE)

    def pause(self, until: date, today: date) -> None:
        """
        Suspend deliveries until (and excluding) the given date

        Args:
            until: First date deliveries may happen again
            today: Calendar date of the pause request

        Raises:
            InvalidPauseWindowError: until is not strictly after tomorrow
            InvalidTransitionError: subscription is not active
        """
        if until <= today + timedelta(days=1):
            raise InvalidPauseWindowError(
                f"Pause must end after {today + timedelta(days=1)}, got {until}"
            )
        self._transition(SubscriptionStatus.PAUSED)
        self.paused_until = until

    def resume(self) -> None:
        """Manual resume, or automatic once paused_until is reached"""
        if SubscriptionStatus(self.status) != SubscriptionStatus.PAUSED:
            raise InvalidTransitionError(
                "subscription", SubscriptionStatus(self.status).value, SubscriptionStatus.ACTIVE.value
            )
        self._transition(SubscriptionStatus.ACTIVE)
        self.paused_until = None

    def cancel(self) -> None:
        self._transition(SubscriptionStatus.CANCELLED)
        self.paused_until = None

    def complete(self) -> None:
        """Fired by order generation once no delivery is left"""
        self._transition(SubscriptionStatus.COMPLETED)

    def replace_items(self, items: List[SubscriptionItem]) -> None:
        """
        Swap what is delivered from the next generated order on

        Orders already generated keep their own item snapshot.

        Raises:
            ClosedSubscriptionError: subscription is completed or cancelled
        """
        if self.is_terminal():
            raise ClosedSubscriptionError(self.id, SubscriptionStatus(self.status).value)
        self.items = [item.model_dump(mode="json") for item in items]
        self.updated_at = utc_now()
