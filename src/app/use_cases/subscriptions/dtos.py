"""Data Transfer Objects for Subscription Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, Field
from src.domain.subscription import Subscription, SubscriptionFrequency, SubscriptionStatus
from src.domain.values import DeliveryAddress, SubscriptionItem


class CreateSubscriptionCommandDTO(BaseModel):
    """
    Command DTO for creating a subscription

    Used as input to CreateSubscription use case.
    """

    user_id: str = Field(..., min_length=1, description="Owner user ID")

    items: List[SubscriptionItem] = Field(
        ...,
        description="Products and per-delivery quantities (must not be empty)"
    )

    frequency: SubscriptionFrequency = Field(
        ...,
        description="Delivery cadence (daily, alternate_days, weekly)"
    )

    start_date: date = Field(..., description="First delivery date")

    end_date: Optional[date] = Field(
        default=None,
        description="Last delivery date, inclusive (None = open-ended)"
    )

    delivery_address: DeliveryAddress

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "user_abc123",
                "items": [{"product_id": "prod_milk_1l", "quantity": 2}],
                "frequency": "daily",
                "start_date": "2024-03-01",
                "end_date": "2024-03-31",
                "delivery_address": {
                    "label": "Home",
                    "street": "12 MG Road",
                    "city": "Bengaluru",
                    "state": "Karnataka",
                    "pincode": "560001",
                },
            }
        }


class PauseSubscriptionCommandDTO(BaseModel):
    """Command DTO for pausing a subscription"""

    subscription_id: str

    paused_until: date = Field(
        ...,
        description="First date deliveries may happen again (must be after tomorrow)"
    )

    requested_on: Optional[date] = Field(
        default=None,
        description="Calendar date of the request; defaults to business today"
    )


class UpdateSubscriptionItemsCommandDTO(BaseModel):
    """Command DTO for replacing a subscription's items"""

    subscription_id: str

    items: List[SubscriptionItem] = Field(
        ...,
        description="New products and per-delivery quantities (must not be empty)"
    )


class SubscriptionResponseDTO(BaseModel):
    """Response DTO for a subscription"""

    id: str
    user_id: str
    items: List[SubscriptionItem]
    frequency: SubscriptionFrequency
    status: SubscriptionStatus
    start_date: date
    end_date: Optional[date] = None
    paused_until: Optional[date] = None
    delivery_address: DeliveryAddress
    created_at: datetime
    updated_at: datetime


class ListSubscriptionsResponseDTO(BaseModel):
    user_id: str
    subscriptions: List[SubscriptionResponseDTO]
    total_count: int


def to_subscription_response(subscription: Subscription) -> SubscriptionResponseDTO:
    return SubscriptionResponseDTO(
        id=subscription.id,
        user_id=subscription.user_id,
        items=subscription.line_items(),
        frequency=subscription.frequency,
        status=subscription.status,
        start_date=subscription.start_date,
        end_date=subscription.end_date,
        paused_until=subscription.paused_until,
        delivery_address=subscription.address(),
        created_at=subscription.created_at,
        updated_at=subscription.updated_at,
    )
