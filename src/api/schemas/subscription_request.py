"""Request schemas for Subscription API

Pydantic models for validating incoming HTTP requests.
"""

from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator
from src.domain.subscription import SubscriptionFrequency
from src.domain.values import DeliveryAddress, SubscriptionItem


class CreateSubscriptionRequestSchema(BaseModel):
    """
    Request schema for creating a subscription

    Used for POST /subscriptions endpoint.
    """

    user_id: str = Field(
        ...,
        min_length=1,
        description="Owner user ID (required, non-empty)"
    )

    items: List[SubscriptionItem] = Field(
        ...,
        min_length=1,
        description="Products and per-delivery quantities"
    )

    frequency: SubscriptionFrequency

    start_date: date

    end_date: Optional[date] = None

    delivery_address: DeliveryAddress

    @field_validator('items')
    @classmethod
    def validate_unique_products(cls, v):
        """One line per product; quantities are per delivery"""
        product_ids = [item.product_id for item in v]
        if len(product_ids) != len(set(product_ids)):
            raise ValueError("Each product may appear only once")
        return v

    @model_validator(mode='after')
    def validate_dates(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "user_abc123",
                "items": [{"product_id": "prod_milk_1l", "quantity": 2}],
                "frequency": "alternate_days",
                "start_date": "2024-03-01",
                "end_date": None,
                "delivery_address": {
                    "label": "Home",
                    "street": "12 MG Road",
                    "apartment": "Flat 4B",
                    "city": "Bengaluru",
                    "state": "Karnataka",
                    "pincode": "560001",
                },
            }
        }


class PauseSubscriptionRequestSchema(BaseModel):
    """Request schema for POST /subscriptions/{id}/pause"""

    paused_until: date = Field(
        ...,
        description="Deliveries resume on this date (must be after tomorrow)"
    )


class UpdateSubscriptionItemsRequestSchema(BaseModel):
    """Request schema for PUT /subscriptions/{id}/items"""

    items: List[SubscriptionItem] = Field(
        ...,
        min_length=1,
        description="Replacement products and per-delivery quantities"
    )

    @field_validator('items')
    @classmethod
    def validate_unique_products(cls, v):
        product_ids = [item.product_id for item in v]
        if len(product_ids) != len(set(product_ids)):
            raise ValueError("Each product may appear only once")
        return v


class BulkAcceptSubscriptionsRequestSchema(BaseModel):
    """Request schema for POST /subscriptions/bulk-accept"""

    subscription_ids: List[str] = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Pending subscriptions to accept"
    )
