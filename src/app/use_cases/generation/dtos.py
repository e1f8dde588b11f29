"""Data Transfer Objects for Subscription Order Generation"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class MaterializeOutcome(str, Enum):
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"


class MaterializeResponseDTO(BaseModel):
    """
    Response DTO for materializing one subscription delivery

    ALREADY_EXISTS is a successful, write-free outcome.
    """

    subscription_id: str
    outcome: MaterializeOutcome
    order_id: str
    order_number: str
    total_amount: Decimal = Field(..., description="Order total, rounded for display")


class GenerationErrorDTO(BaseModel):
    """Per-subscription failure recorded in a run report"""

    subscription_id: str
    code: str = Field(..., description="Error code (e.g., PRODUCT_UNAVAILABLE)")
    reason: str
    product_id: Optional[str] = Field(
        default=None,
        description="Failing product for PRODUCT_UNAVAILABLE errors"
    )


class GenerationReportDTO(BaseModel):
    """
    Run report for one order generation pass

    skipped counts due subscriptions whose order already existed;
    errors is capped, failed is the uncapped count.
    """

    reference_date: date
    total_subscriptions: int = Field(..., description="Active + paused subscriptions loaded")
    resumed: int = Field(default=0, description="Paused subscriptions auto-resumed")
    due: int = Field(default=0, description="Subscriptions due on reference_date")
    created: int = Field(default=0)
    skipped: int = Field(default=0)
    completed: int = Field(default=0, description="Subscriptions completed on their end date")
    failed: int = Field(default=0)
    errors: List[GenerationErrorDTO] = Field(default_factory=list)
    execution_time_ms: int = 0

    class Config:
        json_schema_extra = {
            "example": {
                "reference_date": "2024-03-01",
                "total_subscriptions": 42,
                "resumed": 1,
                "due": 30,
                "created": 28,
                "skipped": 1,
                "completed": 2,
                "failed": 1,
                "errors": [
                    {
                        "subscription_id": "0b6f3c1e-...",
                        "code": "PRODUCT_UNAVAILABLE",
                        "reason": "Product Buffalo Milk 1L is out of stock",
                        "product_id": "prod_123",
                    }
                ],
                "execution_time_ms": 850,
            }
        }
