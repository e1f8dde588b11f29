"""Subscription Order Generation API Routes

Operator trigger for the daily generation run. The scheduled worker
calls the same use case.
"""

from typing import Optional
from fastapi import APIRouter, Depends, status

from config import ApplicationConfig
from libs.result import Error
from src.api.error import ClientError
from src.api.schemas.order_request import GenerateOrdersRequestSchema
from src.app.services.clock import business_today
from src.app.use_cases.generation import GenerateSubscriptionOrders, GenerationReportDTO
from src.adapter.services.repository_scope import SqlAlchemyScopeFactory
from src.depends import get_scope_factory

router = APIRouter(prefix="/subscription-orders", tags=["Subscription Orders"])


@router.post(
    "/generate",
    response_model=GenerationReportDTO,
    status_code=status.HTTP_200_OK,
    responses={
        503: {
            "description": "Generation disabled or subscriptions could not be loaded",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "REPOSITORY_UNAVAILABLE",
                            "message": "Failed to load subscriptions"
                        }
                    }
                }
            }
        }
    }
)
async def generate_subscription_orders(
    request: Optional[GenerateOrdersRequestSchema] = None,
    scope_factory: SqlAlchemyScopeFactory = Depends(get_scope_factory),
):
    """
    Generate subscription orders for one delivery date.

    Safe to call repeatedly: subscriptions that already have an order for
    the date are counted as `skipped`, never duplicated.

    **Request body (optional):**
    - `reference_date`: Delivery date (default: today in the business timezone)

    **Returns:**
    - 200: Run report (per-subscription failures are listed in `errors`)
    - 503: Generation disabled, or subscriptions could not be loaded
    """
    if not ApplicationConfig.SUBSCRIPTION_GENERATION_ENABLED:
        raise ClientError.from_error(
            Error(
                code="GENERATION_DISABLED",
                message="Subscription order generation is disabled",
            )
        )

    reference_date = (request.reference_date if request else None) or business_today()

    use_case = GenerateSubscriptionOrders.from_config(scope_factory, ApplicationConfig)
    result = await use_case.execute(reference_date)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value
