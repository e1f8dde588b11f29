"""Subscription API Routes

FastAPI routes for subscription creation, listing, item changes and
lifecycle changes.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.error import ClientError
from src.api.schemas.subscription_request import (
    BulkAcceptSubscriptionsRequestSchema,
    CreateSubscriptionRequestSchema,
    PauseSubscriptionRequestSchema,
    UpdateSubscriptionItemsRequestSchema,
)
from src.app.use_cases.bulk import BulkResultDTO
from src.app.use_cases.subscriptions import (
    CreateSubscription,
    GetSubscription,
    ListUserSubscriptions,
    AcceptSubscription,
    BulkAcceptSubscriptions,
    PauseSubscription,
    ResumeSubscription,
    CancelSubscription,
    UpdateSubscriptionItems,
    CreateSubscriptionCommandDTO,
    PauseSubscriptionCommandDTO,
    UpdateSubscriptionItemsCommandDTO,
    SubscriptionResponseDTO,
    ListSubscriptionsResponseDTO,
)
from src.adapter.repositories import SqlAlchemySubscriptionRepository, SqlAlchemyProductRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session
from src.domain.subscription import SubscriptionStatus

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])

NOT_FOUND_RESPONSE = {
    "description": "Subscription not found",
    "content": {
        "application/json": {
            "example": {
                "error": {
                    "code": "SUBSCRIPTION_NOT_FOUND",
                    "message": "Subscription 0b6f3c1e-... not found"
                }
            }
        }
    }
}

INVALID_TRANSITION_RESPONSE = {
    "description": "Status change not allowed from the current status",
    "content": {
        "application/json": {
            "example": {
                "error": {
                    "code": "INVALID_TRANSITION",
                    "message": "Cannot pause subscription 0b6f3c1e-...",
                    "reason": "Cannot move subscription from 'completed' to 'paused'"
                }
            }
        }
    }
}


@router.post(
    "",
    response_model=SubscriptionResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {
            "description": "A product is missing, out of stock or not subscribable",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "PRODUCT_UNAVAILABLE",
                            "message": "Subscription contains an unavailable product"
                        }
                    }
                }
            }
        }
    }
)
async def create_subscription(
    request: CreateSubscriptionRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Create a subscription awaiting admin acceptance.

    **Returns:**
    - 201: Subscription created with status `pending`
    - 409: A product cannot be subscribed to
    - 422: Invalid request body
    """
    command = CreateSubscriptionCommandDTO(
        user_id=request.user_id,
        items=request.items,
        frequency=request.frequency,
        start_date=request.start_date,
        end_date=request.end_date,
        delivery_address=request.delivery_address,
    )

    use_case = CreateSubscription(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemySubscriptionRepository(session),
        SqlAlchemyProductRepository(session),
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.get(
    "/{subscription_id}",
    response_model=SubscriptionResponseDTO,
    responses={404: NOT_FOUND_RESPONSE}
)
async def get_subscription(
    subscription_id: str,
    session: AsyncSession = Depends(get_session)
):
    use_case = GetSubscription(SqlAlchemySubscriptionRepository(session))
    result = await use_case.execute(subscription_id)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.post(
    "/{subscription_id}/accept",
    response_model=SubscriptionResponseDTO,
    responses={404: NOT_FOUND_RESPONSE, 409: INVALID_TRANSITION_RESPONSE}
)
async def accept_subscription(
    subscription_id: str,
    session: AsyncSession = Depends(get_session)
):
    """Admin acceptance: pending -> active"""
    use_case = AcceptSubscription(
        SqlAlchemyUnitOfWork(session), SqlAlchemySubscriptionRepository(session)
    )
    result = await use_case.execute(subscription_id)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.post(
    "/{subscription_id}/pause",
    response_model=SubscriptionResponseDTO,
    responses={
        400: {
            "description": "Pause end date is not after tomorrow",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVALID_PAUSE_DATE",
                            "message": "Pause end date must be after tomorrow"
                        }
                    }
                }
            }
        },
        404: NOT_FOUND_RESPONSE,
        409: INVALID_TRANSITION_RESPONSE,
    }
)
async def pause_subscription(
    subscription_id: str,
    request: PauseSubscriptionRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Pause deliveries until `paused_until` (exclusive).

    The subscription resumes automatically on that date.
    """
    command = PauseSubscriptionCommandDTO(
        subscription_id=subscription_id,
        paused_until=request.paused_until,
    )

    use_case = PauseSubscription(
        SqlAlchemyUnitOfWork(session), SqlAlchemySubscriptionRepository(session)
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.post(
    "/{subscription_id}/resume",
    response_model=SubscriptionResponseDTO,
    responses={404: NOT_FOUND_RESPONSE, 409: INVALID_TRANSITION_RESPONSE}
)
async def resume_subscription(
    subscription_id: str,
    session: AsyncSession = Depends(get_session)
):
    use_case = ResumeSubscription(
        SqlAlchemyUnitOfWork(session), SqlAlchemySubscriptionRepository(session)
    )
    result = await use_case.execute(subscription_id)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.post(
    "/{subscription_id}/cancel",
    response_model=SubscriptionResponseDTO,
    responses={404: NOT_FOUND_RESPONSE, 409: INVALID_TRANSITION_RESPONSE}
)
async def cancel_subscription(
    subscription_id: str,
    session: AsyncSession = Depends(get_session)
):
    use_case = CancelSubscription(
        SqlAlchemyUnitOfWork(session), SqlAlchemySubscriptionRepository(session)
    )
    result = await use_case.execute(subscription_id)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.get("/user/{user_id}", response_model=ListSubscriptionsResponseDTO)
async def list_user_subscriptions(
    user_id: str,
    subscription_status: Optional[SubscriptionStatus] = Query(default=None, alias="status"),
    session: AsyncSession = Depends(get_session)
):
    """A customer's subscriptions, newest first"""
    use_case = ListUserSubscriptions(SqlAlchemySubscriptionRepository(session))
    result = await use_case.execute(user_id, subscription_status)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.put(
    "/{subscription_id}/items",
    response_model=SubscriptionResponseDTO,
    responses={
        404: NOT_FOUND_RESPONSE,
        409: {
            "description": "Subscription is closed or a product cannot be subscribed to",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "SUBSCRIPTION_CLOSED",
                            "message": "Cannot change items of subscription 0b6f3c1e-..."
                        }
                    }
                }
            }
        }
    }
)
async def update_subscription_items(
    subscription_id: str,
    request: UpdateSubscriptionItemsRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Replace the products delivered by a subscription.

    Applies from the next generated order; existing orders are unchanged.
    """
    command = UpdateSubscriptionItemsCommandDTO(subscription_id=subscription_id, items=request.items)

    use_case = UpdateSubscriptionItems(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemySubscriptionRepository(session),
        SqlAlchemyProductRepository(session),
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.post("/bulk-accept", response_model=BulkResultDTO)
async def bulk_accept_subscriptions(
    request: BulkAcceptSubscriptionsRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Accept many pending subscriptions.

    Always 200; ids that could not be accepted are listed under `failed`.
    """
    use_case = BulkAcceptSubscriptions(
        SqlAlchemyUnitOfWork(session), SqlAlchemySubscriptionRepository(session)
    )
    return await use_case.execute(request.subscription_ids)
