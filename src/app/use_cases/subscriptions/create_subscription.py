"""CreateSubscription Use Case

Registers a new recurring delivery. New subscriptions wait in PENDING
until an admin accepts them.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.product_repository import ProductRepository
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.subscription import Subscription, SubscriptionStatus
from .dtos import CreateSubscriptionCommandDTO, SubscriptionResponseDTO, to_subscription_response

logger = logging.getLogger(__name__)


class CreateSubscription:
    """
    Use Case: Create a subscription

    Business Rules:
    1. At least one item; every quantity >= 1 (enforced by the command DTO)
    2. end_date, when given, is not before start_date
    3. Every product exists, allows subscription and is in stock
    4. The delivery address is snapshotted onto the subscription
    5. Status starts at PENDING

    Flow:
    1. Validate dates and items
    2. Validate products
    3. Persist and commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        subscription_repo: SubscriptionRepository,
        product_repo: ProductRepository,
    ):
        self.uow = uow
        self.subscription_repo = subscription_repo
        self.product_repo = product_repo

    async def execute(self, command: CreateSubscriptionCommandDTO) -> Result[SubscriptionResponseDTO]:
        """
        Execute subscription creation

        Args:
            command: CreateSubscriptionCommandDTO

        Returns:
            Result[SubscriptionResponseDTO]: Created subscription or error

        Errors:
            INVALID_SUBSCRIPTION: No items or end_date before start_date
            PRODUCT_UNAVAILABLE: Product missing, out of stock or not subscribable
        """
        # Step 1: Validate shape
        if not command.items:
            return Return.err(
                Error(
                    code="INVALID_SUBSCRIPTION",
                    message="Subscription must contain at least one item",
                )
            )

        if command.end_date is not None and command.end_date < command.start_date:
            return Return.err(
                Error(
                    code="INVALID_SUBSCRIPTION",
                    message="end_date must not be before start_date",
                    reason=f"start_date={command.start_date}, end_date={command.end_date}",
                )
            )

        try:
            # Step 2: Validate products
            for item in command.items:
                product = await self.product_repo.get_by_id(item.product_id)
                if product is None:
                    return self._unavailable(item.product_id, f"Product {item.product_id} not found")
                if not product.allow_subscription:
                    return self._unavailable(
                        item.product_id, f"Product {product.name} is not available for subscription"
                    )
                if not product.in_stock:
                    return self._unavailable(item.product_id, f"Product {product.name} is out of stock")

            # Step 3: Persist
            subscription = Subscription(
                user_id=command.user_id,
                items=[item.model_dump(mode="json") for item in command.items],
                frequency=command.frequency,
                status=SubscriptionStatus.PENDING,
                start_date=command.start_date,
                end_date=command.end_date,
                delivery_address=command.delivery_address.model_dump(mode="json"),
            )
            created = await self.subscription_repo.create(subscription)
            await self.uow.commit()

            logger.info(f"Created subscription {created.id} for user {created.user_id}")
            return Return.ok(to_subscription_response(created))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="SUBSCRIPTION_CREATE_FAILED",
                    message="Failed to create subscription",
                    reason=str(e),
                )
            )

    @staticmethod
    def _unavailable(product_id: str, reason: str) -> Result[SubscriptionResponseDTO]:
        return Return.err(
            Error(
                code="PRODUCT_UNAVAILABLE",
                message="Subscription contains an unavailable product",
                reason=reason,
                context={"product_id": product_id},
            )
        )
