"""UpdateSubscriptionItems Use Case

Replaces what a subscription delivers. Takes effect from the next
generated order; orders already generated keep their snapshot.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.product_repository import ProductRepository
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.domain.errors import ClosedSubscriptionError
from .dtos import UpdateSubscriptionItemsCommandDTO, SubscriptionResponseDTO, to_subscription_response

logger = logging.getLogger(__name__)


class UpdateSubscriptionItems:
    """
    Use Case: Replace a subscription's items

    Business Rules:
    1. At least one item, one line per product
    2. Every product exists and allows subscription
    3. Completed and cancelled subscriptions cannot be changed
    4. Status, schedule and address are left untouched

    Flow:
    1. Validate items
    2. Load subscription
    3. Validate products
    4. Replace items through the entity, persist and commit
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

    async def execute(self, command: UpdateSubscriptionItemsCommandDTO) -> Result[SubscriptionResponseDTO]:
        """
        Execute item replacement

        Args:
            command: UpdateSubscriptionItemsCommandDTO

        Returns:
            Result[SubscriptionResponseDTO]: Updated subscription or error

        Errors:
            INVALID_SUBSCRIPTION: No items or a product listed twice
            SUBSCRIPTION_NOT_FOUND: No subscription with that id
            PRODUCT_UNAVAILABLE: Product missing or not subscribable
            SUBSCRIPTION_CLOSED: Subscription is completed or cancelled
        """
        # Step 1: Validate items
        if not command.items:
            return Return.err(
                Error(
                    code="INVALID_SUBSCRIPTION",
                    message="Subscription must contain at least one item",
                )
            )

        product_ids = [item.product_id for item in command.items]
        if len(product_ids) != len(set(product_ids)):
            return Return.err(
                Error(
                    code="INVALID_SUBSCRIPTION",
                    message="Each product may appear only once",
                )
            )

        try:
            # Step 2: Load subscription
            subscription = await self.subscription_repo.get_by_id(command.subscription_id)
            if subscription is None:
                return Return.err(
                    Error(
                        code="SUBSCRIPTION_NOT_FOUND",
                        message=f"Subscription {command.subscription_id} not found",
                    )
                )

            # Step 3: Validate products
            for item in command.items:
                product = await self.product_repo.get_by_id(item.product_id)
                if product is None:
                    return self._unavailable(item.product_id, f"Product {item.product_id} not found")
                if not product.allow_subscription:
                    return self._unavailable(
                        item.product_id, f"Product {product.name} does not support subscription"
                    )

            # Step 4: Replace and persist
            subscription.replace_items(command.items)
            updated = await self.subscription_repo.update(subscription)
            await self.uow.commit()

            logger.info(
                f"Subscription {command.subscription_id}: items replaced "
                f"({len(command.items)} products)"
            )
            return Return.ok(to_subscription_response(updated))

        except ClosedSubscriptionError as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="SUBSCRIPTION_CLOSED",
                    message=f"Cannot change items of subscription {command.subscription_id}",
                    reason=str(e),
                )
            )
        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="SUBSCRIPTION_UPDATE_FAILED",
                    message=f"Failed to update items of subscription {command.subscription_id}",
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
