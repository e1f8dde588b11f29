"""MaterializeSubscriptionOrder Use Case

Turns one due subscription into a persisted PENDING order for one
delivery date, at most once per (subscription, date).
"""

import asyncio
import logging
from datetime import date
from typing import List, Optional, Tuple
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.order_repository import OrderRepository
from src.app.repositories.order_counter_repository import OrderCounterRepository
from src.app.repositories.product_repository import ProductRepository
from src.app.use_cases.orders.order_numbers import allocate_order_number
from src.domain.errors import DuplicateOrderError
from src.domain.order import Order, OrderStatus, OrderType, subscription_order_id
from src.domain.pricing import PricingLine, calculate_tax, round_money
from src.domain.product import Product
from src.domain.subscription import Subscription
from src.domain.values import OrderItem
from .dtos import MaterializeOutcome, MaterializeResponseDTO

logger = logging.getLogger(__name__)


class _ProductUnavailable(Exception):
    def __init__(self, product_id: str, reason: str):
        self.product_id = product_id
        self.reason = reason
        super().__init__(reason)


class MaterializeSubscriptionOrder:
    """
    Use Case: Create the order for one subscription delivery

    Business Rules:
    1. Idempotency: an existing order for (subscription, date) is returned
       as ALREADY_EXISTS with zero writes
    2. Every product must still exist, be in stock and allow subscription;
       otherwise nothing is written (PRODUCT_UNAVAILABLE)
    3. Prices are snapshotted now; later catalog changes never touch the order
    4. Order numbers come from the atomic per-year counter
    5. Subscription orders carry no checkout fees

    Flow:
    1. Look up existing order for (subscription, date)
    2. Re-validate products (each lookup bounded by a timeout)
    3. Snapshot prices and compute tax breakdown
    4. Allocate order number
    5. Insert order with deterministic id and commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        order_counter_repo: OrderCounterRepository,
        product_lookup_timeout: float = 10.0,
    ):
        self.uow = uow
        self.order_repo = order_repo
        self.product_repo = product_repo
        self.order_counter_repo = order_counter_repo
        self.product_lookup_timeout = product_lookup_timeout

    async def execute(
        self, subscription: Subscription, reference_date: date
    ) -> Result[MaterializeResponseDTO]:
        """
        Execute order materialization

        Args:
            subscription: Due subscription (already selected for reference_date)
            reference_date: Delivery date

        Returns:
            Result[MaterializeResponseDTO]: CREATED or ALREADY_EXISTS, or error
        """
        try:
            # Step 1: Idempotency check
            existing = await self.order_repo.find_by_subscription_and_date(
                subscription.id, reference_date
            )
            if existing:
                return Return.ok(self._to_response_dto(subscription, existing, MaterializeOutcome.ALREADY_EXISTS))

            # Step 2: Re-validate products
            items = subscription.line_items()
            if not items:
                return Return.err(
                    Error(
                        code="INVALID_SUBSCRIPTION",
                        message=f"Subscription {subscription.id} has no items",
                        reason="Subscription items must not be empty",
                    )
                )

            try:
                products = await self._load_products([item.product_id for item in items])
            except _ProductUnavailable as e:
                return Return.err(
                    Error(
                        code="PRODUCT_UNAVAILABLE",
                        message=f"Cannot generate order for subscription {subscription.id}",
                        reason=e.reason,
                        context={"product_id": e.product_id},
                    )
                )
            except asyncio.TimeoutError:
                return Return.err(
                    Error(
                        code="PRODUCT_LOOKUP_TIMEOUT",
                        message=f"Product lookup timed out for subscription {subscription.id}",
                        reason=f"No response within {self.product_lookup_timeout}s",
                    )
                )

            # Step 3: Snapshot prices and compute totals
            order_items, lines = self._snapshot(items, products)
            breakdown = calculate_tax(lines)

            # Step 4: Allocate order number
            order_number = await allocate_order_number(
                reference_date.year, self.order_repo, self.order_counter_repo
            )

            # Step 5: Persist
            order = Order(
                id=subscription_order_id(subscription.id, reference_date),
                order_number=order_number,
                user_id=subscription.user_id,
                type=OrderType.SUBSCRIPTION,
                subscription_id=subscription.id,
                items=[item.model_dump(mode="json") for item in order_items],
                subtotal=breakdown.subtotal,
                cgst=breakdown.cgst,
                sgst=breakdown.sgst,
                total_tax=breakdown.total_tax,
                total_amount=breakdown.total_before_fees,
                status=OrderStatus.PENDING,
                scheduled_delivery_date=reference_date,
                delivery_address=dict(subscription.delivery_address),
            )

            created = await self.order_repo.create(order)
            await self.uow.commit()

            logger.info(
                f"Created order {created.order_number} for subscription {subscription.id} "
                f"on {reference_date.isoformat()}"
            )
            return Return.ok(self._to_response_dto(subscription, created, MaterializeOutcome.CREATED))

        except DuplicateOrderError:
            # A concurrent run inserted the same delivery first
            await self.uow.rollback()
            existing = await self.order_repo.find_by_subscription_and_date(
                subscription.id, reference_date
            )
            if existing is None:
                return Return.err(
                    Error(
                        code="MATERIALIZE_FAILED",
                        message=f"Failed to generate order for subscription {subscription.id}",
                        reason="Duplicate order reported but not found",
                    )
                )
            return Return.ok(self._to_response_dto(subscription, existing, MaterializeOutcome.ALREADY_EXISTS))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="MATERIALIZE_FAILED",
                    message=f"Failed to generate order for subscription {subscription.id}",
                    reason=str(e),
                )
            )

    async def _load_products(self, product_ids: List[str]) -> List[Product]:
        products = []
        for product_id in product_ids:
            product: Optional[Product] = await asyncio.wait_for(
                self.product_repo.get_by_id(product_id),
                timeout=self.product_lookup_timeout,
            )
            if product is None:
                raise _ProductUnavailable(product_id, f"Product {product_id} not found")
            if not product.in_stock:
                raise _ProductUnavailable(product_id, f"Product {product.name} is out of stock")
            if not product.allow_subscription:
                raise _ProductUnavailable(
                    product_id, f"Product {product.name} does not support subscription"
                )
            products.append(product)
        return products

    def _snapshot(self, items, products: List[Product]) -> Tuple[List[OrderItem], List[PricingLine]]:
        order_items = []
        lines = []
        for item, product in zip(items, products):
            order_items.append(
                OrderItem(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=item.quantity,
                    price_excluding_tax=product.price_excluding_tax,
                    cgst_percent=product.tax_cgst,
                    sgst_percent=product.tax_sgst,
                    unit_price=product.price,
                )
            )
            lines.append(
                PricingLine.of(
                    product.price_excluding_tax,
                    product.tax_cgst,
                    product.tax_sgst,
                    item.quantity,
                )
            )
        return order_items, lines

    def _to_response_dto(
        self, subscription: Subscription, order: Order, outcome: MaterializeOutcome
    ) -> MaterializeResponseDTO:
        return MaterializeResponseDTO(
            subscription_id=subscription.id,
            outcome=outcome,
            order_id=order.id,
            order_number=order.order_number,
            total_amount=round_money(order.total_amount),
        )
