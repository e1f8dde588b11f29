"""PlaceOrder Use Case

One-time checkout: snapshot cart prices, add checkout fees, allocate an
order number and persist a PENDING order.
"""

import logging
from datetime import timedelta
from decimal import Decimal
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.clock import business_today
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.order_repository import OrderRepository
from src.app.repositories.order_counter_repository import OrderCounterRepository
from src.app.repositories.product_repository import ProductRepository
from src.domain.order import Order, OrderStatus, OrderType
from src.domain.pricing import PricingLine, calculate_tax, calculate_order_total, to_decimal
from src.domain.values import OrderItem
from .dtos import PlaceOrderCommandDTO, OrderResponseDTO, to_order_response
from .order_numbers import allocate_order_number

logger = logging.getLogger(__name__)


class PlaceOrder:
    """
    Use Case: Place a one-time order

    Business Rules:
    1. Cart must not be empty; every product must exist and be in stock
    2. Prices are snapshotted at checkout
    3. total_amount = subtotal + CGST + SGST + platform fee + delivery fee
    4. Delivery defaults to the next business day
    5. Order number year is the business year at checkout

    Flow:
    1. Validate cart and products
    2. Snapshot prices, compute tax and fees
    3. Allocate order number
    4. Persist and commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        order_counter_repo: OrderCounterRepository,
        platform_fee: Decimal = Decimal("0"),
        delivery_fee: Decimal = Decimal("0"),
        timezone: Optional[str] = None,
    ):
        self.uow = uow
        self.order_repo = order_repo
        self.product_repo = product_repo
        self.order_counter_repo = order_counter_repo
        self.platform_fee = to_decimal(platform_fee)
        self.delivery_fee = to_decimal(delivery_fee)
        self.timezone = timezone

    async def execute(self, command: PlaceOrderCommandDTO) -> Result[OrderResponseDTO]:
        """
        Execute checkout

        Args:
            command: PlaceOrderCommandDTO

        Returns:
            Result[OrderResponseDTO]: Created order or error

        Errors:
            INVALID_ORDER: Empty cart
            PRODUCT_UNAVAILABLE: Product missing or out of stock
        """
        if not command.items:
            return Return.err(
                Error(code="INVALID_ORDER", message="Order must contain at least one item")
            )

        try:
            today = business_today(self.timezone)

            # Step 1 & 2: Validate products and snapshot prices
            order_items = []
            lines = []
            for line in command.items:
                product = await self.product_repo.get_by_id(line.product_id)
                if product is None or not product.in_stock:
                    reason = (
                        f"Product {line.product_id} not found"
                        if product is None
                        else f"Product {product.name} is out of stock"
                    )
                    return Return.err(
                        Error(
                            code="PRODUCT_UNAVAILABLE",
                            message="Order contains an unavailable product",
                            reason=reason,
                            context={"product_id": line.product_id},
                        )
                    )

                order_items.append(
                    OrderItem(
                        product_id=product.id,
                        product_name=product.name,
                        quantity=line.quantity,
                        price_excluding_tax=product.price_excluding_tax,
                        cgst_percent=product.tax_cgst,
                        sgst_percent=product.tax_sgst,
                        unit_price=product.price,
                    )
                )
                lines.append(
                    PricingLine.of(
                        product.price_excluding_tax, product.tax_cgst, product.tax_sgst, line.quantity
                    )
                )

            breakdown = calculate_tax(lines)
            total_amount = calculate_order_total(breakdown, self.platform_fee, self.delivery_fee)

            # Step 3: Allocate order number
            order_number = await allocate_order_number(
                today.year, self.order_repo, self.order_counter_repo
            )

            # Step 4: Persist
            order = Order(
                order_number=order_number,
                user_id=command.user_id,
                type=OrderType.ONE_TIME,
                items=[item.model_dump(mode="json") for item in order_items],
                subtotal=breakdown.subtotal,
                cgst=breakdown.cgst,
                sgst=breakdown.sgst,
                total_tax=breakdown.total_tax,
                platform_fee=self.platform_fee,
                delivery_fee=self.delivery_fee,
                total_amount=total_amount,
                status=OrderStatus.PENDING,
                scheduled_delivery_date=command.scheduled_delivery_date or today + timedelta(days=1),
                delivery_address=command.delivery_address.model_dump(mode="json"),
                payment_reference=command.payment_reference,
            )
            created = await self.order_repo.create(order)
            await self.uow.commit()

            logger.info(f"Placed order {created.order_number} for user {created.user_id}")
            return Return.ok(to_order_response(created))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="ORDER_CREATE_FAILED",
                    message="Failed to place order",
                    reason=str(e),
                )
            )
