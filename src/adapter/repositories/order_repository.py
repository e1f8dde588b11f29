"""SQLAlchemy implementation of OrderRepository

Idempotency of subscription orders is enforced by the store: the
deterministic primary key and the (subscription_id, scheduled_delivery_date)
unique constraint both reject a second insert for the same delivery.
"""

from datetime import date
from typing import Optional, List
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.order_repository import OrderRepository
from src.domain.errors import DuplicateOrderError
from src.domain.order import Order, OrderStatus, ORDER_NUMBER_PREFIX, parse_order_sequence


class SqlAlchemyOrderRepository(OrderRepository):
    """
    SQLAlchemy implementation of OrderRepository

    Features:
    - Duplicate deliveries surface as DuplicateOrderError, not IntegrityError
    - Orders are never deleted
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, order: Order) -> Order:
        """
        Create a new order

        Args:
            order: Order entity to persist

        Returns:
            Created Order

        Raises:
            DuplicateOrderError: Same id, order number or delivery already stored
        """
        self.session.add(order)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise DuplicateOrderError(order.id) from e
        await self.session.refresh(order)
        return order

    async def get_by_id(self, order_id: str) -> Optional[Order]:
        stmt = select(Order).where(Order.id == order_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_by_subscription_and_date(
        self, subscription_id: str, delivery_date: date
    ) -> Optional[Order]:
        stmt = select(Order).where(
            Order.subscription_id == subscription_id,
            Order.scheduled_delivery_date == delivery_date,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_scheduled_date(
        self, delivery_date: date, status: Optional[OrderStatus] = None
    ) -> List[Order]:
        stmt = select(Order).where(Order.scheduled_delivery_date == delivery_date)

        if status:
            stmt = stmt.where(Order.status == status)

        stmt = stmt.order_by(Order.order_number)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_user_id(
        self, user_id: str, status: Optional[OrderStatus] = None
    ) -> List[Order]:
        stmt = select(Order).where(Order.user_id == user_id)

        if status:
            stmt = stmt.where(Order.status == status)

        stmt = stmt.order_by(Order.created_at.desc(), Order.order_number.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_status(self, status: OrderStatus) -> List[Order]:
        stmt = (
            select(Order)
            .where(Order.status == status)
            .order_by(Order.scheduled_delivery_date, Order.order_number)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, order: Order) -> Order:
        self.session.add(order)
        await self.session.flush()
        await self.session.refresh(order)
        return order

    async def get_last_order_sequence(self, year: int) -> int:
        """
        Highest sequence among ORD-{year}-* order numbers

        Longer numbers sort first so that sequences past 99999 still win.
        """
        stmt = (
            select(Order.order_number)
            .where(Order.order_number.like(f"{ORDER_NUMBER_PREFIX}-{year}-%"))
            .order_by(func.length(Order.order_number).desc(), Order.order_number.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        last_number = result.scalar_one_or_none()
        return parse_order_sequence(last_number) if last_number else 0
