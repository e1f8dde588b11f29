from .subscription_repository import SqlAlchemySubscriptionRepository
from .order_repository import SqlAlchemyOrderRepository
from .order_counter_repository import SqlAlchemyOrderCounterRepository
from .product_repository import SqlAlchemyProductRepository

__all__ = [
    "SqlAlchemySubscriptionRepository",
    "SqlAlchemyOrderRepository",
    "SqlAlchemyOrderCounterRepository",
    "SqlAlchemyProductRepository",
]
