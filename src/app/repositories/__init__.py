from .subscription_repository import SubscriptionRepository
from .order_repository import OrderRepository
from .order_counter_repository import OrderCounterRepository
from .product_repository import ProductRepository

__all__ = [
    "SubscriptionRepository",
    "OrderRepository",
    "OrderCounterRepository",
    "ProductRepository",
]
