from .base import BaseModel, generate_uuid
from .errors import (
    DomainError,
    InvalidTransitionError,
    InvalidPauseWindowError,
    PricingError,
    DuplicateOrderError,
)
from .values import DeliveryAddress, SubscriptionItem, OrderItem
from .product import Product
from .subscription import Subscription, SubscriptionStatus, SubscriptionFrequency
from .order import Order, OrderStatus, OrderType
from .order_counter import OrderCounter

__all__ = [
    "BaseModel",
    "generate_uuid",
    "DomainError",
    "InvalidTransitionError",
    "InvalidPauseWindowError",
    "PricingError",
    "DuplicateOrderError",
    "DeliveryAddress",
    "SubscriptionItem",
    "OrderItem",
    "Product",
    "Subscription",
    "SubscriptionStatus",
    "SubscriptionFrequency",
    "Order",
    "OrderStatus",
    "OrderType",
    "OrderCounter",
]
