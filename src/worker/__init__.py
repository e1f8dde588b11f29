"""Background workers for the order service"""
from .subscription_orders import SubscriptionOrderWorker

__all__ = ["SubscriptionOrderWorker"]
