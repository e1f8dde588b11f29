"""Subscription use cases"""
from .create_subscription import CreateSubscription
from .get_subscription import GetSubscription, ListUserSubscriptions
from .subscription_status import (
    AcceptSubscription,
    BulkAcceptSubscriptions,
    PauseSubscription,
    ResumeSubscription,
    CancelSubscription,
)
from .update_subscription_items import UpdateSubscriptionItems
from .dtos import (
    CreateSubscriptionCommandDTO,
    PauseSubscriptionCommandDTO,
    UpdateSubscriptionItemsCommandDTO,
    SubscriptionResponseDTO,
    ListSubscriptionsResponseDTO,
    to_subscription_response,
)

__all__ = [
    "CreateSubscription",
    "GetSubscription",
    "ListUserSubscriptions",
    "AcceptSubscription",
    "BulkAcceptSubscriptions",
    "PauseSubscription",
    "ResumeSubscription",
    "CancelSubscription",
    "UpdateSubscriptionItems",
    "CreateSubscriptionCommandDTO",
    "PauseSubscriptionCommandDTO",
    "UpdateSubscriptionItemsCommandDTO",
    "SubscriptionResponseDTO",
    "ListSubscriptionsResponseDTO",
    "to_subscription_response",
]
