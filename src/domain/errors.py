"""Domain exceptions

Raised by entities and pure domain functions. Use cases translate them
into Result errors; they never escape to API callers as exceptions.
"""


class DomainError(Exception):
    """Base class for domain rule violations"""


class InvalidTransitionError(DomainError):
    """A state machine was asked to follow an edge that does not exist"""

    def __init__(self, entity: str, current: str, target: str):
        self.entity = entity
        self.current = current
        self.target = target
        super().__init__(f"Cannot move {entity} from '{current}' to '{target}'")


class InvalidPauseWindowError(DomainError):
    """Requested pause end date does not leave tomorrow's delivery untouched"""


class PricingError(DomainError, ValueError):
    """Negative price, tax rate or quantity given to the tax calculator"""


class DuplicateOrderError(DomainError):
    """An order with the same idempotency key was already persisted"""

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order {order_id} already exists")


class ClosedSubscriptionError(DomainError):
    """A completed or cancelled subscription was asked to change its contents"""

    def __init__(self, subscription_id: str, status: str):
        self.subscription_id = subscription_id
        self.status = status
        super().__init__(f"Subscription {subscription_id} is {status} and can no longer be changed")
