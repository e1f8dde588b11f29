"""Repository Scope

Bundles one unit of work with the repositories bound to it. Order
generation opens a fresh scope per subscription so that one
subscription's failure can only roll back its own writes.
"""

from dataclasses import dataclass
from typing import AsyncContextManager, Callable
from src.app.repositories.subscription_repository import SubscriptionRepository
from src.app.repositories.order_repository import OrderRepository
from src.app.repositories.order_counter_repository import OrderCounterRepository
from src.app.repositories.product_repository import ProductRepository
from src.app.services.unit_of_work import UnitOfWork


@dataclass
class RepositoryScope:
    uow: UnitOfWork
    subscription_repo: SubscriptionRepository
    order_repo: OrderRepository
    order_counter_repo: OrderCounterRepository
    product_repo: ProductRepository


# Called with no arguments; yields a scope and closes its session on exit
ScopeFactory = Callable[[], AsyncContextManager[RepositoryScope]]
