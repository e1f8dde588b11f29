"""SQLAlchemy repository scope factory

Each call opens a new session, so every scope has its own transaction.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator
from sqlalchemy.orm import sessionmaker
from src.adapter.repositories import (
    SqlAlchemySubscriptionRepository,
    SqlAlchemyOrderRepository,
    SqlAlchemyOrderCounterRepository,
    SqlAlchemyProductRepository,
)
from src.app.services.repository_scope import RepositoryScope
from .unit_of_work import SqlAlchemyUnitOfWork


class SqlAlchemyScopeFactory:
    """
    Builds RepositoryScope instances bound to fresh AsyncSessions

    Usage:
        async with scope_factory() as scope:
            ...
            await scope.uow.commit()
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @asynccontextmanager
    async def __call__(self) -> AsyncIterator[RepositoryScope]:
        async with self.session_factory() as session:
            async with SqlAlchemyUnitOfWork(session) as uow:
                yield RepositoryScope(
                    uow=uow,
                    subscription_repo=SqlAlchemySubscriptionRepository(session),
                    order_repo=SqlAlchemyOrderRepository(session),
                    order_counter_repo=SqlAlchemyOrderCounterRepository(session),
                    product_repo=SqlAlchemyProductRepository(session),
                )
