"""SQLAlchemy implementation of OrderCounterRepository

One row per year. Reservations are a single UPDATE ... RETURNING, so two
writers can never observe the same sequence.
"""

from typing import Optional
from sqlalchemy import update
from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.order_counter_repository import OrderCounterRepository
from src.domain.base import utc_now
from src.domain.order_counter import OrderCounter

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SqlAlchemyOrderCounterRepository(OrderCounterRepository):
    """
    SQLAlchemy implementation of OrderCounterRepository

    Supports PostgreSQL and SQLite (both provide UPDATE ... RETURNING and
    INSERT ... ON CONFLICT DO NOTHING).
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def increment(self, year: int) -> Optional[int]:
        stmt = (
            update(OrderCounter)
            .where(OrderCounter.year == year)
            .values(
                last_sequence=OrderCounter.last_sequence + 1,
                updated_at=utc_now(),
            )
            .returning(OrderCounter.last_sequence)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        row = result.first()
        return row[0] if row else None

    async def initialize(self, year: int, first_sequence: int) -> int:
        """
        Seed the counter just below first_sequence, then reserve

        A concurrent seed for the same year is ignored by ON CONFLICT, so
        the increment always runs against whichever row won.
        """
        dialect = self.session.bind.dialect.name
        insert = _INSERT_BY_DIALECT.get(dialect)
        if insert is None:
            raise NotImplementedError(f"Order counters are not supported on {dialect}")

        stmt = (
            insert(OrderCounter)
            .values(year=year, last_sequence=first_sequence - 1, updated_at=utc_now())
            .on_conflict_do_nothing(index_elements=["year"])
        )
        await self.session.execute(stmt)

        sequence = await self.increment(year)
        if sequence is None:
            raise RuntimeError(f"Order counter for {year} missing after initialization")
        return sequence
