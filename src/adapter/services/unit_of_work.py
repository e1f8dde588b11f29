from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """Commits/rolls back the session shared by one scope's repositories"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aexit__(self, *args):
        # Detached first so entities returned from the scope keep their loaded state
        self.session.expunge_all()
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
