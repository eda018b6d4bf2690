from sqlalchemy.exc import IntegrityError, OperationalError
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.unit_of_work import UnitOfWork
from src.domain.errors import ConcurrencyConflictError


class SqlAlchemyUnitOfWork(UnitOfWork):
    """Unit of work bound to one AsyncSession transaction"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def commit(self):
        # Serialization failures, deadlocks and unique-key races surface here
        try:
            await self.session.commit()
        except (IntegrityError, OperationalError) as e:
            raise ConcurrencyConflictError(
                "Transaction could not be committed", reason=str(e)
            ) from e

    async def rollback(self):
        if self.session.in_transaction():
            await self.session.rollback()
