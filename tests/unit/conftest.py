import pytest
from unittest.mock import AsyncMock

from src.app.services.unit_of_work import UnitOfWork
from tests.factories import make_order


class FakeUnitOfWork(UnitOfWork):
    """UnitOfWork with the real run() loop and mocked commit/rollback"""

    def __init__(self):
        self.commit = AsyncMock()
        self.rollback = AsyncMock()

    async def commit(self):
        pass

    async def rollback(self):
        pass


@pytest.fixture
def mock_uow():
    """Unit of work whose commit/rollback calls can be asserted"""
    return FakeUnitOfWork()


@pytest.fixture
def sample_order():
    """Monthly Mon/Wed/Fri order, 2024-06-10..2024-06-25, 2 x 300.00"""
    return make_order()
