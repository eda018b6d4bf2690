import pytest
import pytest_asyncio
from datetime import date
from decimal import Decimal
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401  registers all tables
from src.depends import get_session
from src.domain.customer import Customer
from src.domain.customer_order import CustomerOrder
from src.domain.meal_plan import MealFrequency, MealPlan


class Seeder:
    """Inserts directory rows (customers, meal plans, orders) for a test"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _save(self, entity):
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def customer(self, name="Asha Patel", phone="555-0101", address="12 Curry Lane") -> Customer:
        return await self._save(Customer(name=name, phone=phone, address=address))

    async def meal_plan(
        self, meal_name="Veg Lunch", frequency=MealFrequency.MONTHLY, price=Decimal("300.00")
    ) -> MealPlan:
        return await self._save(MealPlan(meal_name=meal_name, frequency=frequency, price=price))

    async def order(
        self,
        customer: Customer,
        meal_plan: MealPlan,
        start_date=date(2024, 6, 10),
        end_date=date(2024, 6, 25),
        selected_days='["Monday", "Wednesday", "Friday"]',
        quantity=2,
        price=None,
        parent_order_id=None,
    ) -> CustomerOrder:
        return await self._save(
            CustomerOrder(
                customer_id=customer.id,
                meal_plan_id=meal_plan.id,
                quantity=quantity,
                selected_days=selected_days,
                price=price if price is not None else meal_plan.price,
                start_date=start_date,
                end_date=end_date,
                parent_order_id=parent_order_id,
            )
        )


@pytest.fixture
def db_uri(tmp_path):
    """File backed SQLite database, fresh for every test"""
    return f"sqlite+aiosqlite:///{tmp_path / 'tiffin_test.db'}"


@pytest_asyncio.fixture(scope="function")
async def engine(db_uri):
    """Create test database engine with all tables"""
    engine = create_async_engine(db_uri, echo=False, future=True)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest.fixture
def seed(db_session):
    return Seeder(db_session)


@pytest_asyncio.fixture
async def client(db_session):
    """Create test client with database session override"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
