"""SQLAlchemy Customer Order Repository Implementation

Reads orders joined with their customer and meal plan.
"""

from datetime import date
from typing import List, Optional
from sqlalchemy import or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.customer_order_repository import CustomerOrderRepository
from src.domain.customer import Customer
from src.domain.customer_order import CustomerOrder, CustomerOrderDetails
from src.domain.meal_plan import MealPlan
from src.domain.schedule import month_bounds


class SqlAlchemyCustomerOrderRepository(CustomerOrderRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    def _details_statement(self):
        return (
            select(CustomerOrder, Customer, MealPlan)
            .join(Customer, Customer.id == CustomerOrder.customer_id)
            .join(MealPlan, MealPlan.id == CustomerOrder.meal_plan_id)
        )

    @staticmethod
    def _to_details(order: CustomerOrder, customer: Customer, meal_plan: MealPlan) -> CustomerOrderDetails:
        return CustomerOrderDetails(
            order_id=order.id,
            customer_id=order.customer_id,
            customer_name=customer.name,
            customer_phone=customer.phone,
            customer_address=customer.address,
            meal_plan_id=meal_plan.id,
            meal_plan_name=meal_plan.meal_name,
            meal_plan_frequency=meal_plan.frequency,
            quantity=order.quantity,
            price=order.price,
            start_date=order.start_date,
            end_date=order.end_date,
            selected_days=order.selected_days,
            parent_order_id=order.parent_order_id,
        )

    async def _fetch(self, statement) -> List[CustomerOrderDetails]:
        result = await self.session.execute(statement)
        return [self._to_details(order, customer, meal_plan) for order, customer, meal_plan in result.all()]

    async def get_details(self, order_id: int) -> Optional[CustomerOrderDetails]:
        statement = self._details_statement().where(CustomerOrder.id == order_id)
        details = await self._fetch(statement)
        return details[0] if details else None

    async def list_details(self, order_ids: List[int]) -> List[CustomerOrderDetails]:
        if not order_ids:
            return []
        statement = self._details_statement().where(CustomerOrder.id.in_(order_ids))
        return await self._fetch(statement)

    async def list_active_on(self, target_date: date) -> List[CustomerOrderDetails]:
        statement = (
            self._details_statement()
            .where(CustomerOrder.start_date <= target_date)
            .where(CustomerOrder.end_date >= target_date)
            .order_by(Customer.name.asc(), CustomerOrder.id.asc())
        )
        return await self._fetch(statement)

    async def list_overlapping_month(self, billing_month: str) -> List[CustomerOrderDetails]:
        first_day, last_day = month_bounds(billing_month)
        statement = (
            self._details_statement()
            .where(CustomerOrder.start_date <= last_day)
            .where(CustomerOrder.end_date >= first_day)
            .order_by(CustomerOrder.created_at.desc(), CustomerOrder.id.desc())
        )
        return await self._fetch(statement)

    async def list_root_orders_for_customer(
        self, customer_id: int, billing_month: str
    ) -> List[CustomerOrderDetails]:
        first_day, last_day = month_bounds(billing_month)
        statement = (
            self._details_statement()
            .where(CustomerOrder.customer_id == customer_id)
            .where(CustomerOrder.start_date <= last_day)
            .where(CustomerOrder.end_date >= first_day)
            .where(or_(CustomerOrder.parent_order_id.is_(None), CustomerOrder.parent_order_id == 0))
            .order_by(MealPlan.meal_name.asc(), CustomerOrder.id.asc())
        )
        return await self._fetch(statement)
