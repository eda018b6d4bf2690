"""Integration tests for SqlAlchemyCustomerOrderRepository range queries"""

import pytest
from datetime import date

from src.adapter.repositories.customer_order_repository import SqlAlchemyCustomerOrderRepository
from src.domain.meal_plan import MealFrequency


class TestCustomerOrderRepository:
    @pytest.mark.asyncio
    async def test_get_details_joins_customer_and_plan(self, db_session, seed):
        customer = await seed.customer()
        plan = await seed.meal_plan(frequency=MealFrequency.WEEKLY)
        order = await seed.order(customer, plan)

        details = await SqlAlchemyCustomerOrderRepository(db_session).get_details(order.id)

        assert details.customer_name == "Asha Patel"
        assert details.meal_plan_name == "Veg Lunch"
        assert details.meal_plan_frequency == MealFrequency.WEEKLY
        assert details.recurrence().ordered_days() == ["Monday", "Wednesday", "Friday"]

    @pytest.mark.asyncio
    async def test_get_details_missing(self, db_session):
        assert await SqlAlchemyCustomerOrderRepository(db_session).get_details(12345) is None

    @pytest.mark.asyncio
    async def test_list_active_on_uses_inclusive_range(self, db_session, seed):
        customer = await seed.customer()
        plan = await seed.meal_plan()
        order = await seed.order(customer, plan, date(2024, 6, 10), date(2024, 6, 25))
        repo = SqlAlchemyCustomerOrderRepository(db_session)

        assert [o.order_id for o in await repo.list_active_on(date(2024, 6, 10))] == [order.id]
        assert [o.order_id for o in await repo.list_active_on(date(2024, 6, 25))] == [order.id]
        assert await repo.list_active_on(date(2024, 6, 26)) == []

    @pytest.mark.asyncio
    async def test_list_overlapping_month(self, db_session, seed):
        customer = await seed.customer()
        plan = await seed.meal_plan()
        may_to_june = await seed.order(customer, plan, date(2024, 5, 20), date(2024, 6, 2))
        await seed.order(customer, plan, date(2024, 7, 1), date(2024, 7, 31))
        repo = SqlAlchemyCustomerOrderRepository(db_session)

        june = await repo.list_overlapping_month("2024-06")

        assert [o.order_id for o in june] == [may_to_june.id]

    @pytest.mark.asyncio
    async def test_root_orders_exclude_renewals_and_other_customers(self, db_session, seed):
        asha = await seed.customer("Asha Patel")
        bilal = await seed.customer("Bilal Khan")
        plan = await seed.meal_plan()
        root = await seed.order(asha, plan)
        await seed.order(asha, plan, parent_order_id=root.id)
        await seed.order(bilal, plan)

        roots = await SqlAlchemyCustomerOrderRepository(db_session).list_root_orders_for_customer(asha.id, "2024-06")

        assert [o.order_id for o in roots] == [root.id]
