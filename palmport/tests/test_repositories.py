"""Repository tests against a temporary SQLite database (aiosqlite)."""
from __future__ import annotations

import asyncio
import tempfile
import unittest
from uuid import uuid4

from palmport.config import DatabaseConfig
from palmport.core.exceptions import ConflictError
from palmport.infra.database.engine import build_engine, build_session_factory, init_db
from palmport.infra.database.repositories import (
    CartRepository,
    OrderRepository,
    ProductRepository,
    ShippingSettingsRepository,
    SubscriberRepository,
    UserRepository,
)


def _order_data(**overrides):
    data = {
        "customer_name": "Ada Obi",
        "email": "ada@example.com",
        "items": [{"name": "Red Palm Oil", "size": "5L", "quantity": 1, "total": 5000}],
        "subtotal": 5000,
        "shipping": 1000,
        "total": 6000,
        "order_type": "online",
    }
    data.update(overrides)
    return data


class _SqliteTestCase(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.engine = build_engine(DatabaseConfig(url=f"sqlite+aiosqlite:///{tmp.name}/repo.db"))
        self.session_factory = build_session_factory(self.engine)
        asyncio.run(init_db(self.engine))
        self.addCleanup(lambda: asyncio.run(self.engine.dispose()))

    def run_in_session(self, fn):
        async def _go():
            async with self.session_factory() as session:
                result = await fn(session)
                await session.commit()
                return result
        return asyncio.run(_go())


class TestOrderRepository(_SqliteTestCase):
    def test_number_collision_retries_inside_savepoint(self):
        numbers = iter(["PALM-1-11111", "PALM-1-11111", "PALM-1-22222"])

        async def scenario(session):
            repo = OrderRepository(session)
            first = await repo.create_with_unique_number(_order_data(), lambda: next(numbers))
            second = await repo.create_with_unique_number(_order_data(), lambda: next(numbers))
            return first.order_number, second.order_number, await repo.count()

        first, second, count = self.run_in_session(scenario)
        self.assertEqual(first, "PALM-1-11111")
        self.assertEqual(second, "PALM-1-22222")
        self.assertEqual(count, 2)

    def test_gives_up_after_bounded_attempts(self):
        async def scenario(session):
            repo = OrderRepository(session)
            await repo.create_with_unique_number(_order_data(), lambda: "WA-1-33333")
            with self.assertRaises(ConflictError):
                await repo.create_with_unique_number(_order_data(), lambda: "WA-1-33333", attempts=3)
            return await repo.count()

        self.assertEqual(self.run_in_session(scenario), 1)

    def test_apply_status_coalesces_and_bumps_updated_at(self):
        async def scenario(session):
            repo = OrderRepository(session)
            order = await repo.create_with_unique_number(_order_data(), lambda: "PALM-2-44444")
            before = order.updated_at
            await asyncio.sleep(0.01)
            await repo.apply_status(order, payment_status="paid", payment_reference="PALM-2-44444")
            return order, before

        order, before = self.run_in_session(scenario)
        self.assertEqual(order.payment_status, "paid")
        self.assertEqual(order.delivery_status, "pending")
        self.assertEqual(order.payment_reference, "PALM-2-44444")
        self.assertGreater(order.updated_at, before)

    def test_list_with_users_joins_account(self):
        async def scenario(session):
            user = await UserRepository(session).create(
                {"name": "Ada", "email": "ada@example.com", "password_hash": "x"}
            )
            repo = OrderRepository(session)
            await repo.create_with_unique_number(_order_data(user_id=user.id), lambda: "PALM-3-55555")
            await repo.create_with_unique_number(_order_data(), lambda: "PALM-3-66666")
            return await repo.list_with_users()

        rows = self.run_in_session(scenario)
        by_number = {order.order_number: (name, email) for order, name, email in rows}
        self.assertEqual(by_number["PALM-3-55555"], ("Ada", "ada@example.com"))
        self.assertEqual(by_number["PALM-3-66666"], (None, None))


class TestCartRepository(_SqliteTestCase):
    def test_add_accumulates_and_clear_empties(self):
        async def scenario(session):
            user = await UserRepository(session).create({"name": "Ada", "email": "a@x.com", "password_hash": "x"})
            product = await ProductRepository(session).create({"name": "Red Palm Oil", "price": 5000})
            carts = CartRepository(session)
            created = [await carts.add(user.id, product.id, 2), await carts.add(user.id, product.id, 3)]
            lines = await carts.list_for_user(user.id)
            quantity = lines[0].quantity
            cleared = await carts.clear_for_user(user.id)
            return created, len(lines), quantity, cleared, await carts.list_for_user(user.id)

        created, count, quantity, cleared, after = self.run_in_session(scenario)
        self.assertEqual(created, [True, False])
        self.assertEqual(count, 1)
        self.assertEqual(quantity, 5)
        self.assertEqual(cleared, 1)
        self.assertEqual(after, [])


class TestSubscriberRepository(_SqliteTestCase):
    def test_add_if_absent_is_idempotent(self):
        async def scenario(session):
            repo = SubscriberRepository(session)
            first = await repo.add_if_absent("fan@example.com")
            second = await repo.add_if_absent("fan@example.com")
            return first, second, await repo.all_emails()

        first, second, emails = self.run_in_session(scenario)
        self.assertIsNotNone(first)
        self.assertIsNone(second)
        self.assertEqual(emails, ["fan@example.com"])


class TestShippingSettingsRepository(_SqliteTestCase):
    def test_save_upserts_single_row(self):
        async def scenario(session):
            repo = ShippingSettingsRepository(session)
            missing = await repo.get_current()
            await repo.save(1500, 8000)
            saved = await repo.save(2000, 9000)
            return missing, saved.shipping_fee, saved.free_shipping_threshold, await repo.count()

        missing, fee, threshold, rows = self.run_in_session(scenario)
        self.assertIsNone(missing)
        self.assertEqual((fee, threshold), (2000, 9000))
        self.assertEqual(rows, 1)


if __name__ == "__main__":
    unittest.main()
