"""End-to-end API tests: real routers, services and repositories on a temporary SQLite file.

Mail transport and the payment gateway are in-memory fakes; background work
runs on the TestClient's event loop and is drained before assertions.
"""
from __future__ import annotations

import asyncio
import tempfile
import unittest
from types import SimpleNamespace
from uuid import uuid4

from fastapi.testclient import TestClient

from palmport.api.main import create_app
from palmport.config import AppConfig, AuthConfig, DatabaseConfig
from palmport.infra.database.engine import build_engine, build_session_factory, init_db
from palmport.integrations.paystack import PaymentVerification
from palmport.services.auth_service import AuthService, create_access_token
from palmport.services.dispatcher import BackgroundDispatcher
from palmport.services.notifications import NotificationGateway

_ADMIN_EMAIL = "admin@palmport.test"


class _FakeMailer:
    def __init__(self) -> None:
        self.sent = []

    async def send(self, to, subject, html, *, sender_name=None):
        self.sent.append((to, subject))

    def subjects(self, prefix):
        return [s for _, s in self.sent if s.startswith(prefix)]


class _GatedMailer(_FakeMailer):
    """Holds every send until the test opens the gate."""

    def __init__(self) -> None:
        super().__init__()
        self.gate = asyncio.Event()

    async def send(self, to, subject, html, *, sender_name=None):
        await self.gate.wait()
        await super().send(to, subject, html, sender_name=sender_name)


class _FakeGateway:
    def __init__(self) -> None:
        self.status = "success"
        self.initialized = []

    async def initialize_transaction(self, email, amount, reference, metadata=None, *, callback_url=None):
        self.initialized.append(
            {"email": email, "amount": amount, "reference": reference, "callback_url": callback_url}
        )
        return {"status": True, "data": {"authorization_url": f"https://checkout.test/{reference}"}}

    async def verify_transaction(self, reference):
        return PaymentVerification(
            reference=reference, status=self.status, raw={"status": self.status, "reference": reference},
        )


_ITEMS = [
    {"name": "Red Palm Oil", "size": "5L", "quantity": 2, "total": 10000},
    {"name": "Red Palm Oil", "size": "1L", "quantity": 5, "total": 5500},
]

_CUSTOMER = {
    "customer_name": "Ada Obi",
    "email": "ada@example.com",
    "phone": "08012345678",
    "address": "12 Palm Close",
    "city": "Enugu",
    "state": "Enugu",
}


class _ApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.engine = build_engine(DatabaseConfig(url=f"sqlite+aiosqlite:///{tmp.name}/api.db"))
        asyncio.run(init_db(self.engine))
        self.addCleanup(lambda: asyncio.run(self.engine.dispose()))

        self.mailer = _FakeMailer()
        self.gateway = _FakeGateway()
        self.auth_config = AuthConfig(
            jwt_secret="e2e-secret", admin_email=_ADMIN_EMAIL, admin_password="admin-pass",
        )
        app = create_app(
            AppConfig(app_base_url="https://shop.test", client_url="https://shop.test", rate_limit="1000/minute"),
            with_lifespan=False,
        )
        app.state.session_factory = build_session_factory(self.engine)
        app.state.auth_config = self.auth_config
        app.state.notifications = NotificationGateway(
            self.mailer, admin_email=_ADMIN_EMAIL, app_base_url="https://shop.test",
        )
        app.state.payments = self.gateway
        app.state.image_uploader = None
        app.state.dispatcher = BackgroundDispatcher()
        self.app = app

        self.client = TestClient(app)
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)

        admin = SimpleNamespace(id=uuid4(), email=_ADMIN_EMAIL, role="admin")
        self.admin_headers = {"Authorization": f"Bearer {create_access_token(admin, self.auth_config)}"}

    # ── helpers ──────────────────────────────────────────────────────────────

    def drain(self) -> None:
        self.client.portal.call(self.app.state.dispatcher.drain)

    def register(self, email="ada@example.com", name="Ada Obi", password="pw-123"):
        resp = self.client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
        self.assertEqual(resp.status_code, 200, resp.text)
        return {"Authorization": f"Bearer {resp.json()['token']}"}

    def create_product(self, **overrides):
        body = {"name": "Red Palm Oil", "price": 5000, "size": "5L", "features": ["Unrefined"]}
        body.update(overrides)
        resp = self.client.post("/api/products", json=body, headers=self.admin_headers)
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()

    def place_order(self, headers, path="/api/orders/whatsapp-order", **overrides):
        body = {**_CUSTOMER, "items": _ITEMS, "subtotal": 15500, "shipping": 0, "total": 15500}
        body.update(overrides)
        return self.client.post(path, json=body, headers=headers)


class TestHealth(_ApiTestCase):
    def test_health(self):
        self.assertEqual(self.client.get("/health").json(), {"status": "ok"})


class TestSubscribe(_ApiTestCase):
    def test_subscribe_twice_keeps_one_row(self):
        first = self.client.post("/api/subscribe", json={"email": "Fan@Example.com"})
        second = self.client.post("/api/subscribe", json={"email": "fan@example.com"})

        self.assertEqual(first.json()["message"], "Subscribed successfully")
        self.assertEqual(second.status_code, 200)
        self.assertEqual(second.json()["message"], "Already subscribed")

        listing = self.client.get("/api/subscribe", headers=self.admin_headers)
        self.assertEqual([s["email"] for s in listing.json()], ["fan@example.com"])
        self.drain()
        # confirmation + admin alert, once
        self.assertEqual(len(self.mailer.sent), 2)
        self.assertEqual(self.mailer.subjects("New Subscriber:"), ["New Subscriber: fan@example.com"])

    def test_response_does_not_wait_for_mail_delivery(self):
        mailer = _GatedMailer()
        self.app.state.notifications = NotificationGateway(
            mailer, admin_email=_ADMIN_EMAIL, app_base_url="https://shop.test",
        )

        resp = self.client.post("/api/subscribe", json={"email": "slow@example.com"})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["message"], "Subscribed successfully")
        self.assertEqual(mailer.sent, [])
        self.assertEqual(self.app.state.dispatcher.pending, 1)

        self.client.portal.call(mailer.gate.set)
        self.drain()
        self.assertEqual(sorted(to for to, _ in mailer.sent), [_ADMIN_EMAIL, "slow@example.com"])

    def test_invalid_address(self):
        resp = self.client.post("/api/subscribe", json={"email": "not-an-address"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "VALIDATION_ERROR")

    def test_broadcast_requires_subscribers(self):
        resp = self.client.post(
            "/api/subscribe/send", json={"subject": "Hi", "message": "<p>x</p>"}, headers=self.admin_headers,
        )
        self.assertEqual(resp.status_code, 400)

    def test_broadcast_and_delete(self):
        self.client.post("/api/subscribe", json={"email": "a@x.com"})
        self.client.post("/api/subscribe", json={"email": "b@x.com"})
        self.drain()
        self.mailer.sent.clear()

        resp = self.client.post(
            "/api/subscribe/send", json={"subject": "Fresh batch", "message": "<p>New oil</p>"},
            headers=self.admin_headers,
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(sorted(to for to, _ in self.mailer.sent), ["a@x.com", "b@x.com"])

        sub_id = self.client.get("/api/subscribe", headers=self.admin_headers).json()[0]["id"]
        self.assertEqual(self.client.delete(f"/api/subscribe/{sub_id}", headers=self.admin_headers).status_code, 200)
        self.assertEqual(self.client.delete(f"/api/subscribe/{sub_id}", headers=self.admin_headers).status_code, 404)


class TestAssistedOrders(_ApiTestCase):
    def test_assisted_order_then_my_orders(self):
        headers = self.register()

        created = self.place_order(headers)
        self.assertEqual(created.status_code, 201, created.text)
        order = created.json()
        self.assertTrue(order["order_number"].startswith("WA-"))
        self.assertEqual(order["delivery_status"], "awaiting_contact")
        self.assertEqual(order["payment_status"], "pending")
        self.assertEqual(order["order_type"], "assisted")

        mine = self.client.get("/api/orders/my-orders", headers=headers).json()
        self.assertEqual(len(mine), 1)
        self.assertEqual(mine[0]["id"], order["id"])
        self.assertEqual(mine[0]["delivery_status"], "awaiting_contact")
        self.assertEqual(mine[0]["total"], 15500)
        self.assertEqual(mine[0]["items"], _ITEMS)

    def test_background_enrollment_and_admin_notice(self):
        headers = self.register()
        self.place_order(headers)
        self.drain()
        self.place_order(headers)
        self.drain()

        subscribers = self.client.get("/api/subscribe", headers=self.admin_headers).json()
        self.assertEqual([s["email"] for s in subscribers], ["ada@example.com"])
        self.assertEqual(len(self.mailer.subjects("Welcome to PalmPort Updates!")), 1)
        self.assertEqual(len(self.mailer.subjects("🛒 New WhatsApp Order")), 2)

    def test_missing_fields_persist_nothing(self):
        headers = self.register()

        resp = self.place_order(headers, phone="", city="")

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "VALIDATION_ERROR")
        self.assertEqual(self.client.get("/api/orders/my-orders", headers=headers).json(), [])

    def test_empty_items_rejected(self):
        headers = self.register()
        resp = self.place_order(headers, items=[])
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "Order must contain at least one item")


class TestAuthGuards(_ApiTestCase):
    def test_missing_token_is_401(self):
        self.assertEqual(self.client.get("/api/orders/my-orders").status_code, 401)

    def test_bad_token_is_403(self):
        resp = self.client.get("/api/orders/my-orders", headers={"Authorization": "Bearer nonsense"})
        self.assertEqual(resp.status_code, 403)

    def test_customer_cannot_use_admin_routes(self):
        headers = self.register()
        self.assertEqual(self.client.get("/api/orders", headers=headers).status_code, 403)
        self.assertEqual(self.client.get("/api/admin/dashboard", headers=headers).status_code, 403)

    def test_login_errors(self):
        self.register()
        unknown = self.client.post("/api/auth/login", json={"email": "who@x.com", "password": "pw"})
        wrong = self.client.post("/api/auth/login", json={"email": "ada@example.com", "password": "nope"})
        ok = self.client.post("/api/auth/login", json={"email": "ada@example.com", "password": "pw-123"})
        self.assertEqual(unknown.status_code, 400)
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(ok.status_code, 200)

        verify = self.client.get("/api/auth/verify", headers={"Authorization": f"Bearer {ok.json()['token']}"})
        self.assertEqual(verify.json()["email"], "ada@example.com")

    def test_duplicate_registration(self):
        self.register()
        resp = self.client.post(
            "/api/auth/register", json={"name": "Ada", "email": "ada@example.com", "password": "x"},
        )
        self.assertEqual(resp.status_code, 400)

    def test_seeded_admin_can_log_in(self):
        async def seed():
            async with self.app.state.session_factory() as session:
                await AuthService(session, self.auth_config).ensure_admin_exists()
                await session.commit()

        asyncio.run(seed())
        resp = self.client.post("/api/admin/login", json={"email": _ADMIN_EMAIL, "password": "admin-pass"})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["user"]["role"], "admin")

        token = resp.json()["token"]
        self.assertTrue(
            self.client.get("/api/admin/verify", headers={"Authorization": f"Bearer {token}"}).json()["valid"]
        )


class TestPayments(_ApiTestCase):
    def test_initialize_validates_and_forwards(self):
        missing = self.client.post("/api/payments/initialize", json={"email": "ada@example.com"})
        self.assertEqual(missing.status_code, 400)

        resp = self.client.post(
            "/api/payments/initialize",
            json={"email": "ada@example.com", "amount": 1550000, "reference": "PALM-1-12345"},
        )
        self.assertEqual(resp.json()["data"]["authorization_url"], "https://checkout.test/PALM-1-12345")
        self.assertEqual(self.gateway.initialized[0]["callback_url"], "https://shop.test/payment/verify")

    def test_verify_marks_paid_clears_cart_and_retry_is_idempotent(self):
        headers = self.register()
        product = self.create_product()
        self.assertEqual(
            self.client.post("/api/cart/add", json={"productId": product["id"], "quantity": 2}, headers=headers)
            .json()["message"],
            "Item added to cart",
        )
        self.assertEqual(
            self.client.post("/api/cart/add", json={"productId": product["id"], "quantity": 1}, headers=headers)
            .json()["message"],
            "Cart updated successfully",
        )
        cart = self.client.get("/api/cart", headers=headers).json()
        self.assertEqual([line["quantity"] for line in cart], [3])

        order = self.place_order(headers, path="/api/orders").json()
        self.assertTrue(order["order_number"].startswith("PALM-"))
        self.assertEqual(order["delivery_status"], "pending")

        verified = self.client.get(f"/api/payments/verify/{order['order_number']}", headers=headers)
        self.assertEqual(verified.status_code, 200, verified.text)
        body = verified.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["message"], "Payment verified successfully")
        self.assertEqual(body["order"]["payment_status"], "paid")
        self.assertEqual(body["order"]["payment_reference"], order["order_number"])
        self.assertEqual(self.client.get("/api/cart", headers=headers).json(), [])
        self.assertEqual(len(self.mailer.subjects("✅ Payment Confirmed")), 1)

        retry = self.client.get(f"/api/payments/verify/{order['order_number']}", headers=headers)
        self.assertEqual(retry.status_code, 200)
        self.assertEqual(retry.json()["order"]["payment_status"], "paid")
        self.assertEqual(retry.json()["message"], "Payment already verified")
        self.assertEqual(len(self.mailer.subjects("✅ Payment Confirmed")), 1)

    def test_unconfirmed_payment_leaves_order_pending(self):
        headers = self.register()
        order = self.place_order(headers, path="/api/orders").json()
        self.gateway.status = "abandoned"

        resp = self.client.get(f"/api/payments/verify/{order['order_number']}", headers=headers)

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "PAYMENT_NOT_CONFIRMED")
        self.assertEqual(resp.json()["details"]["status"], "abandoned")
        mine = self.client.get("/api/orders/my-orders", headers=headers).json()
        self.assertEqual(mine[0]["payment_status"], "pending")

    def test_unknown_reference_is_404(self):
        headers = self.register()
        resp = self.client.get("/api/payments/verify/PALM-0-00000", headers=headers)
        self.assertEqual(resp.status_code, 404)


class TestAdminStatus(_ApiTestCase):
    def test_invalid_status_then_repeat_status_sends_one_email(self):
        headers = self.register()
        order = self.place_order(headers).json()
        url = f"/api/orders/{order['id']}/status"

        bad = self.client.put(url, json={"delivery_status": "teleported"}, headers=self.admin_headers)
        self.assertEqual(bad.status_code, 400)
        self.assertEqual(bad.json()["code"], "INVALID_STATUS")
        mine = self.client.get("/api/orders/my-orders", headers=headers).json()
        self.assertEqual(mine[0]["delivery_status"], "awaiting_contact")

        first = self.client.put(url, json={"delivery_status": "shipped"}, headers=self.admin_headers)
        second = self.client.put(
            f"/api/admin/orders/{order['id']}/status", json={"delivery_status": "shipped"}, headers=self.admin_headers,
        )
        self.assertEqual(first.status_code, 200)
        self.assertEqual(second.status_code, 200)
        self.assertEqual(second.json()["delivery_status"], "shipped")
        self.drain()

        updates = self.mailer.subjects("📦 Order Status Update")
        self.assertEqual(updates, [f"📦 Order Status Update - #{order['order_number']} - Shipped"])

    def test_admin_may_record_payment_only_for_assisted_orders(self):
        headers = self.register()
        assisted = self.place_order(headers).json()
        online = self.place_order(headers, path="/api/orders").json()

        settled = self.client.put(
            f"/api/orders/{assisted['id']}/status", json={"payment_status": "paid"}, headers=self.admin_headers,
        )
        refused = self.client.put(
            f"/api/orders/{online['id']}/status", json={"payment_status": "paid"}, headers=self.admin_headers,
        )

        self.assertEqual(settled.status_code, 200)
        self.assertEqual(settled.json()["payment_status"], "paid")
        self.assertEqual(refused.status_code, 400)
        self.assertEqual(refused.json()["code"], "INVALID_STATUS")

    def test_missing_order_is_404(self):
        resp = self.client.put(
            f"/api/orders/{uuid4()}/status", json={"delivery_status": "shipped"}, headers=self.admin_headers,
        )
        self.assertEqual(resp.status_code, 404)

    def test_admin_listing_and_dashboard(self):
        headers = self.register()
        self.place_order(headers)
        self.place_order(headers, path="/api/orders")

        listing = self.client.get("/api/orders", headers=self.admin_headers).json()
        self.assertEqual(len(listing), 2)
        self.assertTrue(all(row["user_email"] == "ada@example.com" for row in listing))

        page = self.client.get("/api/admin/orders?page=2&limit=1", headers=self.admin_headers).json()
        self.assertEqual((page["total"], page["page"], page["total_pages"]), (2, 2, 2))
        self.assertEqual(len(page["orders"]), 1)

        dashboard = self.client.get("/api/admin/dashboard", headers=self.admin_headers).json()
        self.assertEqual(dashboard["total_orders"], 2)
        self.assertEqual(dashboard["pending_orders"], 1)
        self.assertEqual(len(dashboard["recent_orders"]), 2)


class TestShipping(_ApiTestCase):
    def test_defaults_then_update(self):
        defaults = self.client.get("/api/shipping/settings").json()
        self.assertEqual((defaults["shipping_fee"], defaults["free_shipping_threshold"]), (1000, 5000))

        missing = self.client.put("/api/shipping/settings", json={"shipping_fee": 1200}, headers=self.admin_headers)
        self.assertEqual(missing.status_code, 400)

        resp = self.client.put(
            "/api/shipping/settings",
            json={"shipping_fee": 1500, "free_shipping_threshold": 10000},
            headers=self.admin_headers,
        )
        self.assertEqual(resp.json()["message"], "Shipping settings updated successfully")
        current = self.client.get("/api/shipping/admin/settings", headers=self.admin_headers).json()
        self.assertEqual((current["shipping_fee"], current["free_shipping_threshold"]), (1500, 10000))


class TestCatalog(_ApiTestCase):
    def test_batch_traceability(self):
        product = self.create_product()
        created = self.client.post(
            "/api/batches",
            json={"batch_id": "PP-2024-001", "title": "Harvest", "state": "Enugu", "product_id": product["id"]},
            headers=self.admin_headers,
        )
        self.assertEqual(created.status_code, 201, created.text)
        batch = created.json()
        self.assertEqual(batch["trace_url"], "https://shop.test/trace/PP-2024-001")
        self.assertTrue(batch["qr_code_url"].startswith("data:image/png;base64,"))

        found = self.client.get("/api/batches/PP-2024-001").json()
        self.assertEqual(found["product_name"], "Red Palm Oil")
        self.assertEqual(found["product_size"], "5L")

        duplicate = self.client.post("/api/batches", json={"batch_id": "PP-2024-001"}, headers=self.admin_headers)
        self.assertEqual(duplicate.status_code, 409)
        self.assertEqual(self.client.get("/api/batches/unknown").status_code, 404)

    def test_product_update_keeps_image_and_delete(self):
        product = self.create_product()
        updated = self.client.put(
            f"/api/products/{product['id']}", json={"price": 5500, "in_stock": False}, headers=self.admin_headers,
        ).json()
        self.assertEqual(updated["price"], 5500)
        self.assertFalse(updated["in_stock"])
        self.assertEqual(updated["name"], "Red Palm Oil")

        upload = self.client.post(
            "/api/products", json={"name": "X", "price": 1, "imageBase64": "data:image/png;base64,AAAA"},
            headers=self.admin_headers,
        )
        self.assertEqual(upload.status_code, 400)

        self.assertEqual(self.client.delete(f"/api/products/{product['id']}", headers=self.admin_headers).status_code, 200)
        self.assertEqual(self.client.get("/api/products").json(), [])


if __name__ == "__main__":
    unittest.main()
