"""Unit tests for order numbers, status labels and the transition policy."""
from __future__ import annotations

import re
import unittest

from palmport.core.exceptions import InvalidStatusError, ValidationError
from palmport.services.order_status import (
    Channel,
    TransitionPolicy,
    delivery_description,
    delivery_label,
    generate_order_number,
    validate_delivery_status,
    validate_payment_status,
)

_NUMBER = re.compile(r"^(PALM|WA)-(\d+)-(\d{5})$")


class TestOrderNumber(unittest.TestCase):
    def test_online_prefix_and_shape(self) -> None:
        number = generate_order_number(Channel.ONLINE, now_ms=1700000000123)
        m = _NUMBER.match(number)
        self.assertIsNotNone(m)
        self.assertEqual(m.group(1), "PALM")
        self.assertEqual(m.group(2), "1700000000123")
        self.assertTrue(10000 <= int(m.group(3)) <= 99999)

    def test_assisted_prefix(self) -> None:
        self.assertTrue(generate_order_number(Channel.ASSISTED).startswith("WA-"))

    def test_suffix_range_over_many_draws(self) -> None:
        for _ in range(500):
            suffix = int(generate_order_number(Channel.ONLINE).rsplit("-", 1)[1])
            self.assertGreaterEqual(suffix, 10000)
            self.assertLessEqual(suffix, 99999)

    def test_millis_from_clock(self) -> None:
        millis = int(generate_order_number(Channel.ONLINE).split("-")[1])
        self.assertGreater(millis, 1_600_000_000_000)


class TestStatusValidation(unittest.TestCase):
    def test_none_passes(self) -> None:
        self.assertIsNone(validate_delivery_status(None))
        self.assertIsNone(validate_payment_status(None))

    def test_known_values_pass(self) -> None:
        for value in ("pending", "processing", "shipped", "delivered", "cancelled", "awaiting_contact"):
            self.assertEqual(validate_delivery_status(value), value)
        for value in ("pending", "paid", "failed", "refunded"):
            self.assertEqual(validate_payment_status(value), value)

    def test_unknown_delivery_rejected(self) -> None:
        with self.assertRaises(InvalidStatusError) as ctx:
            validate_delivery_status("lost")
        self.assertEqual(ctx.exception.http_status, 400)
        self.assertIsInstance(ctx.exception, ValidationError)

    def test_unknown_payment_rejected(self) -> None:
        with self.assertRaises(InvalidStatusError):
            validate_payment_status("PAID")


class TestLabels(unittest.TestCase):
    def test_labels(self) -> None:
        self.assertEqual(delivery_label("awaiting_contact"), "Awaiting Contact")
        self.assertEqual(delivery_label("shipped"), "Shipped")
        self.assertEqual(delivery_label(None), "Unknown")

    def test_description_fallback(self) -> None:
        self.assertIn("shipped", delivery_description("shipped"))
        self.assertEqual(delivery_description("mystery"), "Your order status has been updated.")


class TestTransitionPolicy(unittest.TestCase):
    def _check(self, policy, **kwargs):
        defaults = {
            "order_type": "online",
            "current_delivery": "pending",
            "current_payment": "pending",
        }
        defaults.update(kwargs)
        policy.check(**defaults)

    def test_permissive_allows_reopening_cancelled(self) -> None:
        self._check(TransitionPolicy(), current_delivery="cancelled", delivery_status="processing")

    def test_strict_keeps_cancelled_terminal(self) -> None:
        with self.assertRaises(InvalidStatusError):
            self._check(TransitionPolicy(strict=True), current_delivery="cancelled", delivery_status="processing")

    def test_strict_keeps_delivered_terminal(self) -> None:
        with self.assertRaises(InvalidStatusError):
            self._check(TransitionPolicy(strict=True), current_delivery="delivered", delivery_status="shipped")

    def test_strict_allows_same_value(self) -> None:
        self._check(TransitionPolicy(strict=True), current_delivery="delivered", delivery_status="delivered")

    def test_strict_refunded_terminal(self) -> None:
        with self.assertRaises(InvalidStatusError):
            self._check(
                TransitionPolicy(strict=True),
                order_type="assisted",
                current_payment="refunded",
                payment_status="paid",
            )

    def test_online_paid_reserved_for_verification(self) -> None:
        for policy in (TransitionPolicy(), TransitionPolicy(strict=True)):
            with self.assertRaises(InvalidStatusError):
                self._check(policy, payment_status="paid")

    def test_assisted_may_be_marked_paid(self) -> None:
        self._check(TransitionPolicy(), order_type="assisted", payment_status="paid")
        self._check(TransitionPolicy(strict=True), order_type="assisted", payment_status="paid")

    def test_refund_of_paid_online_order(self) -> None:
        self._check(TransitionPolicy(strict=True), current_payment="paid", payment_status="refunded")


if __name__ == "__main__":
    unittest.main()
