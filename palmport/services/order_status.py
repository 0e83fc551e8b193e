"""Order channels, status enums, customer-facing labels and the transition table."""
from __future__ import annotations

import random
import time
from enum import Enum
from typing import Dict, FrozenSet, Optional

from palmport.core.exceptions import InvalidStatusError


class Channel(str, Enum):
    ONLINE = "online"
    ASSISTED = "assisted"

    @property
    def prefix(self) -> str:
        return "PALM" if self is Channel.ONLINE else "WA"


class DeliveryStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    AWAITING_CONTACT = "awaiting_contact"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


DELIVERY_LABELS: Dict[str, str] = {
    "pending": "Pending",
    "processing": "Processing",
    "shipped": "Shipped",
    "delivered": "Delivered",
    "cancelled": "Cancelled",
    "awaiting_contact": "Awaiting Contact",
}

DELIVERY_DESCRIPTIONS: Dict[str, str] = {
    "pending": "Your order has been received and is being processed.",
    "processing": "We are currently preparing your order for shipment.",
    "shipped": "Your order has been shipped and is on its way to you.",
    "delivered": "Your order has been delivered successfully.",
    "cancelled": "Your order has been cancelled.",
    "awaiting_contact": "We are awaiting contact to confirm your order details.",
}

_ALL_DELIVERY: FrozenSet[str] = frozenset(s.value for s in DeliveryStatus)
_ALL_PAYMENT: FrozenSet[str] = frozenset(s.value for s in PaymentStatus)

# Permissive table: any delivery/payment value may follow any other.
PERMISSIVE_DELIVERY_TRANSITIONS: Dict[str, FrozenSet[str]] = {s: _ALL_DELIVERY for s in _ALL_DELIVERY}
PERMISSIVE_PAYMENT_TRANSITIONS: Dict[str, FrozenSet[str]] = {s: _ALL_PAYMENT for s in _ALL_PAYMENT}

STRICT_DELIVERY_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    "awaiting_contact": frozenset({"awaiting_contact", "pending", "processing", "cancelled"}),
    "pending": frozenset({"pending", "processing", "shipped", "cancelled"}),
    "processing": frozenset({"processing", "shipped", "cancelled"}),
    "shipped": frozenset({"shipped", "delivered"}),
    "delivered": frozenset({"delivered"}),
    "cancelled": frozenset({"cancelled"}),
}
STRICT_PAYMENT_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    "pending": frozenset({"pending", "paid", "failed"}),
    "failed": frozenset({"failed", "pending", "paid"}),
    "paid": frozenset({"paid", "refunded"}),
    "refunded": frozenset({"refunded"}),
}


def delivery_label(status: Optional[str]) -> str:
    if not status:
        return "Unknown"
    return DELIVERY_LABELS.get(status, status.replace("_", " ").title())


def delivery_description(status: Optional[str]) -> str:
    return DELIVERY_DESCRIPTIONS.get(status or "", "Your order status has been updated.")


def validate_delivery_status(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in _ALL_DELIVERY:
        raise InvalidStatusError(
            f"Invalid delivery status: {value}",
            details={"field": "delivery_status", "allowed": sorted(_ALL_DELIVERY)},
        )
    return value


def validate_payment_status(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in _ALL_PAYMENT:
        raise InvalidStatusError(
            f"Invalid payment status: {value}",
            details={"field": "payment_status", "allowed": sorted(_ALL_PAYMENT)},
        )
    return value


class TransitionPolicy:
    """Decides whether a requested admin status change is allowed.

    ``paid`` on an online order is reserved for gateway verification in
    both modes; assisted orders are settled offline so an admin may mark
    them paid.
    """

    def __init__(self, *, strict: bool = False) -> None:
        self.strict = strict
        self._delivery = STRICT_DELIVERY_TRANSITIONS if strict else PERMISSIVE_DELIVERY_TRANSITIONS
        self._payment = STRICT_PAYMENT_TRANSITIONS if strict else PERMISSIVE_PAYMENT_TRANSITIONS

    def check(
        self,
        *,
        order_type: str,
        current_delivery: str,
        current_payment: str,
        delivery_status: Optional[str] = None,
        payment_status: Optional[str] = None,
    ) -> None:
        """Raise InvalidStatusError for a disallowed change.

        Only online orders keep ``paid`` exclusive to payment verification;
        assisted orders are settled over WhatsApp or bank transfer, outside the
        gateway, so an admin records their payment here.
        """
        if delivery_status is not None and delivery_status not in self._delivery.get(current_delivery, _ALL_DELIVERY):
            raise InvalidStatusError(
                f"Cannot move delivery status from {current_delivery} to {delivery_status}",
                details={"field": "delivery_status", "from": current_delivery, "to": delivery_status},
            )
        if payment_status is None or payment_status == current_payment:
            return
        if payment_status == PaymentStatus.PAID.value and order_type == Channel.ONLINE.value:
            raise InvalidStatusError(
                "Online orders are marked paid only through payment verification",
                details={"field": "payment_status", "to": payment_status},
            )
        if payment_status not in self._payment.get(current_payment, _ALL_PAYMENT):
            raise InvalidStatusError(
                f"Cannot move payment status from {current_payment} to {payment_status}",
                details={"field": "payment_status", "from": current_payment, "to": payment_status},
            )


def generate_order_number(channel: Channel, *, now_ms: Optional[int] = None) -> str:
    """``<PREFIX>-<unix millis>-<10000..99999>``."""
    millis = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{channel.prefix}-{millis}-{random.randint(10000, 99999)}"
