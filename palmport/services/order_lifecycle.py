"""OrderLifecycle: order creation, payment reconciliation and status changes.

Database work happens on the request session. Side effects (emails,
subscriber enrollment) start only after the transaction that justifies
them has committed, and their failures never reach the caller.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from palmport.core.exceptions import (
    ConfigurationError,
    NotFoundError,
    PaymentNotConfirmedError,
    ValidationError,
)
from palmport.infra.database.models.order import Order
from palmport.infra.database.repositories.cart import CartRepository
from palmport.infra.database.repositories.order import OrderRepository
from palmport.integrations.paystack import PaymentVerification
from palmport.services.dispatcher import Dispatcher
from palmport.services.notifications import NotificationGateway
from palmport.services.order_status import (
    Channel,
    DeliveryStatus,
    PaymentStatus,
    TransitionPolicy,
    generate_order_number,
    validate_delivery_status,
    validate_payment_status,
)
from palmport.services.subscriber_service import SubscriberService

logger = logging.getLogger(__name__)

_ASSISTED_REQUIRED = ("customer_name", "email", "phone", "address", "city", "state")


class PaymentGateway(Protocol):
    async def verify_transaction(self, reference: str) -> PaymentVerification:
        ...


@dataclass
class CustomerDetails:
    customer_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None


@dataclass
class OrderAmounts:
    subtotal: float = 0
    shipping: float = 0
    total: float = 0


@dataclass
class VerificationResult:
    order: Order
    payment: Dict[str, Any] = field(default_factory=dict)
    already_paid: bool = False


class OrderLifecycle:
    def __init__(
        self,
        session: AsyncSession,
        *,
        notifications: NotificationGateway,
        dispatcher: Dispatcher,
        payments: Optional[PaymentGateway] = None,
        session_factory: Optional[async_sessionmaker] = None,
        policy: Optional[TransitionPolicy] = None,
        number_generator: Callable[[Channel], str] = generate_order_number,
    ) -> None:
        self._session = session
        self._orders = OrderRepository(session)
        self._carts = CartRepository(session)
        self._notifications = notifications
        self._dispatcher = dispatcher
        self._payments = payments
        self._session_factory = session_factory
        self._policy = policy or TransitionPolicy()
        self._number_generator = number_generator

    # ── Create ──────────────────────────────────────────────────────────────

    async def create(
        self,
        channel: Channel,
        customer: CustomerDetails,
        items: Optional[List[Dict[str, Any]]],
        amounts: OrderAmounts,
        user_id: Optional[UUID],
        *,
        notes: Optional[str] = None,
        payment_reference: Optional[str] = None,
    ) -> Order:
        """Persist a new order and schedule its admin notice and subscriber enrollment."""
        if channel is Channel.ASSISTED:
            missing = [name for name in _ASSISTED_REQUIRED if not (getattr(customer, name) or "").strip()]
            if missing:
                raise ValidationError(
                    "Missing required fields: customer_name, email, phone, address, city, state are required",
                    details={"missing": missing},
                )
        if not items or not isinstance(items, list):
            raise ValidationError("Order must contain at least one item")

        data: Dict[str, Any] = {
            "user_id": user_id,
            "customer_name": customer.customer_name,
            "email": customer.email,
            "phone": customer.phone,
            "address": customer.address,
            "city": customer.city,
            "state": customer.state,
            "items": list(items),
            "subtotal": amounts.subtotal,
            "shipping": amounts.shipping,
            "total": amounts.total,
            "notes": notes or "",
            "order_type": channel.value,
            "payment_status": PaymentStatus.PENDING.value,
        }
        if channel is Channel.ASSISTED:
            data["delivery_status"] = DeliveryStatus.AWAITING_CONTACT.value
        elif payment_reference:
            data["payment_reference"] = payment_reference

        order = await self._orders.create_with_unique_number(
            data, lambda: self._number_generator(channel)
        )
        await self._session.commit()
        logger.info(
            "OrderLifecycle: created %s order %s (user=%s, items=%d, total=%s)",
            channel.value, order.order_number, user_id, len(items), order.total,
        )

        if order.email:
            self._dispatcher.submit(
                self._enroll_subscriber(order.email, order.customer_name or ""),
                name=f"enroll:{order.order_number}",
            )
        self._dispatcher.submit(
            self._notifications.order_received(order), name=f"order-received:{order.order_number}"
        )
        return order

    async def _enroll_subscriber(self, email: str, customer_name: str) -> None:
        if self._session_factory is None:
            logger.debug("OrderLifecycle: no session factory; skipping enrollment of %s", email)
            return
        try:
            async with self._session_factory() as session:
                await SubscriberService(session, self._notifications).enroll_customer(email, customer_name)
        except Exception as exc:
            logger.warning("OrderLifecycle: subscriber enrollment for %s failed: %s", email, exc)

    # ── Payment ─────────────────────────────────────────────────────────────

    async def verify_payment(self, reference: str, user_id: Optional[UUID]) -> VerificationResult:
        """Confirm *reference* with the gateway and mark its order paid.

        A reference whose order is already paid returns the stored order
        without touching it or sending email again.
        """
        if self._payments is None:
            raise ConfigurationError("Payment gateway is not configured")
        verification = await self._payments.verify_transaction(reference)
        if not verification.succeeded:
            logger.info("OrderLifecycle: payment %s not confirmed (%s)", reference, verification.status)
            raise PaymentNotConfirmedError(
                "Payment verification failed",
                details={"status": verification.status, "reference": reference},
            )

        order = await self._orders.get_by_order_number(reference)
        if order is None:
            raise NotFoundError("Order not found", details={"reference": reference})

        if order.payment_status == PaymentStatus.PAID.value:
            logger.info("OrderLifecycle: %s already paid; nothing to do", reference)
            return VerificationResult(order=order, payment=verification.raw, already_paid=True)

        await self._orders.apply_status(
            order, payment_status=PaymentStatus.PAID.value, payment_reference=reference
        )
        cleared = 0
        if user_id is not None:
            cleared = await self._carts.clear_for_user(user_id)
        await self._session.commit()
        logger.info(
            "OrderLifecycle: %s marked paid; cleared %d cart line(s) for user %s",
            reference, cleared, user_id,
        )

        try:
            await self._notifications.payment_confirmed(order)
        except Exception as exc:
            logger.warning("OrderLifecycle: payment confirmation email for %s failed: %s", reference, exc)
        return VerificationResult(order=order, payment=verification.raw)

    # ── Status ──────────────────────────────────────────────────────────────

    async def update_status(
        self,
        order_id: UUID,
        *,
        delivery_status: Optional[str] = None,
        payment_status: Optional[str] = None,
    ) -> Order:
        validate_delivery_status(delivery_status)
        validate_payment_status(payment_status)

        order = await self._orders.get_by_id(order_id)
        if order is None:
            raise NotFoundError("Order not found", details={"id": str(order_id)})

        previous = order.delivery_status
        self._policy.check(
            order_type=order.order_type,
            current_delivery=previous,
            current_payment=order.payment_status,
            delivery_status=delivery_status,
            payment_status=payment_status,
        )
        await self._orders.apply_status(
            order, delivery_status=delivery_status, payment_status=payment_status
        )
        await self._session.commit()
        logger.info(
            "OrderLifecycle: %s status delivery=%s payment=%s",
            order.order_number, order.delivery_status, order.payment_status,
        )

        if delivery_status is not None and delivery_status != previous:
            self._dispatcher.submit(
                self._notifications.status_changed(order, previous, delivery_status),
                name=f"status:{order.order_number}",
            )
        return order

    # ── Queries ─────────────────────────────────────────────────────────────

    async def orders_for_user(self, user_id: UUID) -> List[Order]:
        return await self._orders.list_for_user(user_id)

    async def all_orders_with_users(self, *, skip: int = 0, limit: int = 500):
        return await self._orders.list_with_users(skip=skip, limit=limit)
