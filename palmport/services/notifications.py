"""NotificationGateway: render and send transactional email, best effort."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Protocol

from palmport.infra.database.models.order import Order
from palmport.services import email_templates

logger = logging.getLogger(__name__)


class MailTransport(Protocol):
    async def send(self, to: str, subject: str, html: str, *, sender_name: Optional[str] = None) -> None:
        ...


def order_context(order: Order, **extra: Any) -> Dict[str, Any]:
    """Flatten an order into the context dict the templates expect."""
    ctx: Dict[str, Any] = {
        "order_number": order.order_number,
        "order_type": order.order_type,
        "customer_name": order.customer_name,
        "email": order.email,
        "phone": order.phone,
        "address": order.address,
        "city": order.city,
        "state": order.state,
        "items": list(order.items or []),
        "subtotal": order.subtotal,
        "shipping": order.shipping,
        "total": order.total,
        "notes": order.notes,
        "payment_status": order.payment_status,
        "delivery_status": order.delivery_status,
        "payment_reference": order.payment_reference,
    }
    ctx.update(extra)
    return ctx


class NotificationGateway:
    """Stateless wrapper around the mail transport.

    Nothing raised here ever reaches the caller: an email that cannot be
    rendered or delivered is logged and dropped.
    """

    def __init__(
        self,
        transport: MailTransport,
        *,
        admin_email: Optional[str] = None,
        app_base_url: Optional[str] = None,
    ) -> None:
        self._transport = transport
        self._admin_email = admin_email
        self._dashboard_url = f"{app_base_url.rstrip('/')}/admin/orders" if app_base_url else None

    async def send_transactional_email(
        self,
        template: str,
        recipient: Optional[str],
        context: Mapping[str, Any],
        *,
        sender_name: Optional[str] = None,
    ) -> bool:
        if not recipient:
            logger.warning("NotificationGateway: no recipient for %s; skipped", template)
            return False
        try:
            subject, body = email_templates.render(template, context)
            await self._transport.send(recipient, subject, body, sender_name=sender_name)
        except Exception as exc:
            logger.warning(
                "NotificationGateway: %s to %s failed: %s", template, recipient, exc,
            )
            return False
        logger.info("NotificationGateway: sent %s to %s", template, recipient)
        return True

    # ── Order events ────────────────────────────────────────────────────────

    async def order_received(self, order: Order) -> None:
        await self.send_transactional_email(
            "order_received_admin",
            self._admin_email,
            order_context(order, dashboard_url=self._dashboard_url),
            sender_name="PalmPort Orders",
        )

    async def status_changed(self, order: Order, old_status: Optional[str], new_status: str) -> None:
        await self.send_transactional_email(
            "order_status_update",
            order.email,
            order_context(order, old_status=old_status, new_status=new_status),
        )

    async def payment_confirmed(self, order: Order) -> None:
        ctx = order_context(order, dashboard_url=self._dashboard_url)
        await self.send_transactional_email("payment_confirmed_customer", order.email, ctx)
        await self.send_transactional_email(
            "payment_confirmed_admin", self._admin_email, ctx, sender_name="PalmPort Notifications",
        )

    # ── Mailing list events ─────────────────────────────────────────────────

    async def welcome_customer(self, email: str, customer_name: str = "") -> None:
        await self.send_transactional_email(
            "welcome_customer", email, {"customer_name": customer_name}, sender_name="PalmPort Updates",
        )

    async def subscriber_joined(self, email: str) -> None:
        await self.send_transactional_email("welcome_subscriber", email, {}, sender_name="PalmPort Updates")
        await self.send_transactional_email(
            "subscriber_alert_admin", self._admin_email, {"email": email}, sender_name="PalmPort Notifications",
        )

    async def broadcast(self, recipients: Iterable[str], subject: str, message: str) -> int:
        """Send one copy per recipient; returns how many were handed to the transport."""
        sent = 0
        for email in recipients:
            if await self.send_transactional_email(
                "broadcast", email, {"subject": subject, "message": message}, sender_name="PalmPort Updates",
            ):
                sent += 1
        return sent
