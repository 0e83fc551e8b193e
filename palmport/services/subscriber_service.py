"""SubscriberService: the upsert-only mailing list."""
from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from palmport.core.exceptions import NotFoundError, ValidationError
from palmport.infra.database.models.subscriber import Subscriber
from palmport.infra.database.repositories.subscriber import SubscriberRepository
from palmport.services.dispatcher import Dispatcher
from palmport.services.notifications import NotificationGateway

logger = logging.getLogger(__name__)


def normalize_email(email: Optional[str]) -> Optional[str]:
    """Lowercased, stripped address, or ``None`` when it cannot be an address."""
    value = (email or "").strip().lower()
    if "@" not in value:
        return None
    return value


class SubscriberService:
    def __init__(
        self,
        session: AsyncSession,
        notifications: NotificationGateway,
        *,
        dispatcher: Optional[Dispatcher] = None,
    ) -> None:
        """*dispatcher* runs sign-up emails off the request; without one they are awaited."""
        self._repo = SubscriberRepository(session)
        self._notifications = notifications
        self._dispatcher = dispatcher

    async def subscribe(self, email: Optional[str]) -> bool:
        """Add *email* to the list. Returns ``True`` when the address is new.

        Confirmation and admin alert go out only for a new address, after
        commit, through the dispatcher when one is given.
        """
        address = normalize_email(email)
        if address is None:
            raise ValidationError("A valid email is required")
        created = await self._repo.add_if_absent(address)
        if created is None:
            logger.info("SubscriberService: %s already subscribed", address)
            return False
        await self._repo.session.commit()
        logger.info("SubscriberService: subscribed %s", address)
        notice = self._notifications.subscriber_joined(address)
        if self._dispatcher is None:
            await notice
        else:
            self._dispatcher.submit(notice, name=f"subscriber-joined:{address}")
        return True

    async def enroll_customer(self, email: Optional[str], customer_name: str = "") -> bool:
        """Auto-enroll an ordering customer; a welcome email goes to new addresses only."""
        address = normalize_email(email)
        if address is None:
            return False
        created = await self._repo.add_if_absent(address)
        if created is None:
            return False
        await self._repo.session.commit()
        logger.info("SubscriberService: auto-subscribed customer %s", address)
        await self._notifications.welcome_customer(address, customer_name)
        return True

    async def list_subscribers(self) -> List[Subscriber]:
        return await self._repo.list_all()

    async def delete_subscriber(self, id: UUID) -> None:
        if not await self._repo.delete(id):
            raise NotFoundError("Subscriber not found", details={"id": str(id)})

    async def broadcast(self, subject: str, message: str) -> int:
        if not (subject or "").strip() or not (message or "").strip():
            raise ValidationError("Subject and message are required")
        recipients = await self._repo.all_emails()
        if not recipients:
            raise ValidationError("No subscribers to email.")
        sent = await self._notifications.broadcast(recipients, subject, message)
        logger.info("SubscriberService: broadcast %r to %d/%d subscribers", subject, sent, len(recipients))
        return len(recipients)
