"""Order ORM model."""
from __future__ import annotations

import uuid
from typing import Any, List, Optional

from sqlalchemy import ForeignKey, Index, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from palmport.infra.database.models.base import JSONType, Base, TimestampMixin, _uuid_pk


class Order(Base, TimestampMixin):
    """A checkout, placed through the online (Paystack) or assisted (WhatsApp) channel."""

    __tablename__ = "orders"
    __table_args__ = (
        Index("ix_orders_order_number", "order_number", unique=True),
        Index("ix_orders_user_created", "user_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()

    # Nullable so orders survive account removal
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    # PALM-<millis>-<5 digits> | WA-<millis>-<5 digits>; doubles as the Paystack reference
    order_number: Mapped[str] = mapped_column(String(40), nullable=False)

    customer_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    city: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    state: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # [{name, size, quantity, total}, ...] in checkout order
    items: Mapped[List[dict[str, Any]]] = mapped_column(JSONType, nullable=False, default=list)

    subtotal: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    shipping: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    total: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # online | assisted
    order_type: Mapped[str] = mapped_column(String(16), nullable=False)
    # pending | paid | failed | refunded
    payment_status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
    # pending | processing | shipped | delivered | cancelled | awaiting_contact
    delivery_status: Mapped[str] = mapped_column(
        String(32), nullable=False, default="pending", server_default="pending"
    )
    payment_reference: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
