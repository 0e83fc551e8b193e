"""Catalog ORM models: products and traceable production batches."""
from __future__ import annotations

import uuid
from typing import List, Optional

from sqlalchemy import Boolean, ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from palmport.infra.database.models.base import JSONType, Base, CreatedAtMixin, _uuid_pk


class Product(Base, CreatedAtMixin):
    __tablename__ = "products"

    id: Mapped[uuid.UUID] = _uuid_pk()
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    original_price: Mapped[Optional[float]] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=True)
    size: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    features: Mapped[List[str]] = mapped_column(JSONType, nullable=False, default=list)
    in_stock: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class Batch(Base, CreatedAtMixin):
    """A production batch; ``batch_id`` is the public code printed on the QR label."""

    __tablename__ = "batches"

    id: Mapped[uuid.UUID] = _uuid_pk()
    batch_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    state: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    manufacturer: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    quality: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    manufacture_date: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    product_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("products.id", ondelete="SET NULL"), nullable=True
    )
    trace_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # PNG data URI encoding trace_url
    qr_code_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
