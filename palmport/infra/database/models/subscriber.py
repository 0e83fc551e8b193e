"""Mailing-list subscriber ORM model."""
from __future__ import annotations

import uuid

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from palmport.infra.database.models.base import Base, CreatedAtMixin, _uuid_pk


class Subscriber(Base, CreatedAtMixin):
    """Created once per address, never updated."""

    __tablename__ = "subscribers"

    id: Mapped[uuid.UUID] = _uuid_pk()
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
