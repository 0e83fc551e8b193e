"""User account ORM model (customers and the admin)."""
from __future__ import annotations

import uuid

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from palmport.infra.database.models.base import Base, CreatedAtMixin, _uuid_pk

ROLE_USER = "user"
ROLE_ADMIN = "admin"


class User(Base, CreatedAtMixin):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = _uuid_pk()
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default=ROLE_USER)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
