"""Single-row shipping fee configuration."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, Numeric, func
from sqlalchemy.orm import Mapped, mapped_column

from palmport.infra.database.models.base import Base, utcnow

SETTINGS_ROW_ID = 1
DEFAULT_SHIPPING_FEE = 1000
DEFAULT_FREE_SHIPPING_THRESHOLD = 5000


class ShippingSettings(Base):
    __tablename__ = "shipping_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=SETTINGS_ROW_ID)
    shipping_fee: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False)
    free_shipping_threshold: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, server_default=func.now(), onupdate=utcnow
    )
