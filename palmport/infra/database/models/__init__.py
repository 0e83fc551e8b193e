"""
palmport.infra.database.models – SQLAlchemy 2.0 ORM models.

Exports Base, mixins, and all model classes.
"""
from palmport.infra.database.models.base import Base, CreatedAtMixin, TimestampMixin, _uuid_pk
from palmport.infra.database.models.cart import CartItem
from palmport.infra.database.models.catalog import Batch, Product
from palmport.infra.database.models.order import Order
from palmport.infra.database.models.shipping import ShippingSettings
from palmport.infra.database.models.subscriber import Subscriber
from palmport.infra.database.models.user import ROLE_ADMIN, ROLE_USER, User

__all__ = [
    "Base",
    "CreatedAtMixin",
    "TimestampMixin",
    "_uuid_pk",
    "User",
    "ROLE_ADMIN",
    "ROLE_USER",
    "Order",
    "CartItem",
    "Subscriber",
    "Product",
    "Batch",
    "ShippingSettings",
]
