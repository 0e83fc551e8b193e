"""
palmport.infra.database – async engine, session factory, models and repositories.

Public API
──────────
  build_engine, build_session_factory, init_db, ensure_database_exists
  Base and the ORM models
  BaseRepository and the per-entity repositories
"""
from palmport.infra.database.engine import (
    build_engine,
    build_session_factory,
    ensure_database_exists,
    init_db,
)
from palmport.infra.database.models import (
    Base,
    Batch,
    CartItem,
    Order,
    Product,
    ShippingSettings,
    Subscriber,
    User,
)
from palmport.infra.database.repositories import (
    BaseRepository,
    BatchRepository,
    CartRepository,
    OrderRepository,
    ProductRepository,
    ShippingSettingsRepository,
    SubscriberRepository,
    UserRepository,
)

__all__ = [
    "build_engine",
    "build_session_factory",
    "init_db",
    "ensure_database_exists",
    "Base",
    "User",
    "Order",
    "CartItem",
    "Subscriber",
    "Product",
    "Batch",
    "ShippingSettings",
    "BaseRepository",
    "UserRepository",
    "OrderRepository",
    "CartRepository",
    "SubscriberRepository",
    "ProductRepository",
    "BatchRepository",
    "ShippingSettingsRepository",
]
