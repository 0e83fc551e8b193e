"""Repositories for the palmport database."""
from palmport.infra.database.repositories.base import BaseRepository
from palmport.infra.database.repositories.cart import CartRepository
from palmport.infra.database.repositories.catalog import BatchRepository, ProductRepository
from palmport.infra.database.repositories.order import OrderRepository
from palmport.infra.database.repositories.shipping import ShippingSettingsRepository
from palmport.infra.database.repositories.subscriber import SubscriberRepository
from palmport.infra.database.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "OrderRepository",
    "CartRepository",
    "SubscriberRepository",
    "UserRepository",
    "ProductRepository",
    "BatchRepository",
    "ShippingSettingsRepository",
]
