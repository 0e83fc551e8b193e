"""Service layer: order lifecycle, notifications, subscribers, cart, catalog, shipping and auth."""
from palmport.services.auth_service import AuthService
from palmport.services.cart_service import CartService
from palmport.services.catalog_service import CatalogService
from palmport.services.dashboard_service import DashboardService
from palmport.services.dispatcher import BackgroundDispatcher
from palmport.services.notifications import NotificationGateway
from palmport.services.order_lifecycle import OrderLifecycle
from palmport.services.shipping_service import ShippingService
from palmport.services.subscriber_service import SubscriberService

__all__ = [
    "OrderLifecycle",
    "NotificationGateway",
    "BackgroundDispatcher",
    "SubscriberService",
    "CartService",
    "CatalogService",
    "ShippingService",
    "AuthService",
    "DashboardService",
]
