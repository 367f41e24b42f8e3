# 🛍️ teleshop/domain/shop/__init__.py
"""
🛍️ Пакет `domain.shop` — сутності магазину та контракти колабораторів.
"""

from .entities import (
    CartLine,
    Category,
    CustomerInfo,
    DeliveryMethod,
    Inquiry,
    Order,
    OrderItem,
    OrderStatus,
    PaymentMethod,
    PricingTier,
    Product,
    ProductRating,
    TrackedUser,
    UserPreferences,
    WishlistItem,
)
from .interfaces import ILocalizer, IMessageTransport, IShopRepository

__all__ = [
    "CartLine",
    "Category",
    "CustomerInfo",
    "DeliveryMethod",
    "Inquiry",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentMethod",
    "PricingTier",
    "Product",
    "ProductRating",
    "TrackedUser",
    "UserPreferences",
    "WishlistItem",
    "ILocalizer",
    "IMessageTransport",
    "IShopRepository",
]
