# 🧱 teleshop/bot/commands/__init__.py
"""
🧱 Фічі бота: кожна реєструє свої callback-маршрути (і, за потреби, команди) у спільному реєстрі.
"""

from .base import BaseFeature, FeatureDeps
from .cart_feature import CartFeature
from .catalog_feature import CatalogFeature
from .checkout_feature import CheckoutFeature
from .core_commands_feature import CoreCommandsFeature
from .orders_feature import OrdersFeature
from .rating_feature import RatingFeature
from .settings_feature import SettingsFeature
from .support_feature import SupportFeature
from .wishlist_feature import WishlistFeature

__all__ = [
    "BaseFeature",
    "FeatureDeps",
    "CartFeature",
    "CatalogFeature",
    "CheckoutFeature",
    "CoreCommandsFeature",
    "OrdersFeature",
    "RatingFeature",
    "SettingsFeature",
    "SupportFeature",
    "WishlistFeature",
]
