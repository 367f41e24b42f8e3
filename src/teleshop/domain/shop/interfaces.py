# 🧩 teleshop/domain/shop/interfaces.py
"""
🧩 Контракти зовнішніх колабораторів розмовного рушія.

🔹 `IShopRepository` — доступ до каталогу, кошика, замовлень, налаштувань (без логіки флоу).
🔹 `ILocalizer` — переклад рядків і форматування цін під користувача.
🔹 `IMessageTransport` — надсилання/видалення повідомлень і відповіді на колбеки.

Усі методи асинхронні: рушій не припускає, що колаборатор відповідає миттєво чи кешує.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Protocol

# 🧩 Внутрішні модулі проєкту
from .entities import (
    CartLine,
    Category,
    DeliveryMethod,
    Inquiry,
    Order,
    PaymentMethod,
    PricingTier,
    Product,
    ProductRating,
    TrackedUser,
    UserPreferences,
    WishlistItem,
)


# ================================
# 📦 СХОВИЩЕ МАГАЗИНУ
# ================================
class IShopRepository(Protocol):
    """📦 Чистий доступ до даних магазину."""

    # --- каталог ---
    async def list_categories(self) -> List[Category]: ...
    async def list_products(self, category_id: Optional[str] = None) -> List[Product]: ...
    async def get_product(self, product_id: str) -> Optional[Product]: ...
    async def list_active_tiers(self, product_id: str) -> List[PricingTier]: ...

    # --- кошик ---
    async def list_cart(self, user_id: str) -> List[CartLine]: ...
    async def get_cart_line(self, user_id: str, product_id: str) -> Optional[CartLine]: ...
    async def set_cart_quantity(self, user_id: str, product_id: str, quantity: int) -> Optional[CartLine]: ...
    async def remove_from_cart(self, user_id: str, product_id: str) -> None: ...
    async def clear_cart(self, user_id: str) -> None: ...

    # --- список бажань ---
    async def list_wishlist(self, user_id: str) -> List[WishlistItem]: ...
    async def add_to_wishlist(self, user_id: str, product_id: str) -> WishlistItem: ...
    async def remove_from_wishlist(self, user_id: str, product_id: str) -> None: ...

    # --- доставка / оплата ---
    async def list_delivery_methods(self) -> List[DeliveryMethod]: ...
    async def get_delivery_method(self, method_id: str) -> Optional[DeliveryMethod]: ...
    async def list_payment_methods(self) -> List[PaymentMethod]: ...
    async def get_payment_method(self, method_id: str) -> Optional[PaymentMethod]: ...

    # --- замовлення / звернення / оцінки ---
    async def create_order(self, order: Order) -> Order: ...
    async def get_order(self, order_number: str) -> Optional[Order]: ...
    async def list_orders(self, user_id: str) -> List[Order]: ...
    async def create_inquiry(self, inquiry: Inquiry) -> Inquiry: ...
    async def create_rating(self, rating: ProductRating) -> ProductRating: ...
    async def list_ratings(self, product_id: Optional[str] = None) -> List[ProductRating]: ...

    # --- користувачі та налаштування ---
    async def get_preferences(self, user_id: str) -> UserPreferences: ...
    async def set_preferences(self, user_id: str, preferences: UserPreferences) -> UserPreferences: ...
    async def get_bot_settings(self) -> Dict[str, str]: ...
    async def track_user(self, user: TrackedUser) -> None: ...
    async def list_user_ids(self) -> List[str]: ...


# ================================
# 🌍 ЛОКАЛІЗАЦІЯ
# ================================
class ILocalizer(Protocol):
    """🌍 Рендер рядків і цін з урахуванням мови/валюти користувача."""

    async def translate(self, user_id: str, key: str, params: Optional[Mapping[str, Any]] = None) -> str: ...
    async def format_price(self, user_id: str, amount: Decimal) -> str: ...
    async def get_user_language(self, user_id: str) -> str: ...


# ================================
# 📡 ТРАНСПОРТ
# ================================
class IMessageTransport(Protocol):
    """📡 Один чат-ендпоінт: текст, фото, видалення, відповідь на колбек."""

    async def send_text(self, chat_id: int, text: str, keyboard: Any = None) -> int: ...
    async def send_photo(self, chat_id: int, photo: str, caption: str = "", keyboard: Any = None) -> int: ...
    async def delete_message(self, chat_id: int, message_id: int) -> None: ...
    async def answer_callback(self, callback_id: str, text: Optional[str] = None) -> None: ...


__all__ = ["IShopRepository", "ILocalizer", "IMessageTransport"]
