# 🏷️ teleshop/domain/shop/entities.py
"""
🏷️ Сутності магазину, з якими працює розмовний рушій.

🔹 Усі DTO незмінні (`frozen=True, slots=True`) — оновлення через `dataclasses.replace`.
🔹 Гроші — тільки `Decimal` у базовій валюті магазину.
🔹 Ідентифікатори — рядки без символу `_` (він є роздільником у callback-токенах).
"""

from __future__ import annotations

# 🔠 Системні імпорти
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple


# ================================
# 📚 КАТАЛОГ
# ================================
@dataclass(frozen=True, slots=True)
class Category:
    id: str
    name: str
    description: str = ""
    is_active: bool = True


@dataclass(frozen=True, slots=True)
class Product:
    """Товар каталогу. `price` — базова ціна за одиницю (без тирів)."""
    id: str
    name: str
    price: Decimal
    description: str = ""
    category_id: Optional[str] = None
    stock: int = 0
    unit: str = "pcs"
    image_url: Optional[str] = None
    is_active: bool = True
    min_order_quantity: int = 1
    max_order_quantity: Optional[int] = None

    @property
    def in_stock(self) -> bool:
        return self.stock > 0


@dataclass(frozen=True, slots=True)
class PricingTier:
    """Діапазон кількості [min_quantity, max_quantity] → ціна за одиницю. `max_quantity=None` — без верхньої межі."""
    product_id: str
    min_quantity: int
    unit_price: Decimal
    max_quantity: Optional[int] = None
    is_active: bool = True

    def contains(self, quantity: int) -> bool:
        if quantity < self.min_quantity:
            return False
        return self.max_quantity is None or quantity <= self.max_quantity


# ================================
# 🛒 КОШИК І СПИСОК БАЖАНЬ
# ================================
@dataclass(frozen=True, slots=True)
class CartLine:
    user_id: str
    product_id: str
    quantity: int


@dataclass(frozen=True, slots=True)
class WishlistItem:
    user_id: str
    product_id: str


# ================================
# 🚚 ДОСТАВКА ТА ОПЛАТА
# ================================
@dataclass(frozen=True, slots=True)
class DeliveryMethod:
    """`requires_address=False` — самовивіз: чекаут пропускає введення контактів."""
    id: str
    name: str
    price: Decimal = Decimal("0")
    description: str = ""
    is_free: bool = False
    estimated_time: str = ""
    instructions: str = ""
    is_active: bool = True
    sort_order: int = 0
    requires_address: bool = True

    @property
    def cost(self) -> Decimal:
        return Decimal("0") if self.is_free else self.price


@dataclass(frozen=True, slots=True)
class PaymentMethod:
    id: str
    name: str
    description: str = ""
    payment_info: str = ""
    instructions: str = ""
    is_active: bool = True
    sort_order: int = 0


# ================================
# 🧾 ЗАМОВЛЕННЯ
# ================================
class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class CustomerInfo:
    """Контакти покупця, розібрані з вільного тексту без валідації."""
    name: str
    phone: str
    address: str
    raw: str = ""

    @classmethod
    def placeholder(cls) -> "CustomerInfo":
        """Заглушка для самовивозу — контакти не запитуються."""
        return cls(name="", phone="", address="", raw="")

    @property
    def is_placeholder(self) -> bool:
        return not (self.name or self.phone or self.address)


@dataclass(frozen=True, slots=True)
class OrderItem:
    product_id: str
    name: str
    quantity: int
    unit_price: Decimal

    @property
    def total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True, slots=True)
class Order:
    order_number: str
    user_id: str
    items: Tuple[OrderItem, ...]
    total_amount: Decimal
    currency: str = "USD"
    status: OrderStatus = OrderStatus.PENDING
    customer_name: str = ""
    contact_info: str = ""
    delivery_address: str = ""
    delivery_method: str = ""
    payment_method: str = ""
    notes: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


# ================================
# 💬 ПІДТРИМКА, ОЦІНКИ, НАЛАШТУВАННЯ
# ================================
@dataclass(frozen=True, slots=True)
class Inquiry:
    user_id: str
    message: str
    username: str = ""
    customer_name: str = ""
    contact_info: str = ""
    product_id: Optional[str] = None
    source: str = "text"
    is_read: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True, slots=True)
class ProductRating:
    """`product_id=None` — оцінка магазину загалом."""
    user_id: str
    rating: int
    product_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class UserPreferences:
    language: str = "en"
    currency: str = "USD"


@dataclass(frozen=True, slots=True)
class TrackedUser:
    user_id: str
    username: str = ""
    first_name: str = ""


__all__ = [
    "Category",
    "Product",
    "PricingTier",
    "CartLine",
    "WishlistItem",
    "DeliveryMethod",
    "PaymentMethod",
    "OrderStatus",
    "CustomerInfo",
    "OrderItem",
    "Order",
    "Inquiry",
    "ProductRating",
    "UserPreferences",
    "TrackedUser",
]
