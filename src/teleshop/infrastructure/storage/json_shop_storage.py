# 🗄️ teleshop/infrastructure/storage/json_shop_storage.py
"""
🗄️ JsonShopStorage — сховище магазину в памʼяті з debounced-флашем у JSON.

🔹 Реалізує доменний контракт `IShopRepository` (жодної логіки флоу).
🔹 Каталог (категорії, товари, тири, доставка, оплата, налаштування) — з вузла `shop` конфігу.
🔹 Дані користувачів (кошики, бажане, замовлення, звернення, оцінки, мова/валюта) ліниво
   читаються з файлу і записуються з невеликою затримкою атомарною заміною файлу.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import aiofiles															# 📄 Асинхронне читання/запис JSON

# 🔠 Системні імпорти
import asyncio
import json
import logging
import os
from dataclasses import asdict
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

# 🧩 Внутрішні модулі проєкту
from teleshop.config.config_service import ConfigService
from teleshop.domain.pricing import to_decimal, validate_new_tier, validate_tiers
from teleshop.domain.shop.entities import (
    CartLine,
    Category,
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
from teleshop.domain.shop.interfaces import IShopRepository
from teleshop.shared.errors import StorageError
from teleshop.shared.utils.logger import LOG_NAME

# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger(f"{LOG_NAME}.storage")


# ================================
# 🧰 РОЗБІР КАТАЛОГУ З КОНФІГУ
# ================================
def _money(value: Any) -> Decimal:
    try:
        return to_decimal(value)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise StorageError("Invalid money value in shop catalog", details=repr(value)) from exc


def _opt_int(value: Any) -> Optional[int]:
    return None if value in (None, "") else int(value)


def parse_catalog(node: Mapping[str, Any]) -> Dict[str, Any]:
    """📚 Перетворює вузол `shop` на сутності. Перетин тирів — помилка конфігу."""
    categories = [
        Category(
            id=str(raw["id"]),
            name=str(raw.get("name", raw["id"])),
            description=str(raw.get("description", "")),
            is_active=bool(raw.get("is_active", True)),
        )
        for raw in node.get("categories") or []
    ]
    products = [
        Product(
            id=str(raw["id"]),
            name=str(raw.get("name", raw["id"])),
            price=_money(raw.get("price", 0)),
            description=str(raw.get("description", "")),
            category_id=raw.get("category_id"),
            stock=int(raw.get("stock", 0)),
            unit=str(raw.get("unit", "pcs")),
            image_url=raw.get("image_url"),
            is_active=bool(raw.get("is_active", True)),
            min_order_quantity=int(raw.get("min_order_quantity", 1)),
            max_order_quantity=_opt_int(raw.get("max_order_quantity")),
        )
        for raw in node.get("products") or []
    ]
    tiers = [
        PricingTier(
            product_id=str(raw["product_id"]),
            min_quantity=int(raw["min_quantity"]),
            unit_price=_money(raw["unit_price"]),
            max_quantity=_opt_int(raw.get("max_quantity")),
            is_active=bool(raw.get("is_active", True)),
        )
        for raw in node.get("pricing_tiers") or []
    ]
    by_product: Dict[str, List[PricingTier]] = {}
    for tier in tiers:
        by_product.setdefault(tier.product_id, []).append(tier)
    for product_tiers in by_product.values():
        validate_tiers(product_tiers)

    delivery = [
        DeliveryMethod(
            id=str(raw["id"]),
            name=str(raw.get("name", raw["id"])),
            price=_money(raw.get("price", 0)),
            description=str(raw.get("description", "")),
            is_free=bool(raw.get("is_free", False)),
            estimated_time=str(raw.get("estimated_time", "")),
            instructions=str(raw.get("instructions", "")),
            is_active=bool(raw.get("is_active", True)),
            sort_order=int(raw.get("sort_order", 0)),
            requires_address=bool(raw.get("requires_address", True)),
        )
        for raw in node.get("delivery_methods") or []
    ]
    payment = [
        PaymentMethod(
            id=str(raw["id"]),
            name=str(raw.get("name", raw["id"])),
            description=str(raw.get("description", "")),
            payment_info=str(raw.get("payment_info", "")),
            instructions=str(raw.get("instructions", "")),
            is_active=bool(raw.get("is_active", True)),
            sort_order=int(raw.get("sort_order", 0)),
        )
        for raw in node.get("payment_methods") or []
    ]
    settings = {str(k): "" if v is None else str(v) for k, v in (node.get("settings") or {}).items()}
    return {
        "categories": categories,
        "products": products,
        "tiers": tiers,
        "delivery": delivery,
        "payment": payment,
        "settings": settings,
    }


# ================================
# 🔁 СЕРІАЛІЗАЦІЯ ДАНИХ КОРИСТУВАЧІВ
# ================================
def _order_to_dict(order: Order) -> Dict[str, Any]:
    data = asdict(order)
    data["items"] = [
        {**asdict(item), "unit_price": str(item.unit_price)} for item in order.items
    ]
    data["total_amount"] = str(order.total_amount)
    data["status"] = order.status.value
    data["created_at"] = order.created_at.isoformat()
    return data


def _order_from_dict(raw: Mapping[str, Any]) -> Order:
    return Order(
        order_number=str(raw["order_number"]),
        user_id=str(raw["user_id"]),
        items=tuple(
            OrderItem(
                product_id=str(item["product_id"]),
                name=str(item.get("name", "")),
                quantity=int(item["quantity"]),
                unit_price=Decimal(str(item["unit_price"])),
            )
            for item in raw.get("items") or []
        ),
        total_amount=Decimal(str(raw["total_amount"])),
        currency=str(raw.get("currency", "USD")),
        status=OrderStatus(raw.get("status", OrderStatus.PENDING.value)),
        customer_name=str(raw.get("customer_name", "")),
        contact_info=str(raw.get("contact_info", "")),
        delivery_address=str(raw.get("delivery_address", "")),
        delivery_method=str(raw.get("delivery_method", "")),
        payment_method=str(raw.get("payment_method", "")),
        notes=str(raw.get("notes", "")),
        created_at=_parse_dt(raw.get("created_at")),
    )


def _inquiry_to_dict(inquiry: Inquiry) -> Dict[str, Any]:
    data = asdict(inquiry)
    data["created_at"] = inquiry.created_at.isoformat()
    return data


def _inquiry_from_dict(raw: Mapping[str, Any]) -> Inquiry:
    return Inquiry(
        user_id=str(raw["user_id"]),
        message=str(raw.get("message", "")),
        username=str(raw.get("username", "")),
        customer_name=str(raw.get("customer_name", "")),
        contact_info=str(raw.get("contact_info", "")),
        product_id=raw.get("product_id"),
        source=str(raw.get("source", "text")),
        is_read=bool(raw.get("is_read", False)),
        created_at=_parse_dt(raw.get("created_at")),
    )


def _parse_dt(value: Any) -> datetime:
    if not value:
        return datetime.now(timezone.utc)
    return datetime.fromisoformat(str(value))


# ================================
# 🏛️ СХОВИЩЕ
# ================================
class JsonShopStorage(IShopRepository):
    """🗄️ Локальне сховище магазину з асинхронним кешем і відкладеним записом."""

    def __init__(
        self,
        *,
        catalog: Optional[Mapping[str, Any]] = None,
        file_path: Optional[str] = None,
        flush_sec: float = 1.0,
    ) -> None:
        parsed = parse_catalog(catalog or {})
        self._categories: Dict[str, Category] = {c.id: c for c in parsed["categories"]}
        self._products: Dict[str, Product] = {p.id: p for p in parsed["products"]}
        self._tiers: List[PricingTier] = list(parsed["tiers"])
        self._delivery: Dict[str, DeliveryMethod] = {m.id: m for m in parsed["delivery"]}
        self._payment: Dict[str, PaymentMethod] = {m.id: m for m in parsed["payment"]}
        self._settings: Dict[str, str] = dict(parsed["settings"])

        self._file_path = file_path
        self._flush_sec = flush_sec
        self._lock = asyncio.Lock()
        self._loaded = file_path is None
        self._flush_task: Optional[asyncio.Task] = None

        self._carts: Dict[str, Dict[str, int]] = {}
        self._wishlists: Dict[str, List[str]] = {}
        self._orders: Dict[str, Order] = {}
        self._inquiries: List[Inquiry] = []
        self._ratings: List[ProductRating] = []
        self._preferences: Dict[str, UserPreferences] = {}
        self._users: Dict[str, TrackedUser] = {}

        if file_path:
            try:
                Path(file_path).parent.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                logger.warning("⚠️ Не вдалося створити директорію для %s: %s", file_path, exc)

        logger.info(
            "🗄️ JsonShopStorage init (products=%d, delivery=%d, payment=%d, file=%s)",
            len(self._products),
            len(self._delivery),
            len(self._payment),
            file_path or "-",
        )

    @classmethod
    def from_config(cls, config: ConfigService) -> "JsonShopStorage":
        return cls(
            catalog=config.get("shop", {}) or {},
            file_path=config.get("storage.file", "data/teleshop.json"),
            flush_sec=config.get("storage.flush_sec", 1.0, cast=float),
        )

    # ================================
    # 📚 КАТАЛОГ
    # ================================
    async def list_categories(self) -> List[Category]:
        return [c for c in self._categories.values() if c.is_active]

    async def list_products(self, category_id: Optional[str] = None) -> List[Product]:
        return [
            p
            for p in self._products.values()
            if p.is_active and (category_id is None or p.category_id == category_id)
        ]

    async def get_product(self, product_id: str) -> Optional[Product]:
        product = self._products.get(product_id)
        return product if product and product.is_active else None

    async def list_active_tiers(self, product_id: str) -> List[PricingTier]:
        tiers = [t for t in self._tiers if t.product_id == product_id and t.is_active]
        return sorted(tiers, key=lambda t: t.min_quantity)

    async def add_pricing_tier(self, tier: PricingTier) -> PricingTier:
        """Адмінська операція: новий тир не може перетинатися з наявними."""
        existing = [t for t in self._tiers if t.product_id == tier.product_id]
        validate_new_tier(existing, tier)
        self._tiers.append(tier)
        return tier

    # ================================
    # 🛒 КОШИК
    # ================================
    async def list_cart(self, user_id: str) -> List[CartLine]:
        async with self._lock:
            await self._ensure_loaded()
            cart = self._carts.get(user_id, {})
            return [CartLine(user_id=user_id, product_id=pid, quantity=qty) for pid, qty in cart.items()]

    async def get_cart_line(self, user_id: str, product_id: str) -> Optional[CartLine]:
        async with self._lock:
            await self._ensure_loaded()
            qty = self._carts.get(user_id, {}).get(product_id)
            return CartLine(user_id=user_id, product_id=product_id, quantity=qty) if qty else None

    async def set_cart_quantity(self, user_id: str, product_id: str, quantity: int) -> Optional[CartLine]:
        """Кількість ≤ 0 видаляє рядок."""
        async with self._lock:
            await self._ensure_loaded()
            cart = self._carts.setdefault(user_id, {})
            if quantity <= 0:
                cart.pop(product_id, None)
                line = None
            else:
                cart[product_id] = quantity
                line = CartLine(user_id=user_id, product_id=product_id, quantity=quantity)
            if not cart:
                self._carts.pop(user_id, None)
            self._schedule_flush_locked()
            return line

    async def remove_from_cart(self, user_id: str, product_id: str) -> None:
        await self.set_cart_quantity(user_id, product_id, 0)

    async def clear_cart(self, user_id: str) -> None:
        async with self._lock:
            await self._ensure_loaded()
            if self._carts.pop(user_id, None) is not None:
                self._schedule_flush_locked()

    # ================================
    # 💝 СПИСОК БАЖАНЬ
    # ================================
    async def list_wishlist(self, user_id: str) -> List[WishlistItem]:
        async with self._lock:
            await self._ensure_loaded()
            return [WishlistItem(user_id=user_id, product_id=pid) for pid in self._wishlists.get(user_id, [])]

    async def add_to_wishlist(self, user_id: str, product_id: str) -> WishlistItem:
        async with self._lock:
            await self._ensure_loaded()
            items = self._wishlists.setdefault(user_id, [])
            if product_id not in items:
                items.append(product_id)
                self._schedule_flush_locked()
            return WishlistItem(user_id=user_id, product_id=product_id)

    async def remove_from_wishlist(self, user_id: str, product_id: str) -> None:
        async with self._lock:
            await self._ensure_loaded()
            items = self._wishlists.get(user_id, [])
            if product_id in items:
                items.remove(product_id)
                self._schedule_flush_locked()

    # ================================
    # 🚚 ДОСТАВКА / ОПЛАТА
    # ================================
    async def list_delivery_methods(self) -> List[DeliveryMethod]:
        return sorted((m for m in self._delivery.values() if m.is_active), key=lambda m: m.sort_order)

    async def get_delivery_method(self, method_id: str) -> Optional[DeliveryMethod]:
        return self._delivery.get(method_id)

    async def list_payment_methods(self) -> List[PaymentMethod]:
        return sorted((m for m in self._payment.values() if m.is_active), key=lambda m: m.sort_order)

    async def get_payment_method(self, method_id: str) -> Optional[PaymentMethod]:
        return self._payment.get(method_id)

    # ================================
    # 🧾 ЗАМОВЛЕННЯ / ЗВЕРНЕННЯ / ОЦІНКИ
    # ================================
    async def create_order(self, order: Order) -> Order:
        async with self._lock:
            await self._ensure_loaded()
            if order.order_number in self._orders:
                raise StorageError("Order number already exists", details=order.order_number)
            self._orders[order.order_number] = order
            self._schedule_flush_locked()
            return order

    async def get_order(self, order_number: str) -> Optional[Order]:
        async with self._lock:
            await self._ensure_loaded()
            return self._orders.get(order_number)

    async def list_orders(self, user_id: str) -> List[Order]:
        """Замовлення користувача, найновіші першими."""
        async with self._lock:
            await self._ensure_loaded()
            orders = [o for o in self._orders.values() if o.user_id == user_id]
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    async def create_inquiry(self, inquiry: Inquiry) -> Inquiry:
        async with self._lock:
            await self._ensure_loaded()
            self._inquiries.append(inquiry)
            self._schedule_flush_locked()
            return inquiry

    async def list_inquiries(self) -> List[Inquiry]:
        async with self._lock:
            await self._ensure_loaded()
            return list(self._inquiries)

    async def create_rating(self, rating: ProductRating) -> ProductRating:
        if not 1 <= rating.rating <= 5:
            raise ValueError(f"rating must be within 1..5, got {rating.rating}")
        async with self._lock:
            await self._ensure_loaded()
            self._ratings.append(rating)
            self._schedule_flush_locked()
            return rating

    async def list_ratings(self, product_id: Optional[str] = None) -> List[ProductRating]:
        async with self._lock:
            await self._ensure_loaded()
            return [r for r in self._ratings if r.product_id == product_id]

    # ================================
    # 👤 КОРИСТУВАЧІ / НАЛАШТУВАННЯ
    # ================================
    async def get_preferences(self, user_id: str) -> UserPreferences:
        async with self._lock:
            await self._ensure_loaded()
            return self._preferences.get(user_id, UserPreferences())

    async def set_preferences(self, user_id: str, preferences: UserPreferences) -> UserPreferences:
        async with self._lock:
            await self._ensure_loaded()
            self._preferences[user_id] = preferences
            self._schedule_flush_locked()
            return preferences

    async def get_bot_settings(self) -> Dict[str, str]:
        return dict(self._settings)

    async def update_bot_settings(self, changes: Mapping[str, str]) -> Dict[str, str]:
        self._settings.update({str(k): str(v) for k, v in changes.items()})
        return dict(self._settings)

    async def track_user(self, user: TrackedUser) -> None:
        async with self._lock:
            await self._ensure_loaded()
            if self._users.get(user.user_id) != user:
                self._users[user.user_id] = user
                self._schedule_flush_locked()

    async def list_user_ids(self) -> List[str]:
        async with self._lock:
            await self._ensure_loaded()
            return list(self._users)

    # ================================
    # 🧠 ВНУТРІШНЯ ЛОГІКА
    # ================================
    async def _ensure_loaded(self) -> None:
        """📥 Ліниво читає файл даних користувачів."""
        if self._loaded:
            return
        self._loaded = True
        assert self._file_path is not None
        try:
            async with aiofiles.open(self._file_path, "r", encoding="utf-8") as file_handle:
                content = await file_handle.read()
            raw = json.loads(content) if content else {}
            if not isinstance(raw, dict):
                raise ValueError("Очікувався JSON-об'єкт.")
            self._restore(raw)
            logger.info(
                "📖 Дані магазину завантажено: orders=%d users=%d carts=%d",
                len(self._orders),
                len(self._users),
                len(self._carts),
            )
        except FileNotFoundError:
            logger.info("📄 Файл даних не знайдено, стартуємо з порожнього стану.")
        except (json.JSONDecodeError, ValueError, KeyError) as exc:
            logger.warning("⚠️ Некоректний формат файлу даних (%s). Стартуємо з порожнього стану.", exc)

    def _restore(self, raw: Mapping[str, Any]) -> None:
        self._carts = {
            str(user): {str(pid): int(qty) for pid, qty in (cart or {}).items() if int(qty) > 0}
            for user, cart in (raw.get("carts") or {}).items()
        }
        self._wishlists = {str(user): [str(p) for p in items] for user, items in (raw.get("wishlists") or {}).items()}
        self._orders = {o.order_number: o for o in map(_order_from_dict, raw.get("orders") or [])}
        self._inquiries = [_inquiry_from_dict(item) for item in raw.get("inquiries") or []]
        self._ratings = [
            ProductRating(user_id=str(r["user_id"]), rating=int(r["rating"]), product_id=r.get("product_id"))
            for r in raw.get("ratings") or []
        ]
        self._preferences = {
            str(user): UserPreferences(**{k: str(v) for k, v in prefs.items() if k in ("language", "currency")})
            for user, prefs in (raw.get("preferences") or {}).items()
        }
        self._users = {
            str(u["user_id"]): TrackedUser(
                user_id=str(u["user_id"]),
                username=str(u.get("username", "")),
                first_name=str(u.get("first_name", "")),
            )
            for u in raw.get("users") or []
        }

    def _snapshot(self) -> Dict[str, Any]:
        return {
            "carts": self._carts,
            "wishlists": self._wishlists,
            "orders": [_order_to_dict(o) for o in self._orders.values()],
            "inquiries": [_inquiry_to_dict(i) for i in self._inquiries],
            "ratings": [asdict(r) for r in self._ratings],
            "preferences": {user: asdict(p) for user, p in self._preferences.items()},
            "users": [asdict(u) for u in self._users.values()],
        }

    def _schedule_flush_locked(self) -> None:
        """🕒 Плануємо відкладений запис (під lock)."""
        if not self._file_path:
            return
        if self._flush_task and not self._flush_task.done():
            self._flush_task.cancel()
        self._flush_task = asyncio.create_task(self._delayed_flush())

    async def _delayed_flush(self) -> None:
        try:
            await asyncio.sleep(max(0.0, float(self._flush_sec)))
            async with self._lock:
                await self._flush_now_locked()
        except asyncio.CancelledError:
            return												# 🔁 Debounce: задача скасована іншою подією
        except StorageError:
            logger.exception("❌ Помилка під час відкладеного збереження даних магазину.")

    async def _flush_now_locked(self) -> None:
        if not self._file_path:
            return
        payload = json.dumps(self._snapshot(), indent=2, ensure_ascii=False)
        tmp_path = f"{self._file_path}.tmp"
        try:
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as file_handle:
                await file_handle.write(payload)
            os.replace(tmp_path, self._file_path)					# 🔀 Атомарно підміняємо
            logger.debug("💾 Дані магазину збережено → %s", self._file_path)
        except OSError as exc:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StorageError("Failed to persist shop data", details=str(exc)) from exc

    async def flush(self) -> None:
        """🧽 Примусовий флаш у файл (без очікування debounce)."""
        async with self._lock:
            if self._flush_task and not self._flush_task.done():
                self._flush_task.cancel()
            await self._flush_now_locked()


__all__ = ["JsonShopStorage", "parse_catalog"]
