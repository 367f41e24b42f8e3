# 🧾 teleshop/domain/checkout/services.py
"""
🧾 Доменні правила чекауту: номер замовлення, розбір контактів, чернетки, створення замовлення.

🔹 `mint_order_number` — людиночитний номер із поточного часу (без перевірки унікальності).
🔹 `parse_customer_info` — рядок 1 → імʼя, рядок 2 → телефон, решта → адреса. Без валідації.
🔹 `CheckoutDraftStore` — памʼять процесу: що користувач уже обрав для конкретного номера.
🔹 `CheckoutService.complete` — ідемпотентне створення замовлення за номером (повторне натискання
   «оплачено» повертає вже створене замовлення).
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio
import logging
from collections import OrderedDict
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import AsyncIterator, Callable, Dict, List, Optional, Tuple

# 🧩 Внутрішні модулі проєкту
from teleshop.domain.pricing import PricedLine, TierPricingResolver, q2
from teleshop.domain.shop.entities import (
    CustomerInfo,
    DeliveryMethod,
    Order,
    OrderItem,
    PaymentMethod,
)
from teleshop.domain.shop.interfaces import IShopRepository
from teleshop.shared.errors import StaleReferenceError
from teleshop.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.domain.checkout")

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ================================
# 🔢 НОМЕР ЗАМОВЛЕННЯ
# ================================
def mint_order_number(now: datetime) -> str:
    """
    Номер з часу: `ORD` + 10 молодших цифр epoch-мілісекунд, напр. `ORD9339212071`.
    Без `_` — безпечно вбудовується у callback-токен.
    """
    millis = int(now.timestamp() * 1000)
    return f"ORD{millis % 10**10:010d}"


# ================================
# 📇 КОНТАКТИ ПОКУПЦЯ
# ================================
def parse_customer_info(text: str) -> CustomerInfo:
    """
    Позиційний розбір вільного тексту. Порожні рядки ігноруються; нічого не відхиляється —
    що ввели, те й потрапить у замовлення.
    """
    lines = [line.strip() for line in (text or "").splitlines() if line.strip()]
    name = lines[0] if lines else ""
    phone = lines[1] if len(lines) > 1 else ""
    address = "\n".join(lines[2:])
    return CustomerInfo(name=name, phone=phone, address=address, raw=text or "")


# ================================
# 📝 ЧЕРНЕТКИ ЧЕКАУТУ
# ================================
@dataclass(frozen=True, slots=True)
class CheckoutDraft:
    order_number: str
    delivery_method_id: Optional[str] = None
    customer: Optional[CustomerInfo] = None
    payment_method_id: Optional[str] = None


class CheckoutDraftStore:
    """
    Вибори користувача за номером замовлення. Лише памʼять процесу: після рестарту чернетки зникають,
    і флоу починається спочатку. Тримаємо кілька останніх номерів на користувача, щоб старі кнопки
    з іншого номера не затирали поточну чернетку.
    """

    def __init__(self, max_per_user: int = 5) -> None:
        self._max_per_user = max(1, max_per_user)
        self._drafts: Dict[str, "OrderedDict[str, CheckoutDraft]"] = {}

    def get(self, user_id: str, order_number: str) -> Optional[CheckoutDraft]:
        return self._drafts.get(user_id, OrderedDict()).get(order_number)

    def update(self, user_id: str, order_number: str, **changes: object) -> CheckoutDraft:
        bucket = self._drafts.setdefault(user_id, OrderedDict())
        current = bucket.pop(order_number, None) or CheckoutDraft(order_number=order_number)
        draft = replace(current, **changes)  # type: ignore[arg-type]
        bucket[order_number] = draft
        while len(bucket) > self._max_per_user:
            bucket.popitem(last=False)
        return draft

    def discard(self, user_id: str, order_number: str) -> None:
        bucket = self._drafts.get(user_id)
        if bucket is not None:
            bucket.pop(order_number, None)
            if not bucket:
                self._drafts.pop(user_id, None)


# ================================
# 💵 КОШТОРИС
# ================================
@dataclass(frozen=True, slots=True)
class CheckoutQuote:
    """Знімок кошика на момент рендеру екрана (не зберігається між етапами)."""
    lines: Tuple[PricedLine, ...]
    subtotal: Decimal

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def total_with(self, delivery: Optional[DeliveryMethod]) -> Decimal:
        return q2(self.subtotal + (delivery.cost if delivery else Decimal("0")))


@dataclass(frozen=True, slots=True)
class CompletionResult:
    order: Order
    created: bool = field(default=True)


# ================================
# 🏛️ СЕРВІС ЧЕКАУТУ
# ================================
class CheckoutService:
    """Правила чекауту поверх сховища і резолвера цін. Стан флоу живе в токенах і чернетках."""

    def __init__(
        self,
        repository: IShopRepository,
        resolver: TierPricingResolver,
        drafts: Optional[CheckoutDraftStore] = None,
        *,
        currency: str = "USD",
        clock: Clock = _utcnow,
    ) -> None:
        self._repo = repository
        self._resolver = resolver
        self.drafts = drafts or CheckoutDraftStore()
        self._currency = currency
        self._clock = clock
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = {}

    @property
    def held_locks(self) -> int:
        return len(self._locks)

    # ---------- етап 1 ----------
    def new_order_number(self) -> str:
        return mint_order_number(self._clock())

    async def quote(self, user_id: str) -> CheckoutQuote:
        """Перечитує живий кошик і рахує суму через резолвер тирів."""
        lines = await self._repo.list_cart(user_id)
        priced = await self._resolver.price_lines(lines)
        subtotal = q2(sum((line.total for line in priced), Decimal("0")))
        return CheckoutQuote(lines=tuple(priced), subtotal=subtotal)

    async def delivery_options(self) -> List[DeliveryMethod]:
        methods = await self._repo.list_delivery_methods()
        return sorted((m for m in methods if m.is_active), key=lambda m: (m.sort_order, m.name))

    async def payment_options(self) -> List[PaymentMethod]:
        methods = await self._repo.list_payment_methods()
        return sorted((m for m in methods if m.is_active), key=lambda m: (m.sort_order, m.name))

    # ---------- етапи 2–5 ----------
    async def require_delivery(self, method_id: str) -> DeliveryMethod:
        method = await self._repo.get_delivery_method(method_id)
        if method is None or not method.is_active:
            raise StaleReferenceError("delivery_method", method_id)
        return method

    async def require_payment(self, method_id: str) -> PaymentMethod:
        method = await self._repo.get_payment_method(method_id)
        if method is None or not method.is_active:
            raise StaleReferenceError("payment_method", method_id)
        return method

    async def find_existing(self, user_id: str, order_number: str) -> Optional[Order]:
        order = await self._repo.get_order(order_number)
        if order is not None and order.user_id == user_id:
            return order
        return None

    async def complete(
        self,
        user_id: str,
        order_number: str,
        *,
        customer: CustomerInfo,
        delivery: DeliveryMethod,
        payment: PaymentMethod,
    ) -> CompletionResult:
        """
        Створює замовлення з поточного кошика та очищає кошик.

        Ідемпотентно за `order_number` для цього користувача: повтор повертає наявне замовлення
        (`created=False`). Якщо номер уже зайнятий іншим користувачем — додаємо числовий суфікс.
        """
        async with self._user_lock(user_id):
            existing = await self.find_existing(user_id, order_number)
            if existing is not None:
                logger.info("♻️ Order %s already exists for user=%s — not duplicated", order_number, user_id)
                return CompletionResult(order=existing, created=False)

            quote = await self.quote(user_id)
            if quote.is_empty:
                raise StaleReferenceError("cart", user_id, details="cart is empty at payment confirmation")

            number = await self._free_number(order_number)
            order = Order(
                order_number=number,
                user_id=user_id,
                items=tuple(
                    OrderItem(
                        product_id=line.product.id,
                        name=line.product.name,
                        quantity=line.quantity,
                        unit_price=line.unit_price,
                    )
                    for line in quote.lines
                ),
                total_amount=quote.total_with(delivery),
                currency=self._currency,
                customer_name=customer.name,
                contact_info=customer.phone,
                delivery_address=customer.address,
                delivery_method=delivery.name,
                payment_method=payment.name,
                created_at=self._clock(),
            )
            saved = await self._repo.create_order(order)
            await self._repo.clear_cart(user_id)
            self.drafts.discard(user_id, order_number)
            logger.info(
                "🧾 Order %s created user=%s items=%d total=%s",
                saved.order_number,
                user_id,
                len(saved.items),
                saved.total_amount,
            )
            return CompletionResult(order=saved, created=True)

    @asynccontextmanager
    async def _user_lock(self, user_id: str) -> AsyncIterator[None]:
        """Лок користувача живе, лише поки хтось його тримає або чекає на нього."""
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks[user_id] = asyncio.Lock()
        self._lock_users[user_id] = self._lock_users.get(user_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            users = self._lock_users[user_id] - 1
            if users:
                self._lock_users[user_id] = users
            else:
                del self._lock_users[user_id]
                del self._locks[user_id]

    async def _free_number(self, order_number: str) -> str:
        candidate, suffix = order_number, 0
        while await self._repo.get_order(candidate) is not None:
            suffix += 1
            candidate = f"{order_number}{suffix}"
        return candidate


__all__ = [
    "CheckoutDraft",
    "CheckoutDraftStore",
    "CheckoutQuote",
    "CheckoutService",
    "CompletionResult",
    "mint_order_number",
    "parse_customer_info",
]
