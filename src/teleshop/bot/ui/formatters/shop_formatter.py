# 🎨 teleshop/bot/ui/formatters/shop_formatter.py
"""
🎨 Форматує екрани магазину у безпечний HTML для Telegram.

🔹 Усі тексти беруться з каталогу локалізації, ціни — через `ILocalizer.format_price`
🔹 Дані від користувачів і з каталогу екрануються (`html.escape`)
🔹 Жодної бізнес-логіки: суми вже пораховані резолвером
"""

from __future__ import annotations

# 🔠 Системні імпорти
from decimal import Decimal
from html import escape                                             # 🧼 Екранування HTML-символів
from typing import Final, Iterable, List, Sequence

# 🧩 Внутрішні модулі проєкту
from teleshop.config.setup.constants import CONST
from teleshop.domain.pricing import PricedLine
from teleshop.domain.shop.entities import CustomerInfo, Order, PricingTier, Product
from teleshop.domain.shop.interfaces import ILocalizer

_MAX_DESCRIPTION_LEN: Final[int] = 700                              # 📏 Підпис до фото обмежений Telegram
_EMPTY: Final[str] = "—"


def safe(value: str | None, *, max_len: int = 0) -> str:
    """trim + обрізання + HTML-escape; порожнє → «—»."""
    if not value or not value.strip():
        return _EMPTY
    trimmed = value.strip()
    if max_len and len(trimmed) > max_len:
        trimmed = trimmed[: max_len - 1] + "…"
    return escape(trimmed, quote=False)


def tier_range(tier: PricingTier) -> str:
    """`[1-9]` → «1–9», `[10-]` → «10+»."""
    if tier.max_quantity is None:
        return f"{tier.min_quantity}+"
    if tier.max_quantity == tier.min_quantity:
        return str(tier.min_quantity)
    return f"{tier.min_quantity}–{tier.max_quantity}"


class ShopFormatter:
    """📦 Тексти екранів каталогу, кошика, замовлень і чекауту."""

    def __init__(self, localizer: ILocalizer) -> None:
        self._i18n = localizer

    # ================================
    # 📋 ТОВАР
    # ================================
    async def product_details(self, user_id: str, product: Product, tiers: Sequence[PricingTier]) -> str:
        stock = str(product.stock) if product.in_stock else await self._i18n.translate(user_id, "product_out_of_stock")
        text = await self._i18n.translate(
            user_id,
            "product_details",
            {
                "name": safe(product.name),
                "description": safe(product.description, max_len=_MAX_DESCRIPTION_LEN),
                "price": await self._i18n.format_price(user_id, product.price),
                "stock": stock,
            },
        )
        active = sorted((t for t in tiers if t.is_active), key=lambda t: t.min_quantity)
        if not active:
            return text
        lines: List[str] = [text, "", await self._i18n.translate(user_id, "product_tiers_title")]
        for tier in active:
            lines.append(
                await self._i18n.translate(
                    user_id,
                    "product_tier_line",
                    {"range": tier_range(tier), "price": await self._i18n.format_price(user_id, tier.unit_price)},
                )
            )
        return "\n".join(lines)

    # ================================
    # 🛒 КОШИК
    # ================================
    async def cart(self, user_id: str, lines: Sequence[PricedLine], total: Decimal) -> str:
        if not lines:
            return await self._i18n.translate(user_id, "cart_empty")
        blocks: List[str] = [await self._i18n.translate(user_id, "cart_title")]
        for line in lines:
            blocks.append(
                await self._i18n.translate(
                    user_id,
                    "cart_line",
                    {
                        "name": safe(line.product.name),
                        "quantity": line.quantity,
                        "price": await self._i18n.format_price(user_id, line.unit_price),
                        "total": await self._i18n.format_price(user_id, line.total),
                    },
                )
            )
        blocks.append(await self._i18n.translate(user_id, "cart_total", {"total": await self._i18n.format_price(user_id, total)}))
        return "\n\n".join(blocks)

    # ================================
    # 📦 ЗАМОВЛЕННЯ
    # ================================
    async def orders(self, user_id: str, orders: Iterable[Order]) -> str:
        recent = list(orders)[: CONST.LOGIC.LIMITS.RECENT_ORDERS]
        if not recent:
            return await self._i18n.translate(user_id, "orders_empty")
        blocks: List[str] = [await self._i18n.translate(user_id, "orders_title")]
        for order in recent:
            status = order.status.value if hasattr(order.status, "value") else str(order.status)
            blocks.append(
                await self._i18n.translate(
                    user_id,
                    "order_line",
                    {
                        "emoji": CONST.LOGIC.ORDER_STATUS_EMOJI.get(status, "📦"),
                        "number": order.order_number,
                        "total": await self._i18n.format_price(user_id, order.total_amount),
                        "status": status,
                        "date": order.created_at.strftime("%Y-%m-%d"),
                    },
                )
            )
        return "\n\n".join(blocks)

    # ================================
    # 🧾 ЧЕКАУТ
    # ================================
    async def customer_confirmation(self, user_id: str, customer: CustomerInfo, method_name: str) -> str:
        return await self._i18n.translate(
            user_id,
            "checkout_confirm_info",
            {
                "name": safe(customer.name),
                "phone": safe(customer.phone),
                "address": safe(customer.address),
                "method": safe(method_name),
            },
        )

    async def order_confirmed(self, user_id: str, order: Order) -> str:
        return await self._i18n.translate(
            user_id,
            "order_confirmed",
            {
                "order_number": order.order_number,
                "total": await self._i18n.format_price(user_id, order.total_amount),
                "delivery": safe(order.delivery_method),
                "payment": safe(order.payment_method),
            },
        )


__all__ = ["ShopFormatter", "safe", "tier_range"]
