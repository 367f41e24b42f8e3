# 🛒 teleshop/bot/commands/cart_feature.py
"""
🛒 Кошик: перегляд із тировими цінами, ➕/➖/🗑️ і очищення.

🔹 Токени ➕/➖ несуть кількість, з якою рендерився екран; рахуємо від живого кошика,
   тому повторне натискання старої кнопки не «відкочує» кількість
🔹 Рядки з видаленими товарами не показуються (резолвер їх пропускає)
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram import Update

# 🔠 Системні імпорти
import logging
from decimal import Decimal
from typing import Dict, cast

# 🧩 Внутрішні модулі проєкту
from teleshop.bot.commands.base import BaseFeature, user_key
from teleshop.bot.services.callback_data_factory import CallbackData
from teleshop.bot.services.custom_context import CustomContext
from teleshop.bot.services.types import CallbackHandlerType
from teleshop.bot.session import RenderedMessage
from teleshop.domain.pricing import q2
from teleshop.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.cart")


class CartFeature(BaseFeature):
    """🛒 Екран кошика та зміна кількостей."""

    def get_callback_handlers(self) -> Dict[CallbackData, CallbackHandlerType]:
        cb = self.const.CALLBACKS
        mapping = {
            cb.CARTS: self.show_cart,
            cb.CART_PLUS: self.increment,
            cb.CART_MINUS: self.decrement,
            cb.CART_REMOVE: self.remove_line,
            cb.CLEAR_CART: self.clear_cart,
        }
        return cast(Dict[CallbackData, CallbackHandlerType], mapping)

    async def cart_screen(self, user_id: str) -> RenderedMessage:
        lines = await self.deps.repository.list_cart(user_id)
        priced = await self.deps.resolver.price_lines(lines)
        total = q2(sum((line.total for line in priced), Decimal("0")))
        text = await self.deps.formatter.cart(user_id, priced, total)
        logger.debug("🛒 cart user=%s lines=%d total=%s", user_id, len(priced), total)
        keyboard = await self.deps.keyboard.cart(
            user_id, [(line.product.id, line.product.name, line.quantity) for line in priced]
        )
        return RenderedMessage(text=text, keyboard=keyboard)

    async def show_cart(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)
        await self.show(update, lambda: self.cart_screen(user_id))

    async def increment(self, update: Update, context: CustomContext) -> None:
        await self._change(update, context, +1)

    async def decrement(self, update: Update, context: CustomContext) -> None:
        await self._change(update, context, -1)

    async def remove_line(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)
        product_id = self.param(context, "product_id")
        await self.deps.repository.remove_from_cart(user_id, product_id)
        logger.info("🗑️ user=%s removed %s from cart", user_id, product_id)
        await self.show(update, lambda: self.cart_screen(user_id))

    async def clear_cart(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)
        await self.deps.repository.clear_cart(user_id)
        logger.info("🧹 user=%s cleared cart", user_id)

        async def render() -> RenderedMessage:
            screen = await self.cart_screen(user_id)
            notice = await self.t(user_id, "cart_cleared")
            return RenderedMessage(text=f"{notice}\n\n{screen.text}", keyboard=screen.keyboard)

        await self.show(update, render)

    async def _change(self, update: Update, context: CustomContext, delta: int) -> None:
        user_id = user_key(update)
        product_id = self.param(context, "product_id")
        product = await self.deps.repository.get_product(product_id)
        line = await self.deps.repository.get_cart_line(user_id, product_id)
        if product is None or line is None:
            logger.info("🕸️ Stale cart line user=%s product=%r", user_id, product_id)
            await self.show(update, lambda: self.cart_screen(user_id))
            return

        quantity = line.quantity + delta
        if delta > 0 and product.max_order_quantity is not None:
            quantity = min(quantity, product.max_order_quantity)
        await self.deps.repository.set_cart_quantity(user_id, product_id, quantity)
        logger.debug("🛒 user=%s %s: %d → %d", user_id, product_id, line.quantity, quantity)
        await self.show(update, lambda: self.cart_screen(user_id))


__all__ = ["CartFeature"]
