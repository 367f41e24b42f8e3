# ❤️ teleshop/bot/commands/wishlist_feature.py
"""
❤️ Список бажань: перегляд, додавання з картки товару, видалення.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram import Update

# 🔠 Системні імпорти
import logging
from typing import Dict, List, cast

# 🧩 Внутрішні модулі проєкту
from teleshop.bot.commands.base import BaseFeature, user_key
from teleshop.bot.services.callback_data_factory import CallbackData
from teleshop.bot.services.custom_context import CustomContext
from teleshop.bot.services.types import CallbackHandlerType
from teleshop.bot.session import RenderedMessage
from teleshop.bot.ui.formatters.shop_formatter import safe
from teleshop.domain.shop.entities import Product
from teleshop.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.wishlist")


class WishlistFeature(BaseFeature):
    def get_callback_handlers(self) -> Dict[CallbackData, CallbackHandlerType]:
        cb = self.const.CALLBACKS
        mapping = {
            cb.WISHLIST: self.show_wishlist,
            cb.WISHLIST_ADD: self.add,
            cb.WISHLIST_REMOVE: self.remove,
        }
        return cast(Dict[CallbackData, CallbackHandlerType], mapping)

    async def wishlist_screen(self, user_id: str, notice: str = "") -> RenderedMessage:
        products: List[Product] = []
        for item in await self.deps.repository.list_wishlist(user_id):
            product = await self.deps.repository.get_product(item.product_id)
            if product is not None and product.is_active:
                products.append(product)

        if products:
            lines = [await self.t(user_id, "wishlist_title")]
            for product in products:
                price = await self.deps.localizer.format_price(user_id, product.price)
                lines.append(await self.t(user_id, "wishlist_line", {"name": safe(product.name), "price": price}))
            text = "\n".join(lines)
        else:
            text = await self.t(user_id, "wishlist_empty")
        if notice:
            text = f"{notice}\n\n{text}"
        return RenderedMessage(text=text, keyboard=await self.deps.keyboard.wishlist(user_id, products))

    async def show_wishlist(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)
        await self.show(update, lambda: self.wishlist_screen(user_id))

    async def add(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)
        product = await self.deps.repository.get_product(self.param(context, "product_id"))
        if product is None or not product.is_active:
            await self.show_main_menu(update)
            return

        await self.deps.repository.add_to_wishlist(user_id, product.id)
        logger.info("❤️ user=%s wishlisted %s", user_id, product.id)

        async def render() -> RenderedMessage:
            notice = await self.t(user_id, "wishlist_added", {"product": safe(product.name)})
            return await self.wishlist_screen(user_id, notice)

        await self.show(update, render)

    async def remove(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)
        await self.deps.repository.remove_from_wishlist(user_id, self.param(context, "product_id"))
        await self.show(update, lambda: self.wishlist_screen(user_id))


__all__ = ["WishlistFeature"]
