# 📋 teleshop/bot/commands/catalog_feature.py
"""
📋 Каталог: категорії, товари, картка товару, вибір кількості.

🔹 `product_<id>` з видаленим товаром → головне меню (найближчий безпечний екран)
🔹 Картка з фото: фото — основне повідомлення, деталі з кнопками — допоміжне, обидва під одним локом чату
🔹 `select_qty_<productId>_<qty>` додає кількість до наявного рядка кошика
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram import Update

# 🔠 Системні імпорти
import logging
from typing import Dict, List, Optional, Tuple, cast

# 🧩 Внутрішні модулі проєкту
from teleshop.bot.commands.base import BaseFeature, user_key
from teleshop.bot.services.callback_data_factory import CallbackData
from teleshop.bot.services.custom_context import CustomContext
from teleshop.bot.services.types import CallbackHandlerType
from teleshop.bot.session import RenderedMessage
from teleshop.bot.ui.formatters.shop_formatter import safe
from teleshop.domain.shop.entities import Category, Product
from teleshop.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.catalog")


class CatalogFeature(BaseFeature):
    """📋 Перегляд каталогу і додавання в кошик."""

    def get_callback_handlers(self) -> Dict[CallbackData, CallbackHandlerType]:
        cb = self.const.CALLBACKS
        mapping = {
            cb.LISTINGS: self.show_listings,
            cb.CATEGORY: self.show_category,
            cb.SEARCH_ALL_PRODUCTS: self.show_all_products,
            cb.PRODUCT: self.show_product,
            cb.ADD_TO_CART: self.ask_quantity,
            cb.SELECT_QTY: self.select_quantity,
        }
        return cast(Dict[CallbackData, CallbackHandlerType], mapping)

    # ================================
    # 📂 КАТЕГОРІЇ
    # ================================
    async def show_listings(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)

        async def render() -> RenderedMessage:
            categories = [c for c in await self.deps.repository.list_categories() if c.is_active]
            products = await self.deps.repository.list_products()
            if not products:
                return await self.simple_screen(user_id, "listings_empty")
            counts: List[Tuple[Category, int]] = [
                (category, sum(1 for p in products if p.category_id == category.id)) for category in categories
            ]
            return RenderedMessage(
                text=await self.t(user_id, "listings_title"),
                keyboard=await self.deps.keyboard.categories(user_id, counts),
            )

        await self.show(update, render)

    async def show_category(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)
        category_id = self.param(context, "category_id")

        async def render() -> RenderedMessage:
            categories = {c.id: c for c in await self.deps.repository.list_categories()}
            category = categories.get(category_id)
            if category is None:
                logger.info("🕸️ Stale category %s → listings", category_id)
                return await self._listings_fallback(user_id)
            products = await self.deps.repository.list_products(category_id)
            key = "category_title" if products else "category_empty"
            return RenderedMessage(
                text=await self.t(user_id, key, {"name": safe(category.name)}),
                keyboard=await self.deps.keyboard.products(user_id, products),
            )

        await self.show(update, render)

    async def show_all_products(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)

        async def render() -> RenderedMessage:
            products = await self.deps.repository.list_products()
            if not products:
                return await self.simple_screen(user_id, "listings_empty")
            return RenderedMessage(
                text=await self.t(user_id, "listings_all_products"),
                keyboard=await self.deps.keyboard.products(user_id, products),
            )

        await self.show(update, render)

    # ================================
    # 🛍️ КАРТКА ТОВАРУ
    # ================================
    async def show_product(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)
        product = await self._active_product(self.param(context, "product_id"))
        if product is None:
            await self.show_main_menu(update)
            return

        tiers = await self.deps.repository.list_active_tiers(product.id)
        details = await self.deps.formatter.product_details(user_id, product, tiers)
        keyboard = await self.deps.keyboard.product_actions(user_id, product)

        if not product.image_url:
            await self.show(update, lambda: _static(RenderedMessage(text=details, keyboard=keyboard)))
            return

        await self.show(
            update,
            lambda: _static(RenderedMessage(text=safe(product.name), photo=product.image_url)),
            extra=[lambda: _static(RenderedMessage(text=details, keyboard=keyboard))],
        )

    # ================================
    # 🔢 КІЛЬКІСТЬ
    # ================================
    async def ask_quantity(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)
        product = await self._active_product(self.param(context, "product_id"))
        if product is None or not product.in_stock:
            await self.show_main_menu(update)
            return

        async def render() -> RenderedMessage:
            return RenderedMessage(
                text=await self.t(user_id, "quantity_prompt", {"product": safe(product.name)}),
                keyboard=await self.deps.keyboard.quantity_picker(user_id, product),
            )

        await self.show(update, render)

    async def select_quantity(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)
        product = await self._active_product(self.param(context, "product_id"))
        quantity = _positive_int(self.param(context, "quantity"))
        if product is None or quantity is None:
            await self.show_main_menu(update)
            return

        current = await self.deps.repository.get_cart_line(user_id, product.id)
        new_quantity = quantity + (current.quantity if current else 0)
        if product.max_order_quantity is not None:
            new_quantity = min(new_quantity, product.max_order_quantity)
        await self.deps.repository.set_cart_quantity(user_id, product.id, new_quantity)
        logger.info("🛒 user=%s added %s × %d (line=%d)", user_id, product.id, quantity, new_quantity)

        async def render() -> RenderedMessage:
            return RenderedMessage(
                text=await self.t(user_id, "added_to_cart", {"product": safe(product.name), "quantity": quantity}),
                keyboard=await self.deps.keyboard.after_add_to_cart(user_id),
            )

        await self.show(update, render)

    # ================================
    # 🧰 ДОПОМІЖНЕ
    # ================================
    async def _active_product(self, product_id: str) -> Optional[Product]:
        product = await self.deps.repository.get_product(product_id) if product_id else None
        if product is None or not product.is_active:
            logger.info("🕸️ Stale product reference %r", product_id)
            return None
        return product

    async def _listings_fallback(self, user_id: str) -> RenderedMessage:
        categories = [c for c in await self.deps.repository.list_categories() if c.is_active]
        products = await self.deps.repository.list_products()
        counts = [(c, sum(1 for p in products if p.category_id == c.id)) for c in categories]
        return RenderedMessage(
            text=await self.t(user_id, "listings_title"),
            keyboard=await self.deps.keyboard.categories(user_id, counts),
        )


async def _static(message: RenderedMessage) -> RenderedMessage:
    return message


def _positive_int(raw: str) -> Optional[int]:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


__all__ = ["CatalogFeature"]
