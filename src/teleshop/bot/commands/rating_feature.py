# ⭐ teleshop/bot/commands/rating_feature.py
"""
⭐ Оцінки: магазину загалом (`rate_<stars>`) і конкретного товару (`rate_product_<id>_<stars>`).

🔹 Кількість зірок поза шкалою 1..5 вважається зіпсованим токеном → головне меню
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram import Update

# 🔠 Системні імпорти
import logging
from typing import Dict, Optional, cast

# 🧩 Внутрішні модулі проєкту
from teleshop.bot.commands.base import BaseFeature, user_key
from teleshop.bot.services.callback_data_factory import CallbackData
from teleshop.bot.services.custom_context import CustomContext
from teleshop.bot.services.types import CallbackHandlerType
from teleshop.bot.session import RenderedMessage
from teleshop.bot.ui.formatters.shop_formatter import safe
from teleshop.domain.shop.entities import ProductRating
from teleshop.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.rating")


class RatingFeature(BaseFeature):
    def get_callback_handlers(self) -> Dict[CallbackData, CallbackHandlerType]:
        cb = self.const.CALLBACKS
        mapping = {
            cb.RATING: self.show_shop_rating,
            cb.RATE: self.rate_shop,
            cb.PRODUCT_RATING: self.show_product_rating,
            cb.RATE_PRODUCT: self.rate_product,
        }
        return cast(Dict[CallbackData, CallbackHandlerType], mapping)

    async def show_shop_rating(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)

        async def render() -> RenderedMessage:
            return RenderedMessage(
                text=await self.t(user_id, "rating_title"),
                keyboard=await self.deps.keyboard.shop_rating(user_id),
            )

        await self.show(update, render)

    async def rate_shop(self, update: Update, context: CustomContext) -> None:
        await self._save(update, None, self.param(context, "stars"))

    async def show_product_rating(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)
        product = await self.deps.repository.get_product(self.param(context, "product_id"))
        if product is None or not product.is_active:
            await self.show_main_menu(update)
            return

        async def render() -> RenderedMessage:
            return RenderedMessage(
                text=await self.t(user_id, "rate_product_title", {"product": safe(product.name)}),
                keyboard=await self.deps.keyboard.product_rating(user_id, product),
            )

        await self.show(update, render)

    async def rate_product(self, update: Update, context: CustomContext) -> None:
        product_id = self.param(context, "product_id")
        product = await self.deps.repository.get_product(product_id)
        if product is None or not product.is_active:
            await self.show_main_menu(update)
            return
        await self._save(update, product.id, self.param(context, "stars"))

    async def _save(self, update: Update, product_id: Optional[str], raw_stars: str) -> None:
        user_id = user_key(update)
        stars = self._stars(raw_stars)
        if stars is None:
            logger.info("⭐ Malformed rating %r from user=%s", raw_stars, user_id)
            await self.show_main_menu(update)
            return

        await self.deps.repository.create_rating(ProductRating(user_id=user_id, rating=stars, product_id=product_id))
        logger.info("⭐ user=%s rated %s: %d", user_id, product_id or "shop", stars)
        await self.show(update, lambda: self.simple_screen(user_id, "rating_thanks", {"stars": stars}))

    def _stars(self, raw: str) -> Optional[int]:
        try:
            value = int(raw)
        except (TypeError, ValueError):
            return None
        return value if value in self.const.UI.RATING_STARS else None


__all__ = ["RatingFeature"]
