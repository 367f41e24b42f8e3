# 📦 teleshop/bot/commands/orders_feature.py
"""
📦 Історія замовлень: останні N замовлень користувача, новіші першими.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram import Update

# 🔠 Системні імпорти
from typing import Dict, cast

# 🧩 Внутрішні модулі проєкту
from teleshop.bot.commands.base import BaseFeature, user_key
from teleshop.bot.services.callback_data_factory import CallbackData
from teleshop.bot.services.custom_context import CustomContext
from teleshop.bot.services.types import CallbackHandlerType
from teleshop.bot.session import RenderedMessage


class OrdersFeature(BaseFeature):
    def get_callback_handlers(self) -> Dict[CallbackData, CallbackHandlerType]:
        return cast(Dict[CallbackData, CallbackHandlerType], {self.const.CALLBACKS.ORDERS: self.show_orders})

    async def show_orders(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)

        async def render() -> RenderedMessage:
            orders = sorted(
                await self.deps.repository.list_orders(user_id),
                key=lambda order: order.created_at,
                reverse=True,
            )
            return RenderedMessage(
                text=await self.deps.formatter.orders(user_id, orders),
                keyboard=await self.deps.keyboard.back_to_menu(user_id),
            )

        await self.show(update, render)


__all__ = ["OrdersFeature"]
