# ⚙️ teleshop/bot/commands/settings_feature.py
"""
⚙️ Налаштування користувача: мова інтерфейсу і валюта відображення цін.

🔹 Невідомий код мови/валюти у токені → просто показуємо екран налаштувань
🔹 Після зміни екран рендериться вже новою мовою/валютою
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram import Update

# 🔠 Системні імпорти
import logging
from dataclasses import replace
from typing import Dict, cast

# 🧩 Внутрішні модулі проєкту
from teleshop.bot.commands.base import BaseFeature, user_key
from teleshop.bot.services.callback_data_factory import CallbackData
from teleshop.bot.services.custom_context import CustomContext
from teleshop.bot.services.types import CallbackHandlerType
from teleshop.bot.session import RenderedMessage
from teleshop.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.settings")


class SettingsFeature(BaseFeature):
    def get_callback_handlers(self) -> Dict[CallbackData, CallbackHandlerType]:
        cb = self.const.CALLBACKS
        mapping = {
            cb.SETTINGS: self.show_settings,
            cb.LANGUAGE_MENU: self.show_languages,
            cb.CURRENCY_MENU: self.show_currencies,
            cb.SET_LANG: self.set_language,
            cb.SET_CURRENCY: self.set_currency,
        }
        return cast(Dict[CallbackData, CallbackHandlerType], mapping)

    async def settings_screen(self, user_id: str, notice: str = "") -> RenderedMessage:
        prefs = await self.deps.repository.get_preferences(user_id)
        language = self.const.LOGIC.LANGUAGES.get(prefs.language, prefs.language)
        text = await self.t(user_id, "settings_title", {"language": language, "currency": prefs.currency})
        if notice:
            text = f"{notice}\n\n{text}"
        return RenderedMessage(text=text, keyboard=await self.deps.keyboard.settings(user_id))

    async def show_settings(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)
        await self.show(update, lambda: self.settings_screen(user_id))

    async def show_languages(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)

        async def render() -> RenderedMessage:
            prefs = await self.deps.repository.get_preferences(user_id)
            return RenderedMessage(
                text=await self.t(user_id, "language_title"),
                keyboard=await self.deps.keyboard.languages(user_id, prefs.language),
            )

        await self.show(update, render)

    async def show_currencies(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)

        async def render() -> RenderedMessage:
            prefs = await self.deps.repository.get_preferences(user_id)
            return RenderedMessage(
                text=await self.t(user_id, "currency_title"),
                keyboard=await self.deps.keyboard.currencies(user_id, prefs.currency),
            )

        await self.show(update, render)

    async def set_language(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)
        code = self.param(context, "code")
        if code not in self.const.LOGIC.LANGUAGES:
            logger.info("🌐 Unknown language %r from user=%s", code, user_id)
            await self.show_settings(update, context)
            return

        prefs = await self.deps.repository.get_preferences(user_id)
        await self.deps.repository.set_preferences(user_id, replace(prefs, language=code))
        logger.info("🌐 user=%s language → %s", user_id, code)

        async def render() -> RenderedMessage:
            notice = await self.t(user_id, "language_changed", {"language": self.const.LOGIC.LANGUAGES[code]})
            return await self.settings_screen(user_id, notice)

        await self.show(update, render)

    async def set_currency(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)
        code = self.param(context, "code").upper()
        if code not in self.const.LOGIC.CURRENCY_SYMBOLS:
            logger.info("💱 Unknown currency %r from user=%s", code, user_id)
            await self.show_settings(update, context)
            return

        prefs = await self.deps.repository.get_preferences(user_id)
        await self.deps.repository.set_preferences(user_id, replace(prefs, currency=code))
        logger.info("💱 user=%s currency → %s", user_id, code)

        async def render() -> RenderedMessage:
            notice = await self.t(user_id, "currency_changed", {"currency": code})
            return await self.settings_screen(user_id, notice)

        await self.show(update, render)


__all__ = ["SettingsFeature"]
