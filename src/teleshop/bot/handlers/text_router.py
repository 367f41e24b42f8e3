# 💬 teleshop/bot/handlers/text_router.py
"""
💬 text_router.py — маршрутизатор вільного тексту від користувача.

Порядок:
0. Очікуване one-shot захоплення для чату споживається першим (будь-який текст, без валідації).
1. Ключові слова меню («menu», «main menu», без урахування регістру) → головне меню.
2. Кастомні команди адміністратора `custom_command_1..3` → `custom_response_1..3`.
3. Усе інше → звернення до оператора + підтвердження.

Архітектура:
- Шар: bot (UI). Жодної бізнес-логіки — лише вибір продовження.
- Помилки йдуть у `ExceptionHandlerService` і зачіпають лише цей чат.
"""

from __future__ import annotations

# 🌐 ЗОВНІШНІ БІБЛІОТЕКИ
from telegram import Update

# 🔠 СИСТЕМНІ ІМПОРТИ
import asyncio
from typing import Dict, Iterable, Optional

# 🧩 ВНУТРІШНІ МОДУЛІ ПРОЄКТУ
from teleshop.bot.commands.base import BaseFeature, chat_key, user_key
from teleshop.bot.commands.core_commands_feature import CoreCommandsFeature
from teleshop.bot.commands.support_feature import SupportFeature
from teleshop.bot.services.custom_context import CustomContext
from teleshop.bot.services.types import CaptureHandlerType
from teleshop.bot.session import CaptureKind, RenderedMessage
from teleshop.errors.exception_handler_service import ExceptionHandlerService
from teleshop.shared.utils.logger import chat_logger


def normalize(text: str) -> str:
    """Порівнюємо без пробілів по краях і без регістру."""
    return " ".join((text or "").split()).casefold()


# ================================
# 🔗 МАРШРУТИЗАТОР ТЕКСТУ
# ================================
class TextRouter:
    """💬 Вибирає, що робити з текстовим повідомленням."""

    def __init__(
        self,
        *,
        core: CoreCommandsFeature,
        support: SupportFeature,
        features: Iterable[BaseFeature],
        exception_handler: ExceptionHandlerService,
    ) -> None:
        self.core = core
        self.support = support
        self.deps = core.deps
        self.const = core.const
        self._eh = exception_handler
        self._capture_handlers: Dict[CaptureKind, CaptureHandlerType] = {}
        for feature in features:
            self._capture_handlers.update(feature.get_capture_handlers())
        self._menu_keywords = frozenset(normalize(k) for k in self.const.UI.MENU_KEYWORDS)

    async def handle(self, update: Update, context: CustomContext) -> None:
        message = update.effective_message
        chat_id = chat_key(update)
        if message is None or chat_id is None or message.text is None:
            return
        text = message.text

        try:
            await self._route(update, context, chat_id, text)
        except asyncio.CancelledError:
            raise
        except Exception as e:  # noqa: BLE001
            await self._eh.handle(e, update)

    async def _route(self, update: Update, context: CustomContext, chat_id: int, text: str) -> None:
        log = chat_logger(chat_id, "text")

        # 0️⃣ one-shot захоплення
        pending = self.deps.captures.pop(chat_id)
        if pending is not None:
            handler = self._capture_handlers.get(pending.kind)
            if handler is not None:
                log.info("🪝 consumed capture %s", pending.kind.value)
                await handler(update, pending, text)
                return
            log.warning("🪝 capture %s has no continuation", pending.kind.value)

        normalized = normalize(text)

        # 1️⃣ меню
        if normalized in self._menu_keywords:
            log.debug("🏠 Menu keyword")
            await self.core.show_main_menu(update)
            return

        # 2️⃣ кастомні команди
        response = await self._custom_response(normalized)
        if response is not None:
            user_id = user_key(update)
            log.info("🧩 Custom command matched")

            async def render() -> RenderedMessage:
                return RenderedMessage(text=response, keyboard=await self.deps.keyboard.back_to_menu(user_id))

            await self.core.show(update, render)
            return

        # 3️⃣ звернення
        await self.support.record_inquiry(update, text)

    async def _custom_response(self, normalized: str) -> Optional[str]:
        if not normalized:
            return None
        settings = await self.deps.repository.get_bot_settings()
        for command_key, response_key in self.const.custom_command_keys():
            command = normalize(settings.get(command_key, ""))
            response = settings.get(response_key, "")
            if command and response and command == normalized:
                return response
        return None


__all__ = ["TextRouter", "normalize"]
