# 📬 teleshop/bot/commands/core_commands_feature.py
"""
📬 Базові команди: `/start`, `/help`, `/catalog` і повернення до головного меню.

🔹 `/start` запамʼятовує користувача (для розсилок) і показує привітання з меню
🔹 `/help` — текст `help_message` з налаштувань магазину або з каталогу локалізації
🔹 `/catalog` — той самий екран, що й кнопка `listings`
🔹 `back_to_menu` — кнопка «до меню» на кожному екрані
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram import Update                                              # 📡 Об'єкт вхідного апдейту
from telegram.ext import Application, CommandHandler                     # 🧰 Реєстрація команд у застосунку

# 🔠 Системні імпорти
import logging                                                           # 🧾 Логування подій
from typing import Any, Callable, Dict, Optional, cast                    # 🧰 Типізація та допоміжні касти

# 🧩 Внутрішні модулі проєкту
from teleshop.bot.commands.base import BaseFeature, FeatureDeps, chat_key, user_key  # 🏛️ Базовий контракт фічі
from teleshop.bot.services.callback_data_factory import CallbackData     # 🏷️ Типи callback-даних
from teleshop.bot.services.callback_registry import CallbackRegistry
from teleshop.bot.services.custom_context import CustomContext           # 🧠 Розширений контекст
from teleshop.bot.services.types import CallbackHandlerType              # 🔗 Сигнатура callback-хендлера
from teleshop.bot.session import RenderedMessage                         # 🖼️ Екран для ConversationManager
from teleshop.domain.shop.entities import TrackedUser
from teleshop.shared.utils.logger import LOG_NAME                        # 🏷️ Ім'я кореневого логера

# ================================
# 🧾 ЛОГЕР МОДУЛЯ
# ================================
logger = logging.getLogger(LOG_NAME)


# ================================
# 🏛️ ФІЧА БАЗОВИХ КОМАНД
# ================================
class CoreCommandsFeature(BaseFeature):
    """
    ✨ `/start`, `/help`, `/catalog` та головне меню.

    `guard` — декоратор з `make_error_handler`; команди PTB обходять CallbackHandler,
    тому помилки команд ловить він.
    """

    def __init__(
        self,
        registry: CallbackRegistry,
        deps: FeatureDeps,
        *,
        guard: Optional[Callable[[Any], Any]] = None,
    ) -> None:
        super().__init__(registry, deps)
        self._guard = guard

    # ================================
    # 🔌 РЕЄСТРАЦІЯ КОМАНД
    # ================================
    def register_handlers(self, application: Application) -> None:
        commands = self.const.LOGIC.COMMANDS
        for command, callback in (
            (commands.START, self.start_command),
            (commands.HELP, self.help_command),
            (commands.CATALOG, self.catalog_command),
        ):
            handler = self._guard(callback) if self._guard else callback
            application.add_handler(CommandHandler(command, handler))
        logger.info("🧾 Core commands registered (start, help, catalog)")

    def get_callback_handlers(self) -> Dict[CallbackData, CallbackHandlerType]:
        mapping = {
            self.const.CALLBACKS.BACK_TO_MENU: self.back_to_menu,          # 🏠 До меню
        }
        return cast(Dict[CallbackData, CallbackHandlerType], mapping)

    # ================================
    # ▶️ /START
    # ================================
    async def start_command(self, update: Update, context: CustomContext) -> None:
        user = update.effective_user
        chat_id = chat_key(update)
        logger.info("➡️ /start by user=%s chat=%s", getattr(user, "id", "unknown"), chat_id)
        if chat_id is None:
            return

        if user is not None:
            await self.deps.repository.track_user(
                TrackedUser(
                    user_id=str(user.id),
                    username=user.username or "",
                    first_name=user.first_name or "",
                )
            )
        self.deps.conversations.open(chat_id)
        await self.show_main_menu(update)

    # ================================
    # ℹ️ /HELP
    # ================================
    async def help_command(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)
        logger.info("ℹ️ /help by user=%s", user_id)

        async def render() -> RenderedMessage:
            settings = await self.deps.repository.get_bot_settings()
            text = settings.get("help_message") or await self.t(user_id, "help_message")
            return RenderedMessage(text=text, keyboard=await self.deps.keyboard.back_to_menu(user_id))

        await self.show(update, render)

    # ================================
    # 📋 /CATALOG
    # ================================
    async def catalog_command(self, update: Update, context: CustomContext) -> None:
        logger.info("📋 /catalog by user=%s", user_key(update))
        handler = self.registry.get_handler(self.const.CALLBACKS.LISTINGS)
        if handler is None:
            await self.show_main_menu(update)
            return
        await handler(update, context)

    # ================================
    # 🏠 МЕНЮ
    # ================================
    async def back_to_menu(self, update: Update, context: CustomContext) -> None:
        logger.debug("🏠 back_to_menu user=%s", user_key(update))
        await self.show_main_menu(update)


__all__ = ["CoreCommandsFeature"]
