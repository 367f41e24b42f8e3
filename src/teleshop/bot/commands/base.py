# 🏛️ teleshop/bot/commands/base.py
"""
🏛️ Базовий контракт фічі та спільні залежності екранів.

🔹 `FeatureDeps` — набір колабораторів, які потрібні кожній фічі (сховище, локалізація, розмова...)
🔹 `BaseFeature` — реєструється в `CallbackRegistry` при створенні; вміє показати екран через
   `ConversationManager.replace` і відрендерити головне меню
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram import Update                                              # 📡 Об'єкт вхідного апдейту
from telegram.ext import Application                                     # 🧰 Реєстрація команд у застосунку

# 🔠 Системні імпорти
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence

# 🧩 Внутрішні модулі проєкту
from teleshop.bot.services.callback_data_factory import CallbackData
from teleshop.bot.services.callback_registry import CallbackRegistry
from teleshop.bot.services.types import CallbackHandlerType, CaptureHandlerType
from teleshop.bot.session import CaptureKind, CaptureRegistry, ConversationManager, Render, RenderedMessage
from teleshop.bot.ui.formatters.shop_formatter import ShopFormatter
from teleshop.bot.ui.keyboards.keyboards import Keyboard
from teleshop.config.setup.constants import AppConstants
from teleshop.domain.pricing import TierPricingResolver
from teleshop.domain.shop.interfaces import ILocalizer, IShopRepository
from teleshop.shared.utils.logger import LOG_NAME

logger = logging.getLogger(LOG_NAME)

DEFAULT_STORE_NAME = "TeleShop"


@dataclass(frozen=True, slots=True)
class FeatureDeps:
    repository: IShopRepository
    localizer: ILocalizer
    conversations: ConversationManager
    captures: CaptureRegistry
    keyboard: Keyboard
    formatter: ShopFormatter
    resolver: TierPricingResolver
    constants: AppConstants


def user_key(update: Update) -> str:
    """Ідентифікатор користувача для сховища/локалізації (рядок)."""
    user = update.effective_user
    if user is not None:
        return str(user.id)
    chat = update.effective_chat
    return str(chat.id) if chat is not None else ""


def chat_key(update: Update) -> Optional[int]:
    chat = update.effective_chat
    return chat.id if chat is not None else None


class BaseFeature(ABC):
    """
    🏛️ Фіча: набір callback-маршрутів і (необовʼязково) команд/текстових обробників.
    """

    def __init__(self, registry: CallbackRegistry, deps: FeatureDeps) -> None:
        self.registry = registry
        self.deps = deps
        self.const = deps.constants
        self.registry.register(self)

    # ================================
    # 🔌 РЕЄСТРАЦІЯ
    # ================================
    def register_handlers(self, application: Application) -> None:
        """Команди/фільтри PTB. Більшість фіч живе лише на callback-ах."""

    @abstractmethod
    def get_callback_handlers(self) -> Dict[CallbackData, CallbackHandlerType]:
        ...

    def get_capture_handlers(self) -> Dict[CaptureKind, CaptureHandlerType]:
        """Продовження для one-shot захоплень вільного тексту, які ця фіча реєструє."""
        return {}

    # ================================
    # 🖼️ ПОКАЗ ЕКРАНІВ
    # ================================
    async def show(self, update: Update, render: Render, extra: Sequence[Render] = ()) -> Optional[int]:
        """Замінює активне повідомлення чату новим екраном (і його допоміжними повідомленнями)."""
        chat_id = chat_key(update)
        if chat_id is None:
            logger.debug("📭 %s: update without chat, screen skipped", type(self).__name__)
            return None
        return await self.deps.conversations.replace(chat_id, render, extra)

    async def t(self, user_id: str, key: str, params: Optional[Mapping[str, Any]] = None) -> str:
        return await self.deps.localizer.translate(user_id, key, params)

    async def show_main_menu(self, update: Update) -> Optional[int]:
        user_id = user_key(update)
        return await self.show(update, lambda: self.main_menu_screen(user_id))

    async def main_menu_screen(self, user_id: str) -> RenderedMessage:
        """Привітання (із налаштувань магазину, якщо задано) + головне меню."""
        settings = await self.deps.repository.get_bot_settings()
        store_name = settings.get("store_name") or DEFAULT_STORE_NAME
        custom = settings.get("welcome_message")
        if custom:
            text = custom.replace("{store_name}", store_name)
        else:
            text = await self.t(user_id, "welcome_message", {"store_name": store_name})
        return RenderedMessage(text=text, keyboard=await self.deps.keyboard.main_menu(user_id))

    async def simple_screen(self, user_id: str, key: str, params: Optional[Mapping[str, Any]] = None) -> RenderedMessage:
        """Текст з каталогу + кнопка «до меню»."""
        return RenderedMessage(
            text=await self.t(user_id, key, params),
            keyboard=await self.deps.keyboard.back_to_menu(user_id),
        )

    def param(self, context: Any, name: str) -> str:
        params: Dict[str, str] = getattr(context, "callback_params", None) or {}
        return params.get(name, "")


__all__ = ["BaseFeature", "DEFAULT_STORE_NAME", "FeatureDeps", "chat_key", "user_key"]
