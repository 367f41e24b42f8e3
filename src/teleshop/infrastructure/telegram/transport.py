# 📡 teleshop/infrastructure/telegram/transport.py
"""
📡 TelegramTransport — адаптер PTB `Bot` під контракт `IMessageTransport`.

🔹 Тонка обгортка: жодних ретраїв чи ковтання помилок (це робить викликач).
🔹 Повідомлення надсилаються з `parse_mode` за замовчуванням (HTML).
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram import Bot, InlineKeyboardMarkup, LinkPreviewOptions		# 🤖 PTB Bot API

# 🔠 Системні імпорти
import logging
from typing import Any, Optional

# 🧩 Внутрішні модулі проєкту
from teleshop.config.setup.constants import CONST
from teleshop.domain.shop.interfaces import IMessageTransport
from teleshop.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.transport")


class TelegramTransport(IMessageTransport):
    """📡 Надсилання/видалення повідомлень через Telegram Bot API."""

    def __init__(self, bot: Bot, *, parse_mode: Optional[str] = CONST.UI.DEFAULT_PARSE_MODE) -> None:
        self._bot = bot
        self._parse_mode = parse_mode

    @property
    def bot(self) -> Bot:
        return self._bot

    async def send_text(self, chat_id: int, text: str, keyboard: Any = None) -> int:
        message = await self._bot.send_message(
            chat_id=chat_id,
            text=text,
            parse_mode=self._parse_mode,
            reply_markup=self._markup(keyboard),
            link_preview_options=LinkPreviewOptions(is_disabled=True),
        )
        logger.debug("📤 chat=%s text msg=%s", chat_id, message.message_id)
        return message.message_id

    async def send_photo(self, chat_id: int, photo: str, caption: str = "", keyboard: Any = None) -> int:
        message = await self._bot.send_photo(
            chat_id=chat_id,
            photo=photo,
            caption=caption or None,
            parse_mode=self._parse_mode,
            reply_markup=self._markup(keyboard),
        )
        logger.debug("🖼️ chat=%s photo msg=%s", chat_id, message.message_id)
        return message.message_id

    async def delete_message(self, chat_id: int, message_id: int) -> None:
        await self._bot.delete_message(chat_id=chat_id, message_id=message_id)

    async def answer_callback(self, callback_id: str, text: Optional[str] = None) -> None:
        await self._bot.answer_callback_query(callback_query_id=callback_id, text=text)

    @staticmethod
    def _markup(keyboard: Any) -> Optional[InlineKeyboardMarkup]:
        if keyboard is None or isinstance(keyboard, InlineKeyboardMarkup):
            return keyboard
        raise TypeError(f"Unsupported keyboard type: {type(keyboard).__name__}")


__all__ = ["TelegramTransport"]
