# 🛡️ teleshop/errors/exception_handler_service.py
"""
🛡️ Центральний сервіс обробки помилок для Telegram-бота.

🔹 Конвертує будь-які винятки в доменні `AppError`, використовуючи передані стратегії.
🔹 Відповідає лише в той чат, де стався збій: локалізований текст + кнопка «головне меню».
🔹 Якщо локалізація теж падає — статичний англомовний текст. Ніколи не валить хендлер.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update	# 🤖 Telegram DTO

# 🔠 Системні імпорти
import asyncio														# ⏱️ CancelledError
import logging														# 🧾 Логування кроків
from typing import Any, Awaitable, Callable, List, Mapping, Optional, Tuple

# 🧩 Внутрішні модулі проєкту
from teleshop.bot.ui import static_messages as msg
from teleshop.bot.ui.error_presenter import MAIN_MENU_KEY, build_error_message, locale_key_for
from teleshop.config.setup.constants import CONST
from teleshop.domain.shop.interfaces import ILocalizer
from teleshop.shared.utils.logger import LOG_NAME
from .custom_errors import AppError, StaleReferenceError, UserVisibleError
from .reason_codes import ReasonCode
from .reason_mapper import map_error_to_reason
from .strategies import IErrorHandlingStrategy


# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger(LOG_NAME)

ErrorResponder = Callable[[int, str, InlineKeyboardMarkup], Awaitable[Any]]	# 📤 (chat_id, text, keyboard)


# ================================
# 🧠 СЕРВІС ОБРОБКИ ПОМИЛОК
# ================================
class ExceptionHandlerService:
    """🧠 Глобальний диспетчер помилок для асинхронних Telegram-хендлерів."""

    def __init__(
        self,
        strategies: List[IErrorHandlingStrategy],
        *,
        localizer: Optional[ILocalizer] = None,
        responder: Optional[ErrorResponder] = None,
    ) -> None:
        self._strategies = list(strategies)							# 📦 Копія списку, щоб уникнути мутацій
        self._localizer = localizer									# 🌍 Локалізація тексту помилки
        self._responder = responder									# 📤 Зазвичай ConversationManager.replace-обгортка
        logger.info("🛡️ ExceptionHandlerService init", extra={"strategies": len(self._strategies)})

    def bind(self, *, localizer: Optional[ILocalizer] = None, responder: Optional[ErrorResponder] = None) -> None:
        """Пізнє підключення колаборантів (контейнер створює сервіс раніше за них)."""
        if localizer is not None:
            self._localizer = localizer
        if responder is not None:
            self._responder = responder

    # ================================
    # 🔑 ПУБЛІЧНИЙ API
    # ================================
    async def handle(self, error: BaseException, update: Optional[Update]) -> None:
        """
        Головна точка входу. Нічого не піднімає, окрім CancelledError.
        """
        if isinstance(error, asyncio.CancelledError):
            logger.info("⏹️ CancelledError passthrough")
            raise error

        domain_error = self._convert_error(error)
        chat_id, user_id = self._extract_ids(update)
        code, ctx = map_error_to_reason(domain_error or error)

        if isinstance(domain_error, (UserVisibleError, StaleReferenceError)):
            logger.warning(
                "⚠️ %s for user=%s: %s",
                type(domain_error).__name__,
                user_id,
                domain_error,
                extra=self._extract_extra(domain_error),
            )
        else:
            logger.error("🔥 Unhandled exception for user=%s", user_id, exc_info=error)

        if chat_id is None:
            logger.debug("ℹ️ No chat to notify (code=%s)", code.value)
            return

        try:
            text, keyboard = await self._render(user_id, code, ctx)
        except Exception:
            logger.exception("🔥 Failed to render error message for user=%s", user_id)
            text, keyboard = msg.ERROR_CRITICAL, self._keyboard(msg.MAIN_MENU_BUTTON)
        await self._safe_reply(update, chat_id, text, keyboard)

    # ================================
    # 🛠️ ДОПОМІЖНІ МЕТОДИ
    # ================================
    def _convert_error(self, error: BaseException) -> Optional[AppError]:
        """🔄 Пропускає виняток через стратегії й повертає `AppError`, якщо можливо."""
        if isinstance(error, AppError):
            return error
        if not isinstance(error, Exception):
            return None
        for strategy in self._strategies:
            try:
                converted = strategy.handle(error)
            except Exception as exc:									# noqa: BLE001
                logger.exception("🔥 Strategy failed: %r", strategy, exc_info=exc)
                continue
            if converted:
                logger.debug("🔁 Strategy converted error via %r", strategy)
                return converted
        return None

    @staticmethod
    def _extract_ids(update: Optional[Update]) -> Tuple[Optional[int], str]:
        """🆔 (chat_id, user_id) для відповіді й логів; update може бути None або не-Update."""
        if not isinstance(update, Update):
            return None, "N/A"
        chat = update.effective_chat
        user = update.effective_user
        chat_id = chat.id if chat else (user.id if user else None)
        return chat_id, str(user.id) if user else str(chat_id or "N/A")

    @staticmethod
    def _extract_extra(error: AppError) -> Optional[Mapping[str, Any]]:
        """📦 Викликає `to_log_extra`, якщо він повертає Mapping."""
        try:
            payload = error.to_log_extra()
        except Exception:
            logger.debug("⚠️ to_log_extra failed", exc_info=True)
            return None
        return dict(payload) if isinstance(payload, Mapping) else None

    async def _render(self, user_id: str, code: ReasonCode, ctx: Mapping[str, Any]) -> Tuple[str, InlineKeyboardMarkup]:
        """🌍 Локалізований текст і кнопка; при збої локалізації — статичні англомовні."""
        if self._localizer is not None:
            try:
                text = await self._localizer.translate(user_id, locale_key_for(code))
                label = await self._localizer.translate(user_id, MAIN_MENU_KEY)
                return text, self._keyboard(label)
            except Exception:
                logger.warning("🌍 Localization failed while presenting error for user=%s", user_id, exc_info=True)
        return build_error_message(code, ctx=dict(ctx)), self._keyboard(msg.MAIN_MENU_BUTTON)

    @staticmethod
    def _keyboard(label: str) -> InlineKeyboardMarkup:
        return InlineKeyboardMarkup(
            [[InlineKeyboardButton(label, callback_data=CONST.CALLBACKS.BACK_TO_MENU.build())]]
        )

    async def _safe_reply(
        self,
        update: Optional[Update],
        chat_id: int,
        text: str,
        keyboard: InlineKeyboardMarkup,
    ) -> None:
        """💬 Тихо намагається відповісти в чат, не валячи обробник."""
        try:
            if self._responder is not None:
                await self._responder(chat_id, text, keyboard)
                return
            message = getattr(update, "effective_message", None)
            if message is None:
                logger.debug("ℹ️ _safe_reply: no message object")
                return
            await message.reply_text(text, reply_markup=keyboard)
        except Exception as send_err:
            logger.warning("⚠️ Failed to send error message to chat=%s: %s", chat_id, send_err)


__all__ = ["ErrorResponder", "ExceptionHandlerService"]
