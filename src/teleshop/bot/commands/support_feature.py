# 👤 teleshop/bot/commands/support_feature.py
"""
👤 Підтримка: контакти оператора, живий чат, «email», FAQ і звернення з вільного тексту.

🔹 «Live chat» / «Email» реєструють one-shot захоплення: наступне текстове повідомлення
   стає зверненням (`Inquiry`) з відповідним `source`
🔹 `record_inquiry` — спільна точка для захоплень і для тексту, який ніщо інше не розпізнало
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram import Update

# 🔠 Системні імпорти
import logging
from typing import Dict, cast

# 🧩 Внутрішні модулі проєкту
from teleshop.bot.commands.base import BaseFeature, chat_key, user_key
from teleshop.bot.services.callback_data_factory import CallbackData
from teleshop.bot.services.custom_context import CustomContext
from teleshop.bot.services.types import CallbackHandlerType, CaptureHandlerType
from teleshop.bot.session import CaptureKind, PendingCapture, RenderedMessage
from teleshop.bot.ui.formatters.shop_formatter import safe
from teleshop.domain.shop.entities import Inquiry
from teleshop.shared.metrics import INQUIRIES_CREATED
from teleshop.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.support")

# ================================
# ⚙️ ДЕФОЛТИ КОНТАКТІВ (перекриваються bot_settings)
# ================================
OPERATOR_DEFAULTS: Dict[str, str] = {
    "operator_contact": "@support",
    "operator_email": "support@example.com",
    "operator_hours": "Mon-Fri 9:00-18:00",
    "operator_response_time": "15 min",
}

SOURCE_LIVE_CHAT = "live_chat"
SOURCE_EMAIL = "email"
SOURCE_TEXT = "text"


class SupportFeature(BaseFeature):
    """👤 Екрани оператора та запис звернень."""

    def get_callback_handlers(self) -> Dict[CallbackData, CallbackHandlerType]:
        cb = self.const.CALLBACKS
        mapping = {
            cb.OPERATOR: self.show_operator,
            cb.LIVE_CHAT: self.start_live_chat,
            cb.SEND_EMAIL: self.start_email,
            cb.VIEW_FAQ: self.show_faq,
        }
        return cast(Dict[CallbackData, CallbackHandlerType], mapping)

    def get_capture_handlers(self) -> Dict[CaptureKind, CaptureHandlerType]:
        return {
            CaptureKind.SUPPORT_MESSAGE: self.on_support_message,
            CaptureKind.EMAIL_MESSAGE: self.on_email_message,
        }

    # ================================
    # 📞 ЕКРАНИ
    # ================================
    async def show_operator(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)

        async def render() -> RenderedMessage:
            settings = await self.deps.repository.get_bot_settings()
            values = {key: settings.get(key) or default for key, default in OPERATOR_DEFAULTS.items()}
            text = await self.t(
                user_id,
                "operator_title",
                {
                    "contact": safe(values["operator_contact"]),
                    "email": safe(values["operator_email"]),
                    "hours": safe(values["operator_hours"]),
                    "time": safe(values["operator_response_time"]),
                },
            )
            return RenderedMessage(text=text, keyboard=await self.deps.keyboard.operator(user_id))

        await self.show(update, render)

    async def show_faq(self, update: Update, context: CustomContext) -> None:
        user_id = user_key(update)

        async def render() -> RenderedMessage:
            return RenderedMessage(
                text=await self.t(user_id, "faq_text"),
                keyboard=await self.deps.keyboard.back_to_operator(user_id),
            )

        await self.show(update, render)

    async def start_live_chat(self, update: Update, context: CustomContext) -> None:
        await self._prompt(update, CaptureKind.SUPPORT_MESSAGE, "live_chat_prompt")

    async def start_email(self, update: Update, context: CustomContext) -> None:
        await self._prompt(update, CaptureKind.EMAIL_MESSAGE, "email_prompt")

    async def _prompt(self, update: Update, kind: CaptureKind, key: str) -> None:
        user_id = user_key(update)
        chat_id = chat_key(update)
        if chat_id is None:
            return
        self.deps.captures.register(PendingCapture(kind=kind, chat_id=chat_id))

        async def render() -> RenderedMessage:
            return RenderedMessage(
                text=await self.t(user_id, key),
                keyboard=await self.deps.keyboard.back_to_operator(user_id),
            )

        await self.show(update, render)

    # ================================
    # 🪝 ПРОДОВЖЕННЯ ЗАХОПЛЕНЬ
    # ================================
    async def on_support_message(self, update: Update, capture: PendingCapture, text: str) -> None:
        await self.record_inquiry(update, text, source=SOURCE_LIVE_CHAT, ack_key="support_message_received")

    async def on_email_message(self, update: Update, capture: PendingCapture, text: str) -> None:
        await self.record_inquiry(update, text, source=SOURCE_EMAIL, ack_key="email_message_received")

    # ================================
    # 📨 ЗВЕРНЕННЯ
    # ================================
    async def record_inquiry(
        self,
        update: Update,
        text: str,
        *,
        source: str = SOURCE_TEXT,
        ack_key: str = "inquiry_received",
    ) -> None:
        """Зберігає звернення як є (без валідації) і показує підтвердження з меню."""
        user_id = user_key(update)
        user = update.effective_user
        inquiry = Inquiry(
            user_id=user_id,
            message=text,
            username=(user.username or "") if user else "",
            customer_name=(user.full_name or "") if user else "",
            source=source,
        )
        await self.deps.repository.create_inquiry(inquiry)
        INQUIRIES_CREATED.labels(source=source).inc()
        logger.info("📨 Inquiry from user=%s source=%s (%d chars)", user_id, source, len(text))

        async def render() -> RenderedMessage:
            return RenderedMessage(
                text=await self.t(user_id, ack_key),
                keyboard=await self.deps.keyboard.main_menu(user_id),
            )

        await self.show(update, render)


__all__ = ["OPERATOR_DEFAULTS", "SupportFeature"]
