# 🧱 teleshop/bot/services/types.py
"""
🧱 Аліаси типів і протоколи для реєстрації обробників.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram import Update

# 🔠 Системні імпорти
from typing import TYPE_CHECKING, Awaitable, Callable, Dict, Protocol

# 🧩 Внутрішні модулі проєкту
from .callback_data_factory import CallbackData

if TYPE_CHECKING:
    from teleshop.bot.session.capture_registry import PendingCapture

    from .custom_context import CustomContext

CallbackHandlerType = Callable[[Update, "CustomContext"], Awaitable[None]]
CaptureHandlerType = Callable[[Update, "PendingCapture", str], Awaitable[None]]   # 🪝 Продовження one-shot захоплення


class Registrable(Protocol):
    """Фіча, що віддає свої callback-маршрути реєстру."""

    def get_callback_handlers(self) -> Dict[CallbackData, CallbackHandlerType]: ...


__all__ = ["CallbackHandlerType", "CaptureHandlerType", "Registrable"]
