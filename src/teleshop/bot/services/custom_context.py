# 🧠 teleshop/bot/services/custom_context.py
"""
🧠 Розширений контекст PTB: параметри розібраного callback-токена.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram.ext import Application, CallbackContext, ExtBot

# 🔠 Системні імпорти
from typing import Dict, Optional


class CustomContext(CallbackContext[ExtBot, dict, dict, dict]):
    """🧠 `context.callback_params` заповнює `CallbackHandler` перед викликом фічі."""

    def __init__(
        self,
        application: Application,
        chat_id: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> None:
        super().__init__(application=application, chat_id=chat_id, user_id=user_id)
        self.callback_params: Dict[str, str] = {}


__all__ = ["CustomContext"]
