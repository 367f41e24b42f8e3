# 🧾 teleshop/config/setup/bot_registrar.py
"""
🧾 bot_registrar.py — Модуль для реєстрації всіх обробників у додатку.

🔹 Клас `BotRegistrar`:
- Ініціалізується додатком (Application) та контейнером залежностей (Container).
- Реєструє всі обробники команд з модулів "фіч".
- Реєструє глобальні обробники (колбеки, вільний текст).
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram.ext import Application, CallbackQueryHandler, MessageHandler, filters

# 🔠 Системні імпорти
import logging

# 🧩 Внутрішні модулі проєкту
from teleshop.config.setup.container import Container                # 📦 DI-контейнер усіх залежностей
from teleshop.shared.utils.logger import LOG_NAME                    # 🧾 Логер для інфо-повідомлень

logger = logging.getLogger(LOG_NAME)


# ================================
# 🏛️ КЛАС РЕЄСТРАТОРА
# ================================
class BotRegistrar:
    """
    🔌 Реєструє всі обробники (хендлери) в Telegram Application.
    """

    def __init__(self, application: Application, container: Container):
        self.app = application
        self.container = container

    def register_handlers(self) -> None:
        """
        🔗 Реєструє всі обробники: спочатку з модулів фіч, потім глобальні.
        """

        # ✨ 1. Команди фіч (/start)
        logger.info("--- Починаю автоматичну реєстрацію фіч ---")
        for feature in self.container.features:
            feature.register_handlers(self.app)
            logger.info("✅ Фіча '%s' успішно зареєстрована.", feature.__class__.__name__)
        logger.info("--- Усі фічі зареєстровано ---")

        # 🤖 2. Реєстрація глобальних обробників

        # Усі натискання на inline-кнопки: впорядкований реєстр маршрутів
        self.app.add_handler(CallbackQueryHandler(self.container.callback_handler.handle))

        # Вільний текст: захоплення → меню → кастомні команди → звернення.
        # Має бути останнім, щоб не перехоплювати команди.
        self.app.add_handler(MessageHandler(
            filters.TEXT & ~filters.COMMAND,
            self.container.text_router.handle,
        ))


__all__ = ["BotRegistrar"]
