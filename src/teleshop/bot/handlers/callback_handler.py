# 🎛️ teleshop/bot/handlers/callback_handler.py
"""
🎛️ callback_handler.py — централізований обробник для всіх inline‑кнопок (callback_query).

Призначення:
- Першим ділом відповідає на callback; якщо відповідь не вдалась — тихо припиняє обробку.
- Шукає маршрут у `CallbackRegistry` (точні збіги, потім префікси).
- Кладе параметри в `context.callback_params`.
- Невідомий payload → головне меню.
- Всі помилки йдуть у централізований `ExceptionHandlerService`.

Архітектура:
- Шар: bot (UI Telegram). Жодної бізнес‑логіки.
- Залежності приходять через конструктор (DI).
"""

from __future__ import annotations

# ==========================
# 🌐 ЗОВНІШНІ БІБЛІОТЕКИ
# ==========================
from telegram import Update													# 📦 Тип апдейту Telegram

# ==========================
# 🔠 СИСТЕМНІ ІМПОРТИ
# ==========================
import asyncio														# 🔄 Корутини / CancelledError
import logging														# 🧾 Логування

# ==========================
# 🧩 ВНУТРІШНІ МОДУЛІ
# ==========================
from teleshop.bot.services.callback_registry import CallbackRegistry		# 📚 Реєстр колбек‑хендлерів
from teleshop.bot.services.custom_context import CustomContext			# 🧱 Розширений контекст застосунку
from teleshop.bot.services.types import CallbackHandlerType				# 🔗 Сигнатура обробника
from teleshop.domain.shop.interfaces import IMessageTransport			# 📡 Відповідь на callback
from teleshop.errors.exception_handler_service import ExceptionHandlerService	# 🚑 Централізована обробка помилок
from teleshop.shared.metrics import CALLBACKS_ROUTED, CALLBACKS_UNMATCHED
from teleshop.shared.utils.logger import LOG_NAME							# 🏷️ Імʼя логера проєкту

# ==========================
# 🧾 ЛОГЕР
# ==========================
logger = logging.getLogger(LOG_NAME)										# 🧾 Глобальний логер модуля


# ==========================
# 🏛️ КЛАС ОБРОБНИКА
# ==========================
class CallbackHandler:
    """
    🎛️ Централізовано обробляє натискання на inline‑кнопки.

    Вхідні залежності:
        registry: впорядкована таблиця маршрутів.
        transport: відповідає на callback (прибирає «годинник»).
        exception_handler: централізований сервіс обробки винятків.
        fallback: обробник для невідомих payload (головне меню).
    """

    def __init__(
        self,
        registry: CallbackRegistry,
        transport: IMessageTransport,
        exception_handler: ExceptionHandlerService,
        fallback: CallbackHandlerType,
    ) -> None:
        self.registry = registry												# 📚 DI: реєстр колбек‑хендлерів
        self._transport = transport
        self._eh = exception_handler											# 🚑 DI: сервіс обробки винятків
        self._fallback = fallback

    # ==========================
    # 🎯 ГОЛОВНИЙ МЕТОД
    # ==========================
    async def handle(self, update: Update, context: CustomContext) -> None:
        query = update.callback_query											# ✉️ Сам обʼєкт callback_query
        if not query:
            return

        # Відповідь обовʼязкова; збій означає, що апдейт застарів або транспорт недоступний
        try:
            await self._transport.answer_callback(query.id)
        except asyncio.CancelledError:
            raise
        except Exception as e:  # noqa: BLE001
            logger.debug("Callback answer failed, update dropped: %s", e)
            return

        try:
            raw_data = query.data or ""
            logger.info("👆 Callback received: %s", raw_data)

            resolved = self.registry.resolve(raw_data)
            if resolved is None:
                CALLBACKS_UNMATCHED.inc()
                logger.warning("⚠️ No route for callback '%s' → main menu", raw_data)
                context.callback_params = {}
                await self._fallback(update, context)
                return

            route, params = resolved
            context.callback_params = params									# 📦 Кладемо параметри в контекст
            CALLBACKS_ROUTED.labels(route=route.spec.action).inc()
            logger.debug("🧩 Routed: action='%s', params=%s", route.spec.action, params)
            await route.handler(update, context)								# 🎬 Викликаємо потрібний хендлер

        except asyncio.CancelledError:
            logger.warning("Callback handling cancelled.")						# ⏹️ Завдання скасоване — передаємо далі
            raise
        except Exception as e:  # noqa: BLE001
            await self._eh.handle(e, update)									# 🚑 Централізована обробка будь‑яких винятків


__all__ = ["CallbackHandler"]
