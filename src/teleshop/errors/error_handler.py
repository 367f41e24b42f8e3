# 🛠️ teleshop/errors/error_handler.py
"""
🛠️ Фабрика декораторів для безпечного виконання async-хендлерів Telegram-бота.

🔹 Не змінює сигнатуру функції, працює з будь-якими *args/**kwargs.
🔹 Коректно пропускає `asyncio.CancelledError`, щоб не ламати зупинку задач.
🔹 Шукає обʼєкт `Update` серед аргументів і делегує винятки `ExceptionHandlerService`.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from telegram import Update											# 🤖 Telegram DTO

# 🔠 Системні імпорти
import asyncio
import functools
import logging
from typing import Any, Callable, Coroutine, Optional

# 🧩 Внутрішні модулі проєкту
from teleshop.shared.utils.logger import LOG_NAME
from .exception_handler_service import ExceptionHandlerService


# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger(f"{LOG_NAME}.errors.error_handler")

AsyncHandler = Callable[..., Coroutine[Any, Any, Any]]


# ================================
# 🏭 ФАБРИКА ДЕКОРАТОРІВ
# ================================
def make_error_handler(service: ExceptionHandlerService) -> Callable[[AsyncHandler], AsyncHandler]:
    """
    Створює декоратор, замкнений на `ExceptionHandlerService`.

    Args:
        service: Сервіс, який отримує винятки і `Update`.

    Returns:
        Callable, що обгортає async-хендлери, додаючи централізовану обробку.
    """

    def decorator(func: AsyncHandler) -> AsyncHandler:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except asyncio.CancelledError:
                logger.info("⏹️ error_handler.cancelled", extra={"handler": func.__name__})
                raise											# ⚠️ Ніколи не глотаємо cancel
            except Exception as exc:							# noqa: BLE001
                update: Optional[Update] = kwargs.get("update")
                if update is None:
                    update = next((arg for arg in args if isinstance(arg, Update)), None)
                logger.debug(
                    "🔥 error_handler.exception",
                    extra={"handler": func.__name__, "has_update": update is not None},
                )
                await service.handle(exc, update)
                return None

        return wrapper											# type: ignore[return-value]

    return decorator


__all__ = ["make_error_handler"]
