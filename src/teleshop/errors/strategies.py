# 📜 teleshop/errors/strategies.py
"""
📜 Стратегії конвертації сторонніх винятків у доменні `AppError`.

🔹 Сервіс обробки помилок лише перебирає стратегії — нові типи додаються без змін ядра.
🔹 httpx → `NetworkRequestError`, Telegram → `NetworkRequestError`, OSError сховища → `StorageError`.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx															# 🌐 HTTP-клієнт (винятки)
from telegram.error import RetryAfter, TelegramError					# 🤖 Telegram винятки

# 🔠 Системні імпорти
import logging
from typing import List, Optional, Protocol

# 🧩 Внутрішні модулі проєкту
from teleshop.bot.ui import static_messages as msg
from teleshop.shared.utils.logger import LOG_NAME
from .custom_errors import AppError, NetworkRequestError, StorageError


# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger(f"{LOG_NAME}.errors.strategies")


# ================================
# 🧠 КОНТРАКТ СТРАТЕГІЙ
# ================================
class IErrorHandlingStrategy(Protocol):
    """🧠 Контракт, що визначає єдиний метод `handle`."""

    def handle(self, error: Exception) -> Optional[AppError]:
        """Вертає `AppError`, якщо виняток розпізнано, або None."""


# ================================
# 🌐 HTTPX-СТРАТЕГІЯ
# ================================
class HttpxErrorStrategy(IErrorHandlingStrategy):
    """🌐 Перетворює httpx-помилки на `NetworkRequestError`."""

    def handle(self, error: Exception) -> Optional[AppError]:
        if isinstance(error, (httpx.ReadTimeout, httpx.ConnectTimeout)):	# ⏱️ Таймаути запиту
            url = self._url(error)
            logger.debug("⏱️ httpx timeout", extra={"url": url})
            return NetworkRequestError(msg.ERROR_HTTP_TIMEOUT, url=url, details=str(error))

        if isinstance(error, httpx.ConnectError):
            url = self._url(error)
            logger.debug("🌐 httpx connect error", extra={"url": url})
            return NetworkRequestError(msg.ERROR_HTTP_CONNECTION, url=url, details=str(error))

        if isinstance(error, httpx.HTTPStatusError):
            url = self._url(error)
            status = getattr(getattr(error, "response", None), "status_code", None)
            logger.debug("🔢 httpx status error", extra={"url": url, "status": status})
            return NetworkRequestError(
                msg.ERROR_HTTP_STATUS.format(status_code=status),
                url=url,
                status_code=status,
                details=str(error),
            )
        return None

    @staticmethod
    def _url(error: Exception) -> str:
        # httpx кидає RuntimeError з .request, якщо запит не привʼязано
        try:
            return str(error.request.url)  # type: ignore[attr-defined]
        except (AttributeError, RuntimeError):
            return "N/A"


# ================================
# 🤖 TELEGRAM-СТРАТЕГІЯ
# ================================
class TelegramErrorStrategy(IErrorHandlingStrategy):
    """🤖 Конвертує Telegram-помилки в `NetworkRequestError`."""

    def handle(self, error: Exception) -> Optional[AppError]:
        if isinstance(error, RetryAfter):								# ⏳ Telegram просить повторити
            retry_after = getattr(error, "retry_after", 1)
            secs = int(retry_after.total_seconds()) if hasattr(retry_after, "total_seconds") else int(retry_after)
            logger.debug("⏳ Telegram retry_after", extra={"seconds": secs})
            return NetworkRequestError(
                msg.ERROR_TELEGRAM_RETRY_AFTER.format(seconds=secs),
                details=str(error),
                retry_after_s=secs,
            )
        if isinstance(error, TelegramError):
            logger.debug("🤖 Telegram general error")
            return NetworkRequestError(msg.ERROR_TELEGRAM_GENERAL, details=str(error))
        return None


# ================================
# 🗄️ СТРАТЕГІЯ СХОВИЩА
# ================================
class StorageErrorStrategy(IErrorHandlingStrategy):
    """🗄️ Файлові збої сховища → `StorageError`."""

    def handle(self, error: Exception) -> Optional[AppError]:
        if isinstance(error, OSError):
            logger.debug("🗄️ Storage OSError", extra={"errno": getattr(error, "errno", None)})
            return StorageError(msg.ERROR_STORAGE, details=str(error))
        return None


def default_strategies() -> List[IErrorHandlingStrategy]:
    return [HttpxErrorStrategy(), TelegramErrorStrategy(), StorageErrorStrategy()]


__all__ = [
    "IErrorHandlingStrategy",
    "HttpxErrorStrategy",
    "TelegramErrorStrategy",
    "StorageErrorStrategy",
    "default_strategies",
]
