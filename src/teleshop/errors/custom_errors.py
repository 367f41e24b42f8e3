# 🚨 teleshop/errors/custom_errors.py
"""
🚨 Винятки шару обробки помилок.

🔹 Реекспортує базову ієрархію з `teleshop.shared.errors`.
🔹 Додає `NetworkRequestError` (httpx/Telegram) і `CallbackPayloadError` (пошкоджений токен кнопки).
🔹 `ErrorCode` — коротка категорія для `logger.extra`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging														# 🧾 Логування створення винятків
from typing import Dict, Optional									# 📐 Типізація

# 🧩 Внутрішні модулі проєкту
from teleshop.shared.errors import (
    AppError as AppError,
    StaleReferenceError as StaleReferenceError,
    StorageError as StorageError,
    UserVisibleError as UserVisibleError,
)
from teleshop.shared.utils.logger import LOG_NAME


# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger(f"{LOG_NAME}.errors.custom_errors")


# ================================
# ⚠️ КАТЕГОРІЇ
# ================================
class ErrorCode:
    """⚠️ Категорії помилок для логів."""

    NETWORK = "network_error"										# 🌐 Мережеві збої
    PAYLOAD = "payload_error"										# 🎛️ Некоректний callback
    STORAGE = "storage_error"										# 🗄️ Сховище
    UNKNOWN = "unknown_error"										# ❓ Резервний код


# ================================
# 🧾 ДОДАТКОВІ ВИНЯТКИ
# ================================
class CallbackPayloadError(AppError, ValueError):
    """🎛️ Токен кнопки порожній, задовгий або має неприпустимі аргументи."""

    def __init__(self, message: str, *, payload: Optional[str] = None, details: Optional[str] = None) -> None:
        super().__init__(message, details=details)
        self.payload = payload										# 🎛️ Сирий payload

    def to_log_extra(self) -> Dict[str, object]:
        extra: Dict[str, object] = {"error_code": ErrorCode.PAYLOAD}
        if self.payload is not None:
            extra["payload"] = self.payload
        return extra


class NetworkRequestError(UserVisibleError):
    """🌐 Збій мережевого запиту (HTTP або Telegram API)."""

    def __init__(
        self,
        message: str,
        *,
        details: Optional[str] = None,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        retry_after_s: Optional[int] = None,
    ) -> None:
        super().__init__(message, details=details)
        self.url = url												# 🔗 URL, що викликав помилку
        self.status_code = status_code								# 🔢 HTTP-код відповіді
        self.retry_after_s = retry_after_s							# ⏳ Рекомендація щодо повтору
        logger.debug(
            "🌐 NetworkRequestError created",
            extra={"url": url, "status_code": status_code, "retry_after_s": retry_after_s},
        )

    def to_log_extra(self) -> Dict[str, object]:
        extra: Dict[str, object] = {"error_code": ErrorCode.NETWORK}
        if self.url:
            extra["url"] = self.url
        if self.status_code is not None:
            extra["status_code"] = self.status_code
        if self.retry_after_s is not None:
            extra["retry_after_s"] = self.retry_after_s
        return extra


__all__ = [
    "ErrorCode",
    "AppError",
    "UserVisibleError",
    "StaleReferenceError",
    "StorageError",
    "CallbackPayloadError",
    "NetworkRequestError",
]
