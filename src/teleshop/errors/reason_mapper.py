# 🧭 teleshop/errors/reason_mapper.py
"""
🧭 Мапить винятки → `ReasonCode` + контекст для тексту помилки.

🔹 Розрізняє наші доменні помилки (застаріле посилання, сховище, payload) і технічні.
🔹 Інкапсулює специфіку httpx і Telegram.
🔹 Повертає словник параметрів (`ctx`), який підставляється в повідомлення.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx															# 🌐 HTTP-клієнт (винятки)
from telegram.error import RetryAfter, TelegramError					# 🤖 Помилки Telegram

# 🔠 Системні імпорти
import logging
from typing import Any, Dict, Optional, Tuple

# 🧩 Внутрішні модулі проєкту
from teleshop.shared.utils.logger import LOG_NAME
from .custom_errors import (
    CallbackPayloadError,
    NetworkRequestError,
    StaleReferenceError,
    StorageError,
)
from .reason_codes import ReasonCode


# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger(f"{LOG_NAME}.errors.reason_mapper")


# ================================
# 🧭 ОСНОВНИЙ МАПЕР
# ================================
def map_error_to_reason(exc: BaseException) -> Tuple[ReasonCode, Dict[str, Any]]:
    """
    Повертає (reason_code, ctx) — ctx підставляється у текст (наприклад, {status_code}).
    """
    logger.debug("🔎 map_error_to_reason start", extra={"exc_type": type(exc).__name__})

    if isinstance(exc, StaleReferenceError):
        return ReasonCode.STALE_REFERENCE, {"kind": exc.kind, "reference": exc.reference}
    if isinstance(exc, CallbackPayloadError):
        return ReasonCode.PAYLOAD_INVALID, {}
    if isinstance(exc, StorageError):
        return ReasonCode.STORAGE_UNAVAILABLE, {}
    if isinstance(exc, NetworkRequestError):
        return _map_network(exc)

    httpx_result = _map_httpx_errors(exc)
    if httpx_result:
        return httpx_result

    if isinstance(exc, RetryAfter):
        retry_after = getattr(exc, "retry_after", 1)
        seconds = int(retry_after.total_seconds()) if hasattr(retry_after, "total_seconds") else int(retry_after)
        logger.debug("⏳ Telegram retry_after=%s", seconds)
        return ReasonCode.TELEGRAM_RETRY_AFTER, {"seconds": seconds}
    if isinstance(exc, TelegramError):
        return ReasonCode.TELEGRAM_GENERAL, {}

    logger.warning("❓ Unknown error mapped to INTERNAL", extra={"exc_type": type(exc).__name__})
    return ReasonCode.INTERNAL, {}


# ================================
# 🧩 ДОПОМІЖНІ ФУНКЦІЇ
# ================================
def _map_network(exc: NetworkRequestError) -> Tuple[ReasonCode, Dict[str, Any]]:
    if exc.retry_after_s:
        return ReasonCode.TELEGRAM_RETRY_AFTER, {"seconds": int(exc.retry_after_s)}
    if exc.status_code:
        return ReasonCode.HTTP_STATUS, {"status_code": exc.status_code}
    return ReasonCode.HTTP_CONNECTION, {}


def _map_httpx_errors(exc: BaseException) -> Optional[Tuple[ReasonCode, Dict[str, Any]]]:
    """Повертає ReasonCode для httpx-винятків або None."""
    if isinstance(exc, (httpx.ReadTimeout, httpx.ConnectTimeout)):
        return ReasonCode.HTTP_TIMEOUT, {}
    if isinstance(exc, httpx.ConnectError):
        return ReasonCode.HTTP_CONNECTION, {}
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = getattr(getattr(exc, "response", None), "status_code", None)
        logger.debug("🌐 HTTP status error", extra={"status_code": status_code})
        return ReasonCode.HTTP_STATUS, {"status_code": status_code}
    return None


__all__ = ["map_error_to_reason"]
