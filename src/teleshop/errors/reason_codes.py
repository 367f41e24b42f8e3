# 🧮 teleshop/errors/reason_codes.py
"""
🧮 Перелік причин збою, з яких будується текст для користувача.
"""

from __future__ import annotations

from enum import Enum


class ReasonCode(str, Enum):
    """🧮 Причина помилки (значення — стабільний код для логів і метрик)."""

    STALE_REFERENCE = "stale_reference"                 # 🕸️ Товар/метод з кнопки вже видалено
    PAYLOAD_INVALID = "payload_invalid"                 # 🎛️ Пошкоджений callback
    STORAGE_UNAVAILABLE = "storage_unavailable"         # 🗄️ Сховище не відповіло
    HTTP_TIMEOUT = "http_timeout"
    HTTP_CONNECTION = "http_connection"
    HTTP_STATUS = "http_status"
    TELEGRAM_RETRY_AFTER = "telegram_retry_after"
    TELEGRAM_GENERAL = "telegram_general"
    INTERNAL = "internal"                               # ❓ Все інше


__all__ = ["ReasonCode"]
