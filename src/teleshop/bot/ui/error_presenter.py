# 🚨 teleshop/bot/ui/error_presenter.py
"""
🚨 Формує користувацькі повідомлення про помилки.

🔹 `locale_key_for` — ключ локалізованого тексту для `ReasonCode` (основний шлях).
🔹 `build_error_message` — статичний англомовний текст + порада (коли локалізація теж лежить).
"""

from __future__ import annotations

# 🔠 Системні імпорти
from typing import Any, Dict, Final

# 🧩 Внутрішні модулі проєкту
from teleshop.bot.ui import static_messages as msg
from teleshop.errors.reason_codes import ReasonCode


# ================================
# 🌍 КЛЮЧІ ЛОКАЛІЗАЦІЇ
# ================================
_LOCALE_KEYS: Final[Dict[ReasonCode, str]] = {
    ReasonCode.STALE_REFERENCE: "error_item_unavailable",
    ReasonCode.PAYLOAD_INVALID: "error_item_unavailable",
}
GENERIC_ERROR_KEY: Final[str] = "error_occurred"
MAIN_MENU_KEY: Final[str] = "back_to_main_menu"


def locale_key_for(code: ReasonCode) -> str:
    return _LOCALE_KEYS.get(code, GENERIC_ERROR_KEY)


# ================================
# 📝 МАПА ПІДКАЗОК ДЛЯ КОРИСТУВАЧА
# ================================
_NEXT_TIPS: Final[Dict[ReasonCode, str]] = {                             # 💡 Пропозиції наступних кроків
    ReasonCode.STALE_REFERENCE: msg.TIP_MAIN_MENU,
    ReasonCode.PAYLOAD_INVALID: msg.TIP_MAIN_MENU,
    ReasonCode.STORAGE_UNAVAILABLE: msg.TIP_RETRY_LATER,
    ReasonCode.HTTP_TIMEOUT: msg.TIP_RETRY,
    ReasonCode.HTTP_CONNECTION: msg.TIP_RETRY_LATER,
    ReasonCode.HTTP_STATUS: msg.TIP_RETRY_LATER,
    ReasonCode.TELEGRAM_RETRY_AFTER: msg.TIP_WAIT,
    ReasonCode.TELEGRAM_GENERAL: msg.TIP_RETRY_LATER,
    ReasonCode.INTERNAL: f"{msg.TIP_RETRY} {msg.TIP_SUPPORT}",
}


# ================================
# 🧾 ГОЛОВНИЙ ФОРМАТЕР ПОВІДОМЛЕНЬ
# ================================
def build_error_message(code: ReasonCode, *, ctx: Dict[str, Any] | None = None) -> str:
    """
    Повертає статичне повідомлення про помилку з опціональною порадою.
    """
    context = ctx or {}
    mapping: Dict[ReasonCode, str] = {                                   # 🗺️ ReasonCode → статичне повідомлення
        ReasonCode.STALE_REFERENCE: msg.ERROR_ITEM_UNAVAILABLE,
        ReasonCode.PAYLOAD_INVALID: msg.ERROR_PAYLOAD_INVALID,
        ReasonCode.STORAGE_UNAVAILABLE: msg.ERROR_STORAGE,
        ReasonCode.HTTP_TIMEOUT: msg.ERROR_HTTP_TIMEOUT,
        ReasonCode.HTTP_CONNECTION: msg.ERROR_HTTP_CONNECTION,
        ReasonCode.HTTP_STATUS: msg.ERROR_HTTP_STATUS.format(status_code=context.get("status_code", "N/A")),
        ReasonCode.TELEGRAM_RETRY_AFTER: msg.ERROR_TELEGRAM_RETRY_AFTER.format(seconds=context.get("seconds", 1)),
        ReasonCode.TELEGRAM_GENERAL: msg.ERROR_TELEGRAM_GENERAL,
        ReasonCode.INTERNAL: msg.ERROR_CRITICAL,
    }

    body = mapping.get(code, msg.ERROR_UNKNOWN)
    tip = _NEXT_TIPS.get(code)
    if tip:
        return f"{body}\n\n{tip}"
    return body


__all__ = ["GENERIC_ERROR_KEY", "MAIN_MENU_KEY", "build_error_message", "locale_key_for"]
