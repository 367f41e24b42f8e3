# 💬 teleshop/bot/ui/static_messages.py
"""
💬 Статичні англомовні тексти — останній рубіж, коли локалізація недоступна.

🔹 Використовуються обробником помилок і презентером помилок.
🔹 Звичайні екрани рендеряться через `ILocalizer`, не звідси.
"""

from __future__ import annotations

from typing import Final

# ================================
# 🧭 НАВІГАЦІЯ
# ================================
MAIN_MENU_BUTTON: Final[str] = "🏠 Main Menu"
HISTORY_CLEARED: Final[str] = "🧹 Chat history was cleared due to inactivity. Send /start to continue."

# ================================
# 🚨 ПОМИЛКИ
# ================================
ERROR_CRITICAL: Final[str] = "❌ Something went wrong. Please try again."
ERROR_UNKNOWN: Final[str] = "❌ Unexpected error."
ERROR_ITEM_UNAVAILABLE: Final[str] = "⚠️ This item is no longer available."
ERROR_STORAGE: Final[str] = "⚠️ The shop is temporarily unavailable."
ERROR_HTTP_TIMEOUT: Final[str] = "⏱️ The request timed out."
ERROR_HTTP_CONNECTION: Final[str] = "🌐 Could not reach the service."
ERROR_HTTP_STATUS: Final[str] = "🌐 The service answered with status {status_code}."
ERROR_TELEGRAM_RETRY_AFTER: Final[str] = "⏳ Too many requests. Please wait {seconds} s."
ERROR_TELEGRAM_GENERAL: Final[str] = "🤖 Telegram is not responding right now."
ERROR_PAYLOAD_INVALID: Final[str] = "⚠️ This button is outdated."

# ================================
# 💡 ПІДКАЗКИ
# ================================
TIP_RETRY: Final[str] = "Please try again."
TIP_RETRY_LATER: Final[str] = "Please try again a bit later."
TIP_WAIT: Final[str] = "Wait a few seconds and try again."
TIP_MAIN_MENU: Final[str] = "Use the main menu to continue."
TIP_SUPPORT: Final[str] = "If it keeps happening, contact support."
