# 🛍️ teleshop/__init__.py
"""
🛍️ TeleShop — вітрина магазину у форматі Telegram-бота.

🔹 `bot` — фічі, роутер колбеків, життєвий цикл розмов.
🔹 `domain` — сутності магазину, ціноутворення, чекаут.
🔹 `infrastructure` — сховище, локалізація, валюти, транспорт Telegram.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
