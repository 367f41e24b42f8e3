# 🤖 teleshop/bot/handlers/__init__.py
"""
🤖 Пакет `handlers` — наскрізні обробники апдейтів.

📌 Призначення:
– Маршрутизація inline-кнопок через впорядкований реєстр.
– Маршрутизація вільного тексту (захоплення → меню → кастомні команди → звернення).
"""

from .callback_handler import CallbackHandler
from .text_router import TextRouter

__all__ = ["CallbackHandler", "TextRouter"]
