# 🧰 teleshop/bot/services/__init__.py
"""
🧰 Сервіси шару бота: callback-токени, реєстр маршрутів, кастомний контекст.
"""

from .callback_data_factory import CallbackData
from .callback_registry import CallbackRegistry, Route
from .custom_context import CustomContext

__all__ = ["CallbackData", "CallbackRegistry", "CustomContext", "Route"]
