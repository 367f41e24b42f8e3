# 🚨 teleshop/errors/__init__.py
"""
🚨 Пакет обробки помилок: винятки, стратегії, мапер причин, центральний сервіс.
"""

from .custom_errors import (
    AppError,
    CallbackPayloadError,
    ErrorCode,
    NetworkRequestError,
    StaleReferenceError,
    StorageError,
    UserVisibleError,
)
from .reason_codes import ReasonCode
from .reason_mapper import map_error_to_reason
from .strategies import (
    HttpxErrorStrategy,
    IErrorHandlingStrategy,
    StorageErrorStrategy,
    TelegramErrorStrategy,
    default_strategies,
)

__all__ = [
    "AppError",
    "CallbackPayloadError",
    "ErrorCode",
    "HttpxErrorStrategy",
    "IErrorHandlingStrategy",
    "NetworkRequestError",
    "ReasonCode",
    "StaleReferenceError",
    "StorageError",
    "StorageErrorStrategy",
    "TelegramErrorStrategy",
    "UserVisibleError",
    "default_strategies",
    "map_error_to_reason",
]
