# 🧰 teleshop/shared/utils/__init__.py
"""
🧰 Спільні утиліти (логування).
"""

from __future__ import annotations

from .logger import (
    LOG_NAME,
    chat_logger,
    get_logger,
    init_logging,
    init_logging_from_config,
)

__all__ = [
    "LOG_NAME",
    "chat_logger",
    "get_logger",
    "init_logging",
    "init_logging_from_config",
]
