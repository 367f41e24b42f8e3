# 📡 teleshop/infrastructure/telegram/__init__.py
from .transport import TelegramTransport

__all__ = ["TelegramTransport"]
