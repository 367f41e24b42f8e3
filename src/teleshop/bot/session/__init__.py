# 💬 teleshop/bot/session/__init__.py
"""
💬 Стан розмови, що належить рушію: видимі повідомлення і one-shot захоплення.
"""

from .capture_registry import CaptureKind, CaptureRegistry, PendingCapture
from .conversation_manager import Conversation, ConversationManager, Render, RenderedMessage

__all__ = [
    "CaptureKind",
    "CaptureRegistry",
    "Conversation",
    "ConversationManager",
    "PendingCapture",
    "Render",
    "RenderedMessage",
]
