# 🪝 teleshop/bot/session/capture_registry.py
"""
🪝 One-shot захоплення вільного тексту.

🔹 `PendingCapture` — позначене продовження: що саме очікуємо (`CaptureKind`) і з якими параметрами.
🔹 Не більше одного на чат: повторна реєстрація мовчки замінює попередню.
🔹 `pop` споживає захоплення першим же текстовим повідомленням, незалежно від змісту.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional

# 🧩 Внутрішні модулі проєкту
from teleshop.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.session.capture")


class CaptureKind(str, Enum):
    CUSTOMER_INFO = "customer_info"        # 📇 Імʼя / телефон / адреса для чекауту
    SUPPORT_MESSAGE = "support_message"    # 💬 Повідомлення оператору
    EMAIL_MESSAGE = "email_message"        # 📧 Звернення «на пошту»


@dataclass(frozen=True, slots=True)
class PendingCapture:
    kind: CaptureKind
    chat_id: int
    payload: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "payload", MappingProxyType(dict(self.payload)))


class CaptureRegistry:
    """Таблиця очікуваних відповідей, ключ — chat_id."""

    def __init__(self) -> None:
        self._pending: Dict[int, PendingCapture] = {}

    def register(self, capture: PendingCapture) -> None:
        previous = self._pending.get(capture.chat_id)
        if previous is not None:
            logger.debug("🪝 chat=%s capture %s replaced by %s", capture.chat_id, previous.kind.value, capture.kind.value)
        self._pending[capture.chat_id] = capture

    def pop(self, chat_id: int) -> Optional[PendingCapture]:
        return self._pending.pop(chat_id, None)

    def peek(self, chat_id: int) -> Optional[PendingCapture]:
        return self._pending.get(chat_id)

    def discard(self, chat_id: int) -> None:
        self._pending.pop(chat_id, None)

    def __len__(self) -> int:
        return len(self._pending)


__all__ = ["CaptureKind", "CaptureRegistry", "PendingCapture"]
