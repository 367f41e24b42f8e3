# 🏷️ teleshop/bot/services/callback_data_factory.py
"""
🏷️ Специфікація callback-токена: дія + позиційні параметри.

🔹 Формат: `action` або `action_arg1_arg2` (ASCII, роздільник `_`).
🔹 `build` відхиляє порожні аргументи, аргументи з `_` і payload довший за 64 байти.
🔹 `match` приймає лише точну арність — тому `rate_product_p1_5` не «ловиться» дією `rate`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional, Tuple

# 🧩 Внутрішні модулі проєкту
from teleshop.errors.custom_errors import CallbackPayloadError


@dataclass(frozen=True, slots=True)
class CallbackData:
    """🏷️ Незмінна специфікація токена; хешується і служить ключем маршруту."""

    action: str
    params: Tuple[str, ...] = ()

    SEPARATOR: ClassVar[str] = "_"
    MAX_BYTES: ClassVar[int] = 64

    @property
    def key(self) -> str:
        return self.action

    @property
    def is_exact(self) -> bool:
        """Токен без параметрів зіставляється повним збігом."""
        return not self.params

    @property
    def prefix(self) -> str:
        return self.action + self.SEPARATOR

    # ================================
    # 🏗️ ПОБУДОВА
    # ================================
    def build(self, *args: Any) -> str:
        """
        Формує payload для кнопки.

        Raises:
            CallbackPayloadError: неправильна кількість аргументів, порожній аргумент,
                аргумент із роздільником, не-ASCII або задовгий payload.
        """
        if len(args) != len(self.params):
            raise CallbackPayloadError(
                f"'{self.action}' expects {len(self.params)} argument(s), got {len(args)}",
                payload=self.action,
            )
        parts = [self.action]
        for name, raw in zip(self.params, args):
            value = str(raw)
            if not value or self.SEPARATOR in value:
                raise CallbackPayloadError(
                    f"argument '{name}' of '{self.action}' must be non-empty and free of '{self.SEPARATOR}'",
                    payload=value,
                )
            parts.append(value)
        payload = self.SEPARATOR.join(parts)
        if not payload.isascii():
            raise CallbackPayloadError("callback payload must be ASCII", payload=payload)
        if len(payload.encode("ascii")) > self.MAX_BYTES:
            raise CallbackPayloadError(
                f"callback payload exceeds {self.MAX_BYTES} bytes",
                payload=payload,
            )
        return payload

    # ================================
    # 🔍 РОЗБІР
    # ================================
    def match(self, payload: str) -> Optional[Dict[str, str]]:
        """Параметри за іменами, якщо payload належить цьому токену; інакше None."""
        if self.is_exact:
            return {} if payload == self.action else None
        if not payload.startswith(self.prefix):
            return None
        segments = payload[len(self.prefix):].split(self.SEPARATOR)
        if len(segments) != len(self.params) or not all(segments):
            return None
        return dict(zip(self.params, segments))

    def __str__(self) -> str:
        if self.is_exact:
            return self.action
        return self.SEPARATOR.join([self.action, *(f"<{name}>" for name in self.params)])


__all__ = ["CallbackData"]
