# 🧱 teleshop/shared/errors.py
"""
🧱 Базова ієрархія доменних винятків.

🔹 `AppError` — будь-яка очікувана помилка застосунку (з деталями для логів).
🔹 `UserVisibleError` — помилка, текст якої можна показати користувачу як є.
🔹 `StaleReferenceError` — токен кнопки посилається на видалений товар/метод.
🔹 `StorageError` — збій колаборатора зберігання.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class AppError(Exception):
    """🧠 Базовий виняток застосунку."""

    def __init__(self, message: str, *, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message                                          # 💬 Текст (для користувача або логів)
        self.details = details                                          # 🔍 Технічні деталі для логів

    def to_log_extra(self) -> Dict[str, Any]:
        """📦 Payload для `logger.extra`."""
        extra: Dict[str, Any] = {"error_type": type(self).__name__}
        if self.details:
            extra["details"] = self.details
        return extra

    def __str__(self) -> str:
        return self.message if not self.details else f"{self.message} ({self.details})"


class UserVisibleError(AppError):
    """👀 Помилка з безпечним для користувача текстом."""


class StaleReferenceError(AppError):
    """🕸️ Посилання з callback-токена вже не резолвиться (товар/метод видалено)."""

    def __init__(self, kind: str, reference: str, *, details: Optional[str] = None) -> None:
        super().__init__(f"{kind} '{reference}' no longer exists", details=details)
        self.kind = kind                                                # 🏷️ product / delivery / payment ...
        self.reference = reference                                      # 🔑 Ідентифікатор з токена

    def to_log_extra(self) -> Dict[str, Any]:
        extra = super().to_log_extra()
        extra.update({"kind": self.kind, "reference": self.reference})
        return extra


class StorageError(AppError):
    """🗄️ Сховище недоступне або повернуло некоректні дані."""


__all__ = ["AppError", "UserVisibleError", "StaleReferenceError", "StorageError"]
