# 📊 teleshop/shared/metrics/__init__.py
"""
📊 Пакет метрик Prometheus.

🔹 Лічильники розмовного рушія та магазину.
🔹 Легкий bootstrap експортера `/metrics`.
"""

from __future__ import annotations

# 💬 Розмови та колбеки
from .session import (
    CALLBACKS_ROUTED,
    CALLBACKS_UNMATCHED,
    CONVERSATIONS_EXPIRED,
    INQUIRIES_CREATED,
    MESSAGE_DELETE_FAILURES,
    ORDERS_CREATED,
    ORDERS_DUPLICATE,
)

# 🚀 Експортер Prometheus
from .exporters import maybe_start_prometheus

__all__ = [
    "CALLBACKS_ROUTED",
    "CALLBACKS_UNMATCHED",
    "CONVERSATIONS_EXPIRED",
    "INQUIRIES_CREATED",
    "MESSAGE_DELETE_FAILURES",
    "ORDERS_CREATED",
    "ORDERS_DUPLICATE",
    "maybe_start_prometheus",
]
