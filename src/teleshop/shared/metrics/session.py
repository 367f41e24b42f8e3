# 📈 teleshop/shared/metrics/session.py
"""
📈 Prometheus-метрики розмовного рушія.

🔹 Колбеки: скільки натискань розпізнано (за маршрутом) і скільки ні.
🔹 Розмови: скільки історій очищено таймером, скільки видалень не вдалося.
🔹 Магазин: створені замовлення, повторні натискання «оплачено», звернення.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from prometheus_client import Counter                                  # 📊 Prometheus-лічильники

# ================================
# 🎛️ КОЛБЕКИ
# ================================
CALLBACKS_ROUTED = Counter(
    "teleshop_callbacks_routed_total",
    "Callback payloads resolved to a route",
    ["route"],
)

CALLBACKS_UNMATCHED = Counter(
    "teleshop_callbacks_unmatched_total",
    "Callback payloads without a matching route (main menu fallback)",
)

# ================================
# 💬 РОЗМОВИ
# ================================
CONVERSATIONS_EXPIRED = Counter(
    "teleshop_conversations_expired_total",
    "Conversations whose history was cleared by the retention timer",
)

MESSAGE_DELETE_FAILURES = Counter(
    "teleshop_message_delete_failures_total",
    "Best-effort message deletions that failed",
)

# ================================
# 🛒 МАГАЗИН
# ================================
ORDERS_CREATED = Counter(
    "teleshop_orders_created_total",
    "Orders created from the checkout flow",
)

ORDERS_DUPLICATE = Counter(
    "teleshop_orders_duplicate_total",
    "Repeated payment confirmations for an existing order number",
)

INQUIRIES_CREATED = Counter(
    "teleshop_inquiries_created_total",
    "Support inquiries created from free text",
    ["source"],
)


__all__ = [
    "CALLBACKS_ROUTED",
    "CALLBACKS_UNMATCHED",
    "CONVERSATIONS_EXPIRED",
    "MESSAGE_DELETE_FAILURES",
    "ORDERS_CREATED",
    "ORDERS_DUPLICATE",
    "INQUIRIES_CREATED",
]
