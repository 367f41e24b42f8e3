# 🚀 teleshop/shared/metrics/exporters.py
"""
🚀 Bootstrap HTTP-експортера Prometheus (`/metrics`).

🔹 Стартує лише один раз на процес, повторні виклики ігноруються.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from prometheus_client import start_http_server                        # 🌐 Вбудований HTTP-сервер метрик

# 🔠 Системні імпорти
import logging
import threading

# 🧩 Внутрішні модулі проєкту
from teleshop.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.metrics")

_started_port: int | None = None                                       # 🔢 Порт уже запущеного експортера
_lock = threading.Lock()


def maybe_start_prometheus(port: int, addr: str = "0.0.0.0") -> bool:
    """
    Піднімає експортер, якщо він ще не запущений.

    Returns:
        True, якщо сервер стартував саме цим викликом.
    """
    global _started_port
    with _lock:
        if _started_port is not None:
            logger.debug("📈 Prometheus вже слухає порт %s", _started_port)
            return False
        start_http_server(port, addr=addr)
        _started_port = port
        logger.info("📈 Prometheus exporter on %s:%s", addr, port)
        return True


__all__ = ["maybe_start_prometheus"]
