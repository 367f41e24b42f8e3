"""
🧪 test_metrics.py — тести метрик Prometheus

Перевіряє:
- Експортер стартує лише один раз на процес
- Лічильники колбеків рахують маршрути та невідомі payload
"""

from unittest.mock import MagicMock

import pytest
from prometheus_client import REGISTRY

from teleshop.shared.metrics import exporters


def _sample(name, labels=None):
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


def test_exporter_starts_once(monkeypatch):
    """📈 Другий виклик нічого не стартує."""
    server = MagicMock()
    monkeypatch.setattr(exporters, "start_http_server", server)
    monkeypatch.setattr(exporters, "_started_port", None)

    assert exporters.maybe_start_prometheus(9108) is True
    assert exporters.maybe_start_prometheus(9200) is False
    server.assert_called_once_with(9108, addr="0.0.0.0")


@pytest.mark.asyncio
async def test_callback_counters(press):
    """🎛️ Розпізнаний маршрут і невідомий payload рахуються окремо."""
    routed = _sample("teleshop_callbacks_routed_total", {"route": "listings"})
    unmatched = _sample("teleshop_callbacks_unmatched_total")

    await press("listings")
    await press("definitely_not_a_route")

    assert _sample("teleshop_callbacks_routed_total", {"route": "listings"}) == routed + 1
    assert _sample("teleshop_callbacks_unmatched_total") == unmatched + 1
