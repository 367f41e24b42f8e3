"""
🧪 test_capture_registry.py — unit-тести для one-shot захоплень тексту
"""

import pytest

from teleshop.bot.session import CaptureKind, CaptureRegistry, PendingCapture


def test_capture_is_consumed_once():
    """🪝 Друге повідомлення вже не потрапляє в захоплення."""
    registry = CaptureRegistry()
    registry.register(PendingCapture(kind=CaptureKind.SUPPORT_MESSAGE, chat_id=1))

    first = registry.pop(1)
    assert first is not None and first.kind is CaptureKind.SUPPORT_MESSAGE
    assert registry.pop(1) is None
    assert len(registry) == 0


def test_register_replaces_previous_capture():
    """🔁 Нове очікування мовчки замінює попереднє в тому ж чаті."""
    registry = CaptureRegistry()
    registry.register(PendingCapture(kind=CaptureKind.SUPPORT_MESSAGE, chat_id=1))
    registry.register(
        PendingCapture(kind=CaptureKind.CUSTOMER_INFO, chat_id=1, payload={"method_id": "m1", "order_number": "1"})
    )

    pending = registry.peek(1)
    assert pending.kind is CaptureKind.CUSTOMER_INFO
    assert pending.payload["method_id"] == "m1"
    assert len(registry) == 1


def test_captures_are_per_chat():
    """👥 Захоплення одного чату не бачить інший."""
    registry = CaptureRegistry()
    registry.register(PendingCapture(kind=CaptureKind.EMAIL_MESSAGE, chat_id=1))

    assert registry.pop(2) is None
    registry.discard(1)
    assert registry.peek(1) is None


def test_payload_is_read_only():
    """🔒 Параметри продовження не змінюються після реєстрації."""
    capture = PendingCapture(kind=CaptureKind.CUSTOMER_INFO, chat_id=1, payload={"order_number": "1"})
    with pytest.raises(TypeError):
        capture.payload["order_number"] = "2"
