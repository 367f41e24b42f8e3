"""
🧪 test_text_router.py — тести маршрутизації вільного тексту

Перевіряє:
- Ключові слова меню без урахування регістру
- Кастомні команди адміністратора
- Звернення до оператора як запасний варіант
- Пріоритет і одноразовість захоплень
- Ізоляцію помилок по чатах
"""

from unittest.mock import AsyncMock

import pytest

from teleshop.bot.handlers.text_router import normalize

CHAT = 100


def test_normalize_collapses_whitespace_and_case():
    """🔡 '  Main   MENU ' → 'main menu'."""
    assert normalize("  Main   MENU ") == "main menu"
    assert normalize("") == ""


@pytest.mark.asyncio
async def test_menu_keyword_shows_main_menu(say, transport, container):
    """🏠 «Main Menu» у будь-якому регістрі відкриває меню, звернення не створюється."""
    await say("  Main   Menu ")

    assert "Welcome to Test Shop" in transport.last_text
    assert await container.storage.list_inquiries() == []


@pytest.mark.asyncio
async def test_custom_command_answers_configured_response(say, transport):
    """🧩 custom_command_1 «Hours» → custom_response_1."""
    await say("hours")

    assert transport.last_text == "We are open 9-18"
    assert transport.last_callbacks() == ["back_to_menu"]


@pytest.mark.asyncio
async def test_unmatched_text_becomes_inquiry(say, transport, container):
    """📨 Будь-який інший текст → звернення + підтвердження з меню."""
    await say("Do you ship to Lisbon?")

    inquiries = await container.storage.list_inquiries()
    assert [(i.message, i.source, i.user_id) for i in inquiries] == [("Do you ship to Lisbon?", "text", str(CHAT))]
    assert "We received your message" in transport.last_text
    assert "listings" in transport.last_callbacks()


@pytest.mark.asyncio
async def test_capture_consumes_next_text_only_once(press, say, transport, container):
    """🪝 live_chat: наступний текст іде оператору навіть якщо це «menu»; потім — знову меню."""
    await press("live_chat")
    await say("menu")

    inquiries = await container.storage.list_inquiries()
    assert [(i.message, i.source) for i in inquiries] == [("menu", "live_chat")]
    assert "sent to the operator" in transport.last_text

    await say("menu")
    assert "Welcome to Test Shop" in transport.last_text
    assert len(await container.storage.list_inquiries()) == 1


@pytest.mark.asyncio
async def test_email_capture_is_tagged(press, say, container):
    """📧 send_email → звернення з джерелом email."""
    await press("send_email")
    await say("Please send an invoice")

    inquiries = await container.storage.list_inquiries()
    assert inquiries[-1].source == "email"


@pytest.mark.asyncio
async def test_failure_in_one_chat_is_reported_only_there(say, transport, container, monkeypatch):
    """🧯 Збій сховища для чату 200 → повідомлення про помилку лише в 200; чат 100 працює."""
    original = container.storage.get_bot_settings
    failing = AsyncMock(side_effect=RuntimeError("disk on fire"))
    monkeypatch.setattr(container.storage, "get_bot_settings", failing)

    await say("what's up?", chat_id=200)

    assert transport.texts(200) == ["❌ An error occurred. Please try again."]
    assert transport.texts(CHAT) == []
    assert transport.last_callbacks() == ["back_to_menu"]

    monkeypatch.setattr(container.storage, "get_bot_settings", original)
    await say("menu")
    assert "Welcome to Test Shop" in transport.texts(CHAT)[-1]
