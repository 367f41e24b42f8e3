"""
🧪 test_telegram_transport.py — unit-тести для TelegramTransport

Перевіряє:
- Виклики PTB Bot з parse_mode і клавіатурою
- Повернення message_id
- Відмову від непідтримуваних клавіатур
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from teleshop.infrastructure.telegram import TelegramTransport


@pytest.fixture
def bot():
    mock = MagicMock()
    mock.send_message = AsyncMock(return_value=SimpleNamespace(message_id=11))
    mock.send_photo = AsyncMock(return_value=SimpleNamespace(message_id=12))
    mock.delete_message = AsyncMock()
    mock.answer_callback_query = AsyncMock()
    return mock


@pytest.mark.asyncio
async def test_send_text_uses_html_and_keyboard(bot):
    """📤 send_text → send_message з HTML і розміткою."""
    markup = InlineKeyboardMarkup([[InlineKeyboardButton("Menu", callback_data="back_to_menu")]])
    transport = TelegramTransport(bot)

    assert await transport.send_text(5, "<b>hi</b>", markup) == 11
    kwargs = bot.send_message.await_args.kwargs
    assert (kwargs["chat_id"], kwargs["text"], kwargs["parse_mode"]) == (5, "<b>hi</b>", "HTML")
    assert kwargs["reply_markup"] is markup
    assert kwargs["link_preview_options"].is_disabled is True


@pytest.mark.asyncio
async def test_photo_delete_and_answer(bot):
    """🖼️ Фото без підпису → caption=None; delete/answer проксуються."""
    transport = TelegramTransport(bot)

    assert await transport.send_photo(5, "https://img.example/p1.jpg") == 12
    assert bot.send_photo.await_args.kwargs["caption"] is None

    await transport.delete_message(5, 11)
    bot.delete_message.assert_awaited_once_with(chat_id=5, message_id=11)

    await transport.answer_callback("q1")
    bot.answer_callback_query.assert_awaited_once_with(callback_query_id="q1", text=None)


@pytest.mark.asyncio
async def test_unsupported_keyboard_rejected(bot):
    """🚫 Не-inline клавіатура → TypeError ще до виклику API."""
    transport = TelegramTransport(bot)
    with pytest.raises(TypeError):
        await transport.send_text(5, "hi", keyboard=[["raw"]])
    bot.send_message.assert_not_awaited()
