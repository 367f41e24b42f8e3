"""
🧪 test_conversation_manager.py — unit-тести для ConversationManager

Перевіряє:
- Не більше одного видимого повідомлення бота на чат
- Каскад очищення: 6 год → видалення + сповіщення, ще 1 год → видалення сповіщення, далі тиша
- Скидання таймера при новій активності
- Best-effort видалення та проброс помилок надсилання
- Звільнення розмови й лока після каскаду
- Взаємовиключення конкурентних екранів одного чату
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from teleshop.bot.session import ConversationManager, RenderedMessage
from teleshop.bot.ui import static_messages as msg

CHAT = 100
HOUR = 60 * 60


def screen(text, **kwargs):
    async def render():
        return RenderedMessage(text=text, **kwargs)

    return render


@pytest.fixture
def manager(transport, timer):
    return ConversationManager(
        transport,
        retention_sec=6 * HOUR,
        notice_ttl_sec=HOUR,
        sleep=timer.sleep,
        clock=timer.clock,
    )


@pytest.mark.asyncio
async def test_replace_keeps_single_visible_message(manager, transport):
    """🔁 Кожен новий екран видаляє попередній."""
    first = await manager.replace(CHAT, screen("one"))
    second = await manager.replace(CHAT, screen("two"))
    third = await manager.replace(CHAT, screen("three"))

    assert manager.tracked(CHAT) == (third,)
    assert transport.deleted == [(CHAT, first), (CHAT, second)]
    await manager.shutdown()


@pytest.mark.asyncio
async def test_expiry_cascade(manager, transport, timer):
    """🧹 T0 надіслано; T0+6h видалено + сповіщення; T0+7h сповіщення видалено; далі нічого."""
    first = await manager.replace(CHAT, screen("menu"))

    await timer.advance(6 * HOUR - 1)
    assert transport.deleted == []

    await timer.advance(1)
    assert transport.deleted == [(CHAT, first)]
    notice_chat, notice_id, notice_text, _ = transport.sent[-1]
    assert notice_chat == CHAT
    assert notice_text == msg.HISTORY_CLEARED
    assert manager.tracked(CHAT) == (notice_id,)

    await timer.advance(HOUR)
    assert transport.deleted == [(CHAT, first), (CHAT, notice_id)]
    assert manager.tracked(CHAT) == ()

    sent_before = len(transport.sent)
    await timer.advance(48 * HOUR)
    assert len(transport.sent) == sent_before
    assert len(transport.deleted) == 2
    assert timer.pending == 0


@pytest.mark.asyncio
async def test_activity_rearms_timer(manager, transport, timer):
    """⏲️ Новий екран через 5 год відкладає очищення ще на 6 год."""
    first = await manager.replace(CHAT, screen("one"))
    await timer.advance(5 * HOUR)
    second = await manager.replace(CHAT, screen("two"))

    await timer.advance(2 * HOUR)
    assert transport.deleted == [(CHAT, first)]
    assert manager.tracked(CHAT) == (second,)

    await timer.advance(4 * HOUR)
    assert (CHAT, second) in transport.deleted
    await manager.shutdown()


@pytest.mark.asyncio
async def test_notice_text_is_localized(transport, timer):
    """🌍 Текст сповіщення береться з локалізації користувача."""
    localizer = AsyncMock()
    localizer.translate.return_value = "cleared!"
    manager = ConversationManager(
        transport, localizer, retention_sec=10, notice_ttl_sec=5, sleep=timer.sleep, clock=timer.clock
    )

    await manager.replace(CHAT, screen("hello"))
    await timer.advance(10)

    assert transport.last_text == "cleared!"
    localizer.translate.assert_awaited_with(str(CHAT), "history_cleared")
    await manager.shutdown()


@pytest.mark.asyncio
async def test_tracked_auxiliary_message_is_removed_on_next_replace(manager, transport):
    """📎 Допоміжне повідомлення (track) зникає разом з основним."""
    first = await manager.replace(CHAT, screen("photo caption", photo="https://example.com/p.jpg"))
    await manager.track(CHAT, 99)
    assert manager.tracked(CHAT) == (first, 99)
    assert transport.photos[0][2] == "https://example.com/p.jpg"

    await manager.replace(CHAT, screen("next"))
    assert transport.deleted == [(CHAT, first), (CHAT, 99)]
    await manager.shutdown()


@pytest.mark.asyncio
async def test_delete_failure_is_swallowed(manager, transport):
    """🗑️ Невдале видалення не заважає показати новий екран."""
    transport.delete_message = AsyncMock(side_effect=RuntimeError("message to delete not found"))
    await manager.replace(CHAT, screen("one"))
    second = await manager.replace(CHAT, screen("two"))

    assert manager.tracked(CHAT) == (second,)
    await manager.shutdown()


@pytest.mark.asyncio
async def test_send_failure_propagates(manager, transport):
    """📤 Помилка надсилання летить вище, старе повідомлення вже прибране."""
    first = await manager.replace(CHAT, screen("one"))
    transport.send_text = AsyncMock(side_effect=RuntimeError("bot was blocked"))

    with pytest.raises(RuntimeError):
        await manager.replace(CHAT, screen("two"))

    assert transport.deleted == [(CHAT, first)]
    assert manager.tracked(CHAT) == ()
    await manager.shutdown()


@pytest.mark.asyncio
async def test_chats_are_independent(manager, transport):
    """👥 Екран в одному чаті не чіпає інший."""
    a = await manager.replace(1, screen("a"))
    b = await manager.replace(2, screen("b"))
    await manager.replace(1, screen("a2"))

    assert manager.tracked(2) == (b,)
    assert transport.deleted == [(1, a)]
    await manager.shutdown()


@pytest.mark.asyncio
async def test_forget_cancels_timers(manager, transport, timer):
    """🛑 Після forget таймер не спрацьовує."""
    await manager.replace(CHAT, screen("one"))
    manager.forget(CHAT)

    await timer.advance(10 * HOUR)
    assert transport.deleted == []
    assert manager.get(CHAT) is None


def yielding(transport):
    """Кожен виклик транспорту віддає керування циклу подій перед роботою."""
    for name in ("send_text", "send_photo", "delete_message"):
        original = getattr(transport, name)

        async def wrapper(*args, _original=original, **kwargs):
            await asyncio.sleep(0)
            return await _original(*args, **kwargs)

        setattr(transport, name, wrapper)
    return transport


def visible(transport, chat_id=CHAT):
    sent = {mid for chat, mid, _, _ in transport.sent if chat == chat_id}
    sent |= {mid for chat, mid, _, _ in transport.photos if chat == chat_id}
    return sent - {mid for chat, mid in transport.deleted if chat == chat_id}


@pytest.mark.asyncio
async def test_conversation_released_after_cascade(manager, transport, timer):
    """💤 Після 6h → 1h не лишається ні розмов, ні локів."""
    for chat in range(1, 51):
        await manager.replace(chat, screen(f"menu {chat}"))
    assert manager.active_chats == 50

    await timer.advance(8 * HOUR)

    assert manager.active_chats == 0
    assert manager.held_locks == 0
    assert manager.get(1) is None
    assert timer.pending == 0


@pytest.mark.asyncio
async def test_conversation_released_when_notice_fails(manager, transport, timer):
    """📵 Сповіщення не доставлено → розмову все одно звільнено."""
    first = await manager.replace(CHAT, screen("menu"))
    transport.fail_send_to.add(CHAT)

    await timer.advance(6 * HOUR)

    assert transport.deleted == [(CHAT, first)]
    assert manager.get(CHAT) is None
    assert manager.held_locks == 0


@pytest.mark.asyncio
async def test_released_chat_opens_again(manager, transport, timer):
    """🔁 Звільнений чат знову працює як новий."""
    await manager.replace(CHAT, screen("one"))
    await timer.advance(8 * HOUR)

    again = await manager.replace(CHAT, screen("two"))

    assert manager.tracked(CHAT) == (again,)
    await manager.shutdown()


@pytest.mark.asyncio
async def test_concurrent_replace_leaves_one_message(manager, transport):
    """🔒 П'ять одночасних екранів: видно рівно один, решта видалені."""
    yielding(transport)

    await asyncio.gather(*(manager.replace(CHAT, screen(f"screen {n}")) for n in range(5)))

    tracked = manager.tracked(CHAT)
    assert len(tracked) == 1
    assert visible(transport) == set(tracked)
    assert len(transport.deleted) == 4
    assert manager.held_locks == 0
    await manager.shutdown()


@pytest.mark.asyncio
async def test_extra_messages_share_one_lock(manager, transport):
    """📎 Фото + деталі надсилаються разом; паралельний екран не вклинюється між ними."""
    yielding(transport)
    photo = screen("Beans", photo="https://example.com/p.jpg")
    details = screen("details")

    await asyncio.gather(
        manager.replace(CHAT, photo, extra=[details]),
        manager.replace(CHAT, photo, extra=[details]),
    )

    tracked = manager.tracked(CHAT)
    assert len(tracked) == 2
    assert visible(transport) == set(tracked)
    assert sorted(tracked)[1] - sorted(tracked)[0] == 1
    await manager.shutdown()
