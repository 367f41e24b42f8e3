"""
🧪 test_admin_gateway.py — тести розсилки і статусу готовності

Перевіряє:
- Часткові збої розсилки не зупиняють інших
- Некоректні та повторні chat id
- Розсилка не чіпає активне повідомлення чату
- is_ready між startup і shutdown
"""

import pytest

from teleshop.bot.services.admin_gateway import AdminGateway


@pytest.mark.asyncio
async def test_broadcast_reports_partial_failures(transport):
    """📣 Чат 2 заблокував бота — 1 і 3 все одно отримують повідомлення."""
    transport.fail_send_to = {2}
    gateway = AdminGateway(transport, concurrency=2)
    gateway.mark_ready()

    report = await gateway.broadcast([1, 2, 3], "Sale!")

    assert sorted(report.sent) == [1, 3]
    assert list(report.failed) == ["2"]
    assert "blocked the bot" in report.failed["2"]
    assert report.total == 3
    assert sorted(chat for chat, _, text, _ in transport.sent if text == "Sale!") == [1, 3]


@pytest.mark.asyncio
async def test_broadcast_skips_invalid_and_duplicate_ids(transport):
    """🧹 Дублікати надсилаються один раз, нечислові id — у failed."""
    gateway = AdminGateway(transport)

    report = await gateway.broadcast(["5", 5, "abc"], "hello")

    assert report.sent == [5]
    assert report.failed == {"abc": "invalid chat id"}
    assert len(transport.sent) == 1


@pytest.mark.asyncio
async def test_broadcast_does_not_touch_active_message(container, press, transport):
    """🧷 Активне повідомлення чату лишається тим самим після розсилки."""
    await press("back_to_menu")
    tracked = container.conversations.tracked(100)

    await container.admin_gateway.broadcast([100], "News")

    assert container.conversations.tracked(100) == tracked
    assert transport.deleted == []
    assert transport.last_text == "News"


@pytest.mark.asyncio
async def test_is_ready_follows_lifecycle(container):
    """🟢 startup → готовий, shutdown → ні."""
    assert container.admin_gateway.is_ready() is False

    await container.startup()
    assert container.admin_gateway.is_ready() is True

    await container.shutdown()
    assert container.admin_gateway.is_ready() is False
