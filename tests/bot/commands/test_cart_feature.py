"""
🧪 test_cart_feature.py — тести каталогу й редагування кошика

Перевіряє:
- Вибір кількості та додавання до кошика
- Рядки кошика з тировою ціною
- ➕ / ➖ / 🗑️ / очищення, ліміт max_order_quantity
- Картку товару з фото при подвійному натисканні
"""

import asyncio
import dataclasses

import pytest

CHAT = 100
USER = str(CHAT)


async def _quantities(container):
    return {line.product_id: line.quantity for line in await container.storage.list_cart(USER)}


@pytest.mark.asyncio
async def test_add_to_cart_offers_quantity_picker(press, transport):
    """🔢 add_to_cart_p1 → кнопки select_qty_p1_<n>."""
    await press("add_to_cart_p1")

    assert "select_qty_p1_1" in transport.last_callbacks()
    assert "select_qty_p1_10" in transport.last_callbacks()


@pytest.mark.asyncio
async def test_quantity_picker_respects_max_order_quantity(press, transport):
    """📏 p2 дозволяє максимум 4 — кнопки 5 і 10 не показуються."""
    await press("add_to_cart_p2")

    picks = [data for data in transport.last_callbacks() if data.startswith("select_qty_")]
    assert picks == ["select_qty_p2_1", "select_qty_p2_2", "select_qty_p2_3"]


@pytest.mark.asyncio
async def test_select_quantity_accumulates(press, container, transport):
    """➕ Повторний вибір додається до наявної кількості."""
    await press("select_qty_p1_5")
    await press("select_qty_p1_10")

    assert await _quantities(container) == {"p1": 15}
    assert "Added to cart" in transport.last_text


@pytest.mark.asyncio
async def test_cart_lines_use_tier_prices(press, container, transport):
    """💸 15 шт потрапляють у тир [10-] → $8.00."""
    await container.storage.set_cart_quantity(USER, "p1", 15)
    await press("carts")

    assert "Qty: 15 × $8.00 = $120.00" in transport.last_text
    assert "Total: $120.00" in transport.last_text
    assert "checkout" in transport.last_callbacks()


@pytest.mark.asyncio
async def test_plus_and_minus_edit_live_quantity(press, container):
    """➕➖ Кнопки рахують від живого рядка, ➖ до нуля видаляє рядок."""
    await container.storage.set_cart_quantity(USER, "p1", 2)

    await press("cart_plus_p1_2")
    assert await _quantities(container) == {"p1": 3}

    await press("cart_minus_p1_3")
    await press("cart_minus_p1_2")
    await press("cart_minus_p1_1")
    assert await _quantities(container) == {}


@pytest.mark.asyncio
async def test_plus_is_capped_by_max_order_quantity(press, container):
    """📏 p2: 4 → ➕ → все ще 4."""
    await container.storage.set_cart_quantity(USER, "p2", 4)
    await press("cart_plus_p2_4")
    assert await _quantities(container) == {"p2": 4}


@pytest.mark.asyncio
async def test_remove_and_clear(press, container, transport):
    """🗑️ Видалення рядка і повне очищення кошика."""
    await container.storage.set_cart_quantity(USER, "p1", 1)
    await container.storage.set_cart_quantity(USER, "p2", 1)

    await press("cart_remove_p2")
    assert await _quantities(container) == {"p1": 1}

    await press("clear_cart")
    assert await _quantities(container) == {}
    assert "Cart Cleared" in transport.last_text
    assert "cart is empty" in transport.last_text


@pytest.mark.asyncio
async def test_stale_cart_line_rerenders_cart(press, container, transport):
    """🕸️ ➕ для товару, якого вже немає в кошику, просто перемальовує кошик."""
    await press("cart_plus_p1_3")

    assert await _quantities(container) == {}
    assert "cart is empty" in transport.last_text


@pytest.mark.asyncio
async def test_stale_product_shows_main_menu(press, transport):
    """🕸️ product_<видалений id> → головне меню."""
    await press("product_ghost")
    assert "Welcome to Test Shop" in transport.last_text


@pytest.mark.asyncio
async def test_product_card_shows_bulk_prices(press, transport):
    """🛍️ Картка товару з тирами і кнопкою додавання."""
    await press("product_p1")

    assert "Beans" in transport.last_text
    assert "add_to_cart_p1" in transport.last_callbacks()
    assert "wishlist_add_p1" in transport.last_callbacks()


@pytest.mark.asyncio
async def test_product_photo_double_tap_keeps_one_card(press, container, transport):
    """📸 Два одночасні product_p1 з фото: видно лише фото й деталі другого натискання."""
    storage = container.storage
    storage._products["p1"] = dataclasses.replace(storage._products["p1"], image_url="https://img.example/p1.jpg")
    for name in ("send_text", "send_photo", "delete_message"):
        original = getattr(transport, name)

        async def wrapper(*args, _original=original, **kwargs):
            await asyncio.sleep(0)
            return await _original(*args, **kwargs)

        setattr(transport, name, wrapper)

    await asyncio.gather(press("product_p1"), press("product_p1"))

    sent = {mid for _, mid, _, _ in transport.sent} | {mid for _, mid, _, _ in transport.photos}
    shown = sent - {mid for _, mid in transport.deleted}
    tracked = container.conversations.tracked(CHAT)
    assert shown == set(tracked)
    assert len(tracked) == 2
    assert len(transport.photos) == 2
    assert "add_to_cart_p1" in transport.last_callbacks()
